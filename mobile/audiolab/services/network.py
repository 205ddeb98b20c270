"""HTTP client for the remote training/classification service."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Union

import httpx
from pydantic import ValidationError

from ..audio.types import AudioSample
from ..config import CONFIG
from ..store.settings_store import SettingsStore
from .schemas import ClassificationResult

EMPTY_NAME_MESSAGE = "O nome da rede neural não pode estar vazio."
EMPTY_BATCH_MESSAGE = "Nenhuma amostra para treinar."
TRAINING_SUCCESS = "Treinamento concluído com sucesso!"
SAVE_SUCCESS_TEMPLATE = "Rede neural {name} salva com sucesso!"

WAV_MIME = "audio/wav"

SampleRef = Union[AudioSample, Path, str]


def is_training_success(text: Optional[str]) -> bool:
    return text == TRAINING_SUCCESS


def is_save_success(text: Optional[str], name: str) -> bool:
    return text == SAVE_SUCCESS_TEMPLATE.format(name=name)


class ApiError(Exception):
    pass


class ResponseFormatError(ApiError):
    """The server answered, but not with ``{"class": int, "confidence": float}``."""


def _as_path(sample: SampleRef) -> Path:
    if isinstance(sample, AudioSample):
        return sample.path
    return Path(sample)


class ClassifierClient:
    def __init__(
        self,
        settings: SettingsStore,
        *,
        timeout: Optional[float] = CONFIG.request_timeout,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.settings_store = settings
        self.timeout = timeout
        self._client = client or httpx.Client(timeout=timeout)

    def _url(self, path: str) -> str:
        base = (self.settings_store.get().server_url or CONFIG.server_url).rstrip("/")
        if not base:
            raise ApiError("Server URL missing")
        return f"{base}{path}"

    def _text_request(self, method: str, path: str, **kwargs) -> str:
        """Run a request whose outcome, success or not, is reported as text."""
        try:
            resp = self._client.request(method, self._url(path), **kwargs)
            resp.raise_for_status()
            return resp.text
        except httpx.HTTPStatusError as exc:
            body = exc.response.text.strip()
            detail = f"server returned {exc.response.status_code}"
            return f"Error: {detail}: {body}" if body else f"Error: {detail}"
        except Exception as exc:
            return f"Error: {exc}"

    def init_network(self, name: str) -> str:
        if not name:
            return EMPTY_NAME_MESSAGE
        return self._text_request("POST", "/initNN", json={"name": name})

    def save_network(self) -> str:
        return self._text_request("GET", "/saveNN")

    def train_network(self, samples: Sequence[SampleRef], labels: Sequence[int]) -> str:
        if len(samples) != len(labels):
            raise ValueError(f"{len(samples)} sample(s) but {len(labels)} label(s)")
        if not samples:
            return EMPTY_BATCH_MESSAGE
        # Read the whole batch up front; one unreadable file aborts the upload.
        files: List[tuple] = []
        for sample in samples:
            path = _as_path(sample)
            try:
                payload = path.read_bytes()
            except OSError as exc:
                return f"Error: could not read {path.name}: {exc}"
            files.append(("audio_files", (path.name, payload, WAV_MIME)))
        # Labels go after the audio parts as plain form fields.
        files.extend(("labels", (None, str(int(label)))) for label in labels)
        return self._text_request("POST", "/trainNN", files=files)

    def classify(self, sample: SampleRef) -> ClassificationResult:
        path = _as_path(sample)
        try:
            payload = path.read_bytes()
        except OSError as exc:
            raise ApiError(f"Invalid file data: {exc}") from exc
        try:
            resp = self._client.post(
                self._url("/classify"),
                files={"audio": (path.name, payload, WAV_MIME)},
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ApiError(f"Classification failed: {exc.response.status_code}") from exc
        except ApiError:
            raise
        except Exception as exc:
            raise ApiError(str(exc) or exc.__class__.__name__) from exc
        try:
            return ClassificationResult.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise ResponseFormatError("Invalid response") from exc

    def close(self) -> None:
        self._client.close()


__all__ = [
    "ApiError",
    "ClassifierClient",
    "ResponseFormatError",
    "EMPTY_BATCH_MESSAGE",
    "EMPTY_NAME_MESSAGE",
    "TRAINING_SUCCESS",
    "is_save_success",
    "is_training_success",
]
