"""Network lifecycle and inference endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import PlainTextResponse

from ..metrics import TRAINING_COUNTER
from ..schemas import ClassifyResponse, InitRequest
from ..services.network_registry import AudioDecodeError, NetworkRegistry, RegistryError

router = APIRouter(tags=["network"])

TRAINING_SUCCESS = "Treinamento concluído com sucesso!"


def get_registry(request: Request) -> NetworkRegistry:
    return request.app.state.registry


@router.post("/initNN", response_class=PlainTextResponse)
async def init_network(payload: InitRequest, registry: NetworkRegistry = Depends(get_registry)):
    if not payload.name:
        return PlainTextResponse("O nome da rede neural não pode estar vazio.", status_code=400)
    registry.init(payload.name)
    return f"Rede neural {payload.name} iniciada com sucesso!"


@router.get("/saveNN", response_class=PlainTextResponse)
async def save_network(registry: NetworkRegistry = Depends(get_registry)):
    try:
        registry.save()
    except RegistryError as exc:
        return PlainTextResponse(str(exc), status_code=409)
    return f"Rede neural {registry.name} salva com sucesso!"


@router.post("/trainNN", response_class=PlainTextResponse)
async def train_network(
    audio_files: List[UploadFile] = File(...),
    labels: List[int] = Form(...),
    registry: NetworkRegistry = Depends(get_registry),
):
    clips = [await upload.read() for upload in audio_files]
    try:
        registry.train(clips, labels)
    except RegistryError as exc:
        TRAINING_COUNTER.labels(status="rejected").inc()
        return PlainTextResponse(str(exc), status_code=409)
    except ValueError as exc:
        TRAINING_COUNTER.labels(status="invalid").inc()
        return PlainTextResponse(str(exc), status_code=400)
    TRAINING_COUNTER.labels(status="ok").inc()
    return TRAINING_SUCCESS


@router.post("/classify", response_model=ClassifyResponse)
async def classify(audio: UploadFile = File(...), registry: NetworkRegistry = Depends(get_registry)):
    clip = await audio.read()
    try:
        label, confidence = registry.classify(clip)
    except RegistryError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except AudioDecodeError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return ClassifyResponse(class_label=label, confidence=confidence)
