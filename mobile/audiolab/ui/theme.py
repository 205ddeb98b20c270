"""Central theme tokens for the Kivy client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from kivy.metrics import dp

Color = Tuple[float, float, float, float]


def rgba(value: str, alpha: float = 1.0) -> Color:
    """Convert hex to normalized RGBA."""
    value = value.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Expected 6 hex chars, got {value!r}")
    r = int(value[0:2], 16) / 255.0
    g = int(value[2:4], 16) / 255.0
    b = int(value[4:6], 16) / 255.0
    return (r, g, b, alpha)


@dataclass(frozen=True)
class Palette:
    background: Color
    surface: Color
    surface_alt: Color
    card: Color
    outline: Color
    accent: Color
    accent_muted: Color
    danger: Color
    class0: Color
    class1: Color
    neutral: Color
    text_primary: Color
    text_secondary: Color
    text_muted: Color
    text_on_result: Color

    def result_color(self, token: str) -> Color:
        """Map a live display color token (``class0``, ``class1``, ``neutral``)."""
        if token in ("class0", "class1"):
            return getattr(self, token)
        return self.neutral


@dataclass(frozen=True)
class Typography:
    hero: str
    title: str
    body: str
    caption: str


@dataclass(frozen=True)
class Spacing:
    grid: float
    section: float
    card_padding: float
    toolbar: float


@dataclass(frozen=True)
class LabTheme:
    palette: Palette
    typography: Typography
    spacing: Spacing

    @staticmethod
    def default() -> "LabTheme":
        palette = Palette(
            background=rgba("#0E1117"),
            surface=rgba("#161B24"),
            surface_alt=rgba("#1E2532"),
            card=rgba("#1A2130"),
            outline=rgba("#2E3A4F"),
            accent=rgba("#3D7EFF"),
            accent_muted=rgba("#6FA0FF"),
            danger=rgba("#F0545C"),
            class0=rgba("#34C759"),
            class1=rgba("#0A84FF"),
            neutral=rgba("#FFFFFF"),
            text_primary=rgba("#F4F6FB"),
            text_secondary=rgba("#B8C2D6"),
            text_muted=rgba("#7C879B"),
            text_on_result=rgba("#000000"),
        )
        typography = Typography(
            hero="H3",
            title="H5",
            body="Body1",
            caption="Caption",
        )
        spacing = Spacing(
            grid=dp(12),
            section=dp(18),
            card_padding=dp(20),
            toolbar=dp(8),
        )
        return LabTheme(palette=palette, typography=typography, spacing=spacing)


__all__ = ["LabTheme", "Palette", "Typography", "Spacing", "rgba"]
