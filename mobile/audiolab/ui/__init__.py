"""UI helpers (theme, reusable widgets)."""

from .theme import LabTheme, Palette, Spacing, Typography, rgba

__all__ = ["LabTheme", "Palette", "Spacing", "Typography", "rgba"]
