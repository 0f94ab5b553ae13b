"""Color palette for the admin console supporting light and dark themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Theme(Enum):
    """Application theme options."""
    LIGHT = auto()
    DARK = auto()


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        """Get color value for the specified theme."""
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the console."""

    TEXT_PRIMARY = ThemeColors(light="#111827", dark="#F3F4F6")
    BACKGROUND_PRIMARY = ThemeColors(light="#FFFFFF", dark="#1F2937")
    BACKGROUND_ALTERNATE = ThemeColors(light="#F9FAFB", dark="#273244")

    ERROR = ThemeColors(light="#DC2626", dark="#F87171")

    BORDER_PRIMARY = ThemeColors(light="#D1D5DB", dark="#4B5563")

    BUTTON_PRIMARY_BG = ThemeColors(light="#2563EB", dark="#60A5FA")
    BUTTON_PRIMARY_TEXT = ThemeColors(light="#FFFFFF", dark="#111827")
    BUTTON_SECONDARY_BG = ThemeColors(light="#E5E7EB", dark="#374151")
    BUTTON_HOVER_BG = ThemeColors(light="#D1D5DB", dark="#4B5563")
