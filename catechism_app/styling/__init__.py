"""Styling module for the CatechismQt admin console."""

from .color_palette import ColorPalette, Theme

__all__ = ["ColorPalette", "Theme"]
