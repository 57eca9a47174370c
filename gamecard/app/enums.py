"""Enumerations for GameCard."""

from __future__ import annotations

from enum import Enum


class ItemStatus(Enum):
    """Terminal state of one item in the batch."""
    DONE = "done"
    SKIPPED_NO_MARQUEE = "no_marquee"
    SKIPPED_LAYOUT = "layout_error"
    SKIPPED_COMPOSITE = "composite_error"
    SKIPPED_TEXT = "text_error"


class TextAlign(Enum):
    """Horizontal alignment of a caption inside its box."""
    LEFT = "left"  # gravity West
    RIGHT = "right"  # gravity East


class BackendKind(Enum):
    """Available compositing backends."""
    PILLOW = "pillow"
    MAGICK = "magick"
