"""Shared constants for GameCard."""

from __future__ import annotations

from .enums import ItemStatus

# Supported cover / marquee extensions (matched case-insensitively)
SUPPORTED_EXTENSIONS = (".png", ".jpg", ".jpeg")

JPEG_EXTENSIONS = frozenset({".jpg", ".jpeg"})

# Terminal states that count as skipped
SKIPPED_STATUSES = frozenset({
    ItemStatus.SKIPPED_NO_MARQUEE,
    ItemStatus.SKIPPED_LAYOUT,
    ItemStatus.SKIPPED_COMPOSITE,
    ItemStatus.SKIPPED_TEXT,
})

# Process exit codes
EXIT_OK = 0
EXIT_FATAL = 1
EXIT_INTERRUPTED = 130
