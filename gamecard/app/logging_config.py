"""Structured logging configuration for GameCard."""

from __future__ import annotations

import logging
import sys
import warnings

from PIL import Image


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure structured logging for the application.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR).

    Returns:
        The root gamecard logger.
    """
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger("gamecard")
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid duplicate handlers on repeated calls
    if not root_logger.handlers:
        root_logger.addHandler(handler)

    # Large scans trip the header-size warning; images past the hard limit
    # are rejected per item by read_image_size
    warnings.filterwarnings("ignore", category=Image.DecompressionBombWarning)
    # Pillow's PNG plugin logs every chunk at DEBUG
    logging.getLogger("PIL").setLevel(logging.WARNING)

    return root_logger
