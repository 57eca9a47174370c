"""Atomic output writing."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path

from PIL import Image

from .config import Config
from .constants import JPEG_EXTENSIONS

logger = logging.getLogger("gamecard.writer")


def _flatten(image: Image.Image, background: tuple[int, int, int]) -> Image.Image:
    rgba = image.convert("RGBA")
    canvas = Image.new("RGB", rgba.size, background)
    canvas.paste(rgba, (0, 0), rgba)
    return canvas


def atomic_save(image: Image.Image, path: str | Path) -> Path:
    """Write ``image`` to ``path`` so readers never see a partial file.

    The image is encoded into a temporary file in the destination folder and
    renamed over ``path``. The format follows the extension: JPEG output is
    flattened onto white, anything else is written as PNG with alpha.

    Returns:
        The destination path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if path.suffix.lower() in JPEG_EXTENSIONS:
        image = _flatten(image, Config.JPEG_BACKGROUND)
        fmt, params = "JPEG", {"quality": Config.JPEG_QUALITY}
    else:
        fmt, params = "PNG", {}

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            image.save(f, format=fmt, **params)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise

    logger.debug("Wrote %s", path)
    return path
