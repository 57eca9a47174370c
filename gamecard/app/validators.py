"""Input validation for GameCard."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from .exceptions import TemplateNotFoundError, ValidationError
from .models import FrameGeometry, ImageSize

logger = logging.getLogger("gamecard.validators")


def validate_dimensions(width: int, height: int) -> None:
    """Validate natural image dimensions.

    Args:
        width: Image width in pixels.
        height: Image height in pixels.

    Raises:
        ValidationError: If dimensions are invalid.
    """
    if not isinstance(width, int) or not isinstance(height, int):
        raise ValidationError(
            f"Dimensions must be integers, got {type(width).__name__} and {type(height).__name__}"
        )
    if width <= 0 or height <= 0:
        raise ValidationError(f"Dimensions must be positive, got {width}x{height}")


def read_image_size(path: str | Path) -> ImageSize:
    """Read the natural size of an image without decoding its pixels.

    Raises:
        ValidationError: If the file cannot be identified or has no area. Headers
            declaring more pixels than Pillow allows are rejected the same way.
    """
    try:
        with Image.open(path) as img:
            width, height = img.size
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise ValidationError(f"Cannot identify image '{path}': {e}") from e

    validate_dimensions(width, height)
    return ImageSize(width, height)


def validate_template(path: str | Path, geometry: FrameGeometry) -> ImageSize:
    """Check the template exists and report its size.

    A template whose size differs from the configured frame is still used,
    with a warning, since the layout only depends on the content region.

    Raises:
        TemplateNotFoundError: If the template file is missing.
        ValidationError: If the template cannot be read.
    """
    p = Path(path)
    if not p.is_file():
        raise TemplateNotFoundError(f"Template file '{path}' not found!")

    size = read_image_size(p)
    if (size.width, size.height) != (geometry.frame_width, geometry.frame_height):
        logger.warning(
            "Template %s is %dx%d, expected %dx%d",
            p.name, size.width, size.height,
            geometry.frame_width, geometry.frame_height,
        )
    return size
