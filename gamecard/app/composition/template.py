"""Template preparation: alpha erosion and border."""

from __future__ import annotations

import logging

import cv2
import numpy as np
from PIL import Image

from ..config import Config

logger = logging.getLogger("gamecard.composition.template")


def erode_alpha(image: Image.Image, radius: int = Config.ERODE_SIZE) -> Image.Image:
    """Shrink the opaque area of ``image`` by ``radius`` pixels.

    Uses a square structuring element of side ``2 * radius + 1``, so
    anti-aliased fringes around rounded corners are dropped before the
    template is composited. Pixels outside the image count as opaque.

    Args:
        image: Template image (any mode).
        radius: Erosion radius in pixels; 0 returns an RGBA copy.

    Returns:
        RGBA image with the eroded alpha channel.
    """
    rgba = image.convert("RGBA")
    if radius <= 0:
        return rgba.copy()

    alpha = np.array(rgba.getchannel("A"), dtype=np.uint8)
    kernel = np.ones((2 * radius + 1, 2 * radius + 1), dtype=np.uint8)
    eroded = cv2.erode(alpha, kernel, iterations=1, borderType=cv2.BORDER_REPLICATE)

    result = rgba.copy()
    result.putalpha(Image.fromarray(eroded))
    return result


def add_border(
    image: Image.Image,
    width: int = Config.BORDER_WIDTH,
    color: tuple[int, int, int, int] = Config.BORDER_COLOR,
) -> Image.Image:
    """Surround ``image`` with a solid border.

    The canvas grows by ``width`` on every side and ``image`` is composited
    over a canvas filled with ``color``, so transparent pixels take the
    border colour.
    """
    rgba = image.convert("RGBA")
    if width <= 0:
        return rgba

    canvas = Image.new(
        "RGBA", (rgba.width + 2 * width, rgba.height + 2 * width), tuple(color)
    )
    canvas.alpha_composite(rgba, (width, width))
    return canvas


def prepare_template(
    template: Image.Image,
    border_width: int = Config.BORDER_WIDTH,
    border_color: tuple[int, int, int, int] = Config.BORDER_COLOR,
) -> Image.Image:
    """Erode the template alpha and add the border."""
    eroded = erode_alpha(template)
    return add_border(eroded, border_width, border_color)
