"""High-quality image resize with gamma correction."""

from __future__ import annotations

import logging

import numpy as np
from PIL import Image

from ..config import Config

logger = logging.getLogger("gamecard.composition.resize")


def _resize_plane(plane: np.ndarray, target_size: tuple[int, int]) -> np.ndarray:
    resized = Image.fromarray(plane).resize(target_size, Config.RESIZE_QUALITY)
    return np.asarray(resized, dtype=np.float32)


def high_quality_resize(
    image: Image.Image, target_size: tuple[int, int]
) -> Image.Image:
    """Resize in linear light with premultiplied alpha.

    Each channel is resampled as a 32-bit float plane so the linear values
    are not quantised to 8 bits between decode and encode.

    Args:
        image: Source PIL image (any mode).
        target_size: Target (width, height), both positive.

    Returns:
        Resized RGBA image.

    Raises:
        ValueError: If the target size has no area.
    """
    if target_size[0] <= 0 or target_size[1] <= 0:
        raise ValueError(f"Invalid target size {target_size[0]}x{target_size[1]}")

    image = image.convert("RGBA")
    if image.size == tuple(target_size):
        return image

    arr = np.asarray(image, dtype=np.float32) / 255.0
    alpha = arr[:, :, 3]

    # Gamma decode, then premultiply so transparent pixels don't bleed
    linear = np.power(arr[:, :, :3], Config.GAMMA) * alpha[:, :, None]

    planes = [_resize_plane(np.ascontiguousarray(linear[:, :, c]), target_size) for c in range(3)]
    alpha_resized = np.clip(_resize_plane(np.ascontiguousarray(alpha), target_size), 0.0, 1.0)

    rgb = np.clip(np.stack(planes, axis=2), 0.0, None)
    safe_alpha = np.where(alpha_resized > 0, alpha_resized, 1.0)[:, :, None]
    rgb = np.clip(rgb / safe_alpha, 0.0, 1.0)

    # Gamma encode back to sRGB
    encoded = np.power(rgb, 1.0 / Config.GAMMA)
    out = np.concatenate([encoded, alpha_resized[:, :, None]], axis=2)

    return Image.fromarray(np.round(out * 255.0).astype(np.uint8))
