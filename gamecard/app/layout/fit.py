"""Aspect-fit resizing and the marquee fit policy."""

from __future__ import annotations

import logging

from ..config import Config
from ..exceptions import LayoutError
from ..models import BoundingBox, ImageSize

logger = logging.getLogger("gamecard.layout.fit")

DEFAULT_MARQUEE_BOX = BoundingBox(Config.MARQUEE_MAX_WIDTH, Config.MARQUEE_MAX_HEIGHT)


def fit(source: ImageSize, box: BoundingBox) -> ImageSize:
    """Largest aspect-preserving size of ``source`` that fits inside ``box``.

    Cross-multiplies instead of comparing float ratios, and floors the free
    dimension. Equal ratios take the height-limited branch.

    Args:
        source: Natural image size, both dimensions positive.
        box: Maximum allowed size.

    Returns:
        Resolved size, tight against the box on at least one axis.
    """
    if source.width * box.height > source.height * box.width:
        # Width is limiting
        return ImageSize(box.width, source.height * box.width // source.width)
    # Height is limiting
    return ImageSize(source.width * box.height // source.height, box.height)


def fit_marquee(
    marquee_source: ImageSize,
    cover_height: int,
    available_space: int = Config.AVAILABLE_SPACE,
    marquee_box: BoundingBox = DEFAULT_MARQUEE_BOX,
    padding_floor: int = Config.PADDING_FLOOR,
) -> ImageSize:
    """Size the marquee so that it and the cover share the content region.

    The marquee is scaled to the full box width when both images fit in
    ``available_space``. Otherwise its height is capped at whatever is left
    after the cover and ``padding_floor``, and it is re-fitted against that
    narrower box.

    Args:
        marquee_source: Natural marquee size.
        cover_height: Already resolved cover height.
        available_space: Height of the content region.
        marquee_box: Maximum marquee size; only its width applies here.
        padding_floor: Minimum combined padding kept on overflow.

    Returns:
        Resolved marquee size.

    Raises:
        LayoutError: If the cover leaves no room for the marquee.
    """
    height_at_max_width = marquee_source.height * marquee_box.width // marquee_source.width
    total_content = height_at_max_width + cover_height

    if total_content <= available_space:
        return ImageSize(marquee_box.width, height_at_max_width)

    max_marquee_height = available_space - cover_height - padding_floor
    if max_marquee_height <= 0:
        raise LayoutError(
            f"No room for marquee: cover height {cover_height} leaves "
            f"{max_marquee_height}px of {available_space}px"
        )

    logger.debug(
        "Marquee overflow (%d > %d), capping height at %d",
        total_content, available_space, max_marquee_height,
    )
    return fit(marquee_source, BoundingBox(marquee_box.width, max_marquee_height))
