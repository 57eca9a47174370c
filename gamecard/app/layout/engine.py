"""Layout engine stacking the marquee above the cover."""

from __future__ import annotations

import logging

from ..config import Config
from ..exceptions import LayoutError
from ..models import FrameGeometry, ImageSize, LayoutResult
from .fit import fit, fit_marquee

logger = logging.getLogger("gamecard.layout")


def solve_vertical_layout(
    marquee_height: int,
    cover_height: int,
    available_space: int = Config.AVAILABLE_SPACE,
    region_top: int = Config.REGION_TOP,
) -> tuple[int, int, int]:
    """Distribute the free space in three equal gaps.

    [top padding] [marquee] [middle padding] [cover] [bottom padding]

    Returns:
        Tuple of (padding, marquee_center_y, cover_center_y).

    Raises:
        LayoutError: If both images together exceed ``available_space``.
    """
    total_content = marquee_height + cover_height
    if total_content > available_space:
        raise LayoutError(
            f"Content height {total_content} exceeds available space {available_space}"
        )

    padding = (available_space - total_content) // 3

    marquee_top = region_top + padding
    cover_top = marquee_top + marquee_height + padding

    return (
        padding,
        marquee_top + marquee_height // 2,
        cover_top + cover_height // 2,
    )


class LayoutEngine:
    """Compute resolved sizes and positions for one cover/marquee pair.

    Pure arithmetic on image sizes; never touches pixels.
    """

    def __init__(self, geometry: FrameGeometry | None = None) -> None:
        self.geometry = geometry or FrameGeometry()

    def calculate_layout(
        self, cover_source: ImageSize, marquee_source: ImageSize
    ) -> LayoutResult:
        """Calculate the layout for one item.

        Args:
            cover_source: Natural cover size.
            marquee_source: Natural marquee size.

        Returns:
            LayoutResult with resolved sizes and vertical centres.

        Raises:
            LayoutError: If no non-overlapping layout exists.
        """
        g = self.geometry

        cover_size = fit(cover_source, g.cover_box)
        marquee_size = fit_marquee(
            marquee_source,
            cover_size.height,
            available_space=g.available_space,
            marquee_box=g.marquee_box,
            padding_floor=g.padding_floor,
        )

        for role, size in (("cover", cover_size), ("marquee", marquee_size)):
            if size.width <= 0 or size.height <= 0:
                raise LayoutError(
                    f"{role} resolves to {size.width}x{size.height}; source is too thin"
                )

        padding, marquee_center_y, cover_center_y = solve_vertical_layout(
            marquee_size.height,
            cover_size.height,
            available_space=g.available_space,
            region_top=g.region_top,
        )

        logger.debug(
            "Layout: cover %dx%d @y%d, marquee %dx%d @y%d, padding %d",
            cover_size.width, cover_size.height, cover_center_y,
            marquee_size.width, marquee_size.height, marquee_center_y,
            padding,
        )

        return LayoutResult(
            marquee_size=marquee_size,
            cover_size=cover_size,
            marquee_center_y=marquee_center_y,
            cover_center_y=cover_center_y,
            padding=padding,
        )
