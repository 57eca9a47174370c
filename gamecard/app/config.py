"""Global configuration for GameCard."""

from __future__ import annotations

from PIL import Image


class Config:
    """Global configuration."""

    # Input / output layout
    TEMPLATE_NAME = "template.png"
    COVERS_SUBDIR = "covers"
    MARQUEES_SUBDIR = "marquees"
    OUTPUT_SUBDIR = "output"
    GAMELIST_NAME = "gamelist.xml"

    # Template frame
    FRAME_WIDTH = 638
    FRAME_HEIGHT = 1012

    # Content region (y52 to y875)
    REGION_TOP = 52
    AVAILABLE_SPACE = 823

    # Per-role maximum sizes
    COVER_MAX_WIDTH = 589
    COVER_MAX_HEIGHT = 713
    MARQUEE_MAX_WIDTH = 589
    MARQUEE_MAX_HEIGHT = 109

    # Minimum combined padding kept when the marquee has to shrink
    PADDING_FLOOR = 30

    # Border drawn around the eroded template
    BORDER_WIDTH = 1
    BORDER_COLOR = (0, 0, 0, 255)
    ERODE_SIZE = 1  # square:1 -> 3x3 kernel

    # Captions: (x, y) of the top-left corner on the bordered canvas
    CAPTION_SIZE = (174, 90)
    TITLE_POSITION = (71, 885)
    CATEGORY_POSITION = (396, 885)
    CAPTION_FILL = (0, 0, 0, 255)
    CAPTION_MIN_FONT_SIZE = 6
    CAPTION_MAX_FONT_SIZE = 72
    CAPTION_LINE_SPACING = 2

    # Monospace bold fonts, tried in order
    FONT_CANDIDATES = (
        "DejaVuSansMono-Bold.ttf",
        "LiberationMono-Bold.ttf",
        "courbd.ttf",
        "Courier New Bold.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSansMono-Bold.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationMono-Bold.ttf",
        "/System/Library/Fonts/Supplemental/Courier New Bold.ttf",
    )
    MAGICK_FONT = "Courier-Bold"

    # Quality
    RESIZE_QUALITY = Image.Resampling.LANCZOS
    GAMMA = 2.2
    JPEG_QUALITY = 95
    JPEG_BACKGROUND = (255, 255, 255)

    # External tools
    MAGICK_CMD = "magick"
    MAGICK_TIMEOUT = 120  # seconds

    # Concurrency
    DEFAULT_WORKERS = 1
