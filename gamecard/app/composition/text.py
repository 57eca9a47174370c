"""Caption rendering: word-wrapped text auto-sized into a fixed box."""

from __future__ import annotations

import logging
from functools import lru_cache

from PIL import Image, ImageDraw, ImageFont

from ..config import Config
from ..enums import TextAlign

logger = logging.getLogger("gamecard.composition.text")


@lru_cache(maxsize=1)
def find_font_path() -> str | None:
    """Return the first loadable monospace bold font, or None."""
    for candidate in Config.FONT_CANDIDATES:
        try:
            ImageFont.truetype(candidate, 12)
        except OSError:
            continue
        logger.debug("Caption font: %s", candidate)
        return candidate
    logger.warning("No monospace bold font found, using Pillow's default font")
    return None


@lru_cache(maxsize=128)
def load_font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    path = find_font_path()
    if path is None:
        return ImageFont.load_default(size=size)
    return ImageFont.truetype(path, size)


def _text_width(draw: ImageDraw.ImageDraw, text: str, font) -> int:
    left, _top, right, _bottom = draw.textbbox((0, 0), text, font=font)
    return right - left


def _line_height(draw: ImageDraw.ImageDraw, font) -> int:
    _left, top, _right, bottom = draw.textbbox((0, 0), "Ayg|", font=font)
    return max(1, bottom - top)


def wrap_text(
    draw: ImageDraw.ImageDraw, text: str, font, max_width: int
) -> list[str]:
    """Greedy word wrap; words wider than ``max_width`` are split by character."""
    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}".strip()
        if _text_width(draw, candidate, font) <= max_width:
            current = candidate
            continue

        if current:
            lines.append(current)
            current = ""

        if _text_width(draw, word, font) <= max_width:
            current = word
            continue

        segment = ""
        for ch in word:
            if segment and _text_width(draw, segment + ch, font) > max_width:
                lines.append(segment)
                segment = ch
            else:
                segment += ch
        current = segment

    if current:
        lines.append(current)
    return lines


def _block_height(draw: ImageDraw.ImageDraw, font, line_count: int) -> int:
    if line_count == 0:
        return 0
    return line_count * _line_height(draw, font) + (line_count - 1) * Config.CAPTION_LINE_SPACING


def _fits(draw: ImageDraw.ImageDraw, text: str, font, box: tuple[int, int]) -> bool:
    lines = wrap_text(draw, text, font, box[0])
    if any(_text_width(draw, line, font) > box[0] for line in lines):
        return False
    return _block_height(draw, font, len(lines)) <= box[1]


def choose_font_size(
    text: str,
    box: tuple[int, int],
    min_size: int = Config.CAPTION_MIN_FONT_SIZE,
    max_size: int = Config.CAPTION_MAX_FONT_SIZE,
) -> int:
    """Largest font size at which ``text`` wraps into ``box``.

    Binary search; falls back to ``min_size`` when nothing fits.
    """
    draw = ImageDraw.Draw(Image.new("RGBA", (1, 1)))
    lo, hi = min_size, max_size
    best = min_size
    while lo <= hi:
        mid = (lo + hi) // 2
        if _fits(draw, text, load_font(mid), box):
            best = mid
            lo = mid + 1
        else:
            hi = mid - 1
    return best


def render_caption(
    text: str,
    size: tuple[int, int] = Config.CAPTION_SIZE,
    align: TextAlign = TextAlign.LEFT,
    fill: tuple[int, int, int, int] = Config.CAPTION_FILL,
) -> Image.Image:
    """Render ``text`` into a transparent box of ``size``.

    Lines are aligned left or right and the block is centred vertically.
    Text that still overflows at the minimum font size is clipped by the box.
    """
    box_w, box_h = size
    caption = Image.new("RGBA", (box_w, box_h), (0, 0, 0, 0))
    text = " ".join(text.split())
    if not text:
        return caption

    draw = ImageDraw.Draw(caption)
    font = load_font(choose_font_size(text, size))
    lines = wrap_text(draw, text, font, box_w)
    line_h = _line_height(draw, font)
    ref_top = draw.textbbox((0, 0), "Ayg|", font=font)[1]

    y = (box_h - _block_height(draw, font, len(lines))) // 2
    for line in lines:
        left, _top, right, _bottom = draw.textbbox((0, 0), line, font=font)
        if align is TextAlign.RIGHT:
            x = box_w - right
        else:
            x = -left
        draw.text((x, y - ref_top), line, font=font, fill=tuple(fill))
        y += line_h + Config.CAPTION_LINE_SPACING

    return caption
