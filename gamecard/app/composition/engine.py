"""Pillow compositing backend."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import cv2
from PIL import Image, UnidentifiedImageError

from ..exceptions import CompositeError, TextRenderError
from ..models import CompositionSpec, ImageLayer, TextLayer
from .base_backend import CompositionBackend
from .resize import high_quality_resize
from .template import prepare_template
from .text import render_caption

logger = logging.getLogger("gamecard.composition")


class PillowBackend(CompositionBackend):
    """Compose cards in-process.

    Features:
    - Alpha-eroded, bordered template (prepared once per template file)
    - Gamma-correct resizing of cover and marquee
    - Auto-sized captions
    """

    name = "pillow"

    def __init__(self) -> None:
        self._templates: dict[tuple, Image.Image] = {}
        self._lock = threading.Lock()

    def compose(self, spec: CompositionSpec) -> Image.Image:
        """Compose the card described by ``spec``.

        Args:
            spec: Template, image layers and text layers.

        Returns:
            RGBA image of the bordered template size.
        """
        try:
            canvas = self._prepared_template(spec).copy()
            for layer in spec.image_layers:
                self._composite_image(canvas, layer)
        except (
            OSError, UnidentifiedImageError, Image.DecompressionBombError, ValueError, cv2.error
        ) as e:
            raise CompositeError(f"Compositing failed: {e}") from e

        try:
            for text_layer in spec.text_layers:
                self._composite_text(canvas, text_layer)
        except (OSError, ValueError) as e:
            raise TextRenderError(f"Caption rendering failed: {e}") from e

        return canvas

    def _prepared_template(self, spec: CompositionSpec) -> Image.Image:
        """Return the eroded, bordered template, cached per file and border."""
        path = Path(spec.template_path)
        g = spec.geometry
        key = (str(path.resolve()), path.stat().st_mtime_ns, g.border_width, tuple(g.border_color))

        with self._lock:
            cached = self._templates.get(key)
            if cached is None:
                with Image.open(path) as template:
                    cached = prepare_template(template, g.border_width, g.border_color)
                self._templates[key] = cached
                logger.debug("Prepared template %s -> %dx%d", path.name, *cached.size)
        return cached

    def _composite_image(self, canvas: Image.Image, layer: ImageLayer) -> None:
        with Image.open(layer.path) as src:
            resized = high_quality_resize(src, layer.size.to_tuple())
        canvas.alpha_composite(resized, dest=layer.top_left)

    def _composite_text(self, canvas: Image.Image, layer: TextLayer) -> None:
        caption = render_caption(layer.text, layer.size, layer.align, layer.fill)
        canvas.alpha_composite(caption, dest=layer.position)
