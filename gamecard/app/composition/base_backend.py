"""Abstract base for compositing backends."""

from __future__ import annotations

from abc import ABC, abstractmethod

from PIL import Image

from ..models import CompositionSpec


class CompositionBackend(ABC):
    """Abstract base class for compositing backends."""

    name: str = "base"

    @abstractmethod
    def compose(self, spec: CompositionSpec) -> Image.Image:
        """Build the card described by ``spec`` in memory.

        Args:
            spec: Template, image layers and text layers to assemble.

        Returns:
            The composed RGBA image. Nothing is written to ``spec.output_path``.

        Raises:
            CompositeError: If the template, cover or marquee step fails.
            TextRenderError: If the caption step fails.
        """
        ...
