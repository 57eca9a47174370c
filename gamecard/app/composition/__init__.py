"""Compositing backends for GameCard."""

from __future__ import annotations

from ..enums import BackendKind
from ..exceptions import ConfigError
from .base_backend import CompositionBackend
from .engine import PillowBackend
from .magick import MagickBackend


def get_backend(kind: BackendKind | str = BackendKind.PILLOW) -> CompositionBackend:
    """Create a compositing backend.

    Args:
        kind: Backend kind or its string value.

    Returns:
        A ready-to-use backend instance.

    Raises:
        ConfigError: If the kind is unknown.
        BackendUnavailableError: If the backend's tooling is missing.
    """
    try:
        kind = BackendKind(kind)
    except ValueError as e:
        choices = ", ".join(k.value for k in BackendKind)
        raise ConfigError(f"Unknown backend '{kind}'. Choices: {choices}") from e

    if kind is BackendKind.MAGICK:
        return MagickBackend()
    return PillowBackend()


__all__ = ["CompositionBackend", "MagickBackend", "PillowBackend", "get_backend"]
