"""Custom exception hierarchy for GameCard."""

from __future__ import annotations


class GameCardError(Exception):
    """Base exception for all GameCard errors."""


class ConfigError(GameCardError):
    """Raised when configuration data is invalid."""


class ValidationError(GameCardError):
    """Raised when input validation fails."""


class TemplateNotFoundError(ValidationError):
    """Raised when the template image is missing."""


class LayoutError(GameCardError):
    """Raised when no valid layout exists for an item."""


class MetadataError(GameCardError):
    """Raised when a gamelist file cannot be read."""


class CompositionError(GameCardError):
    """Raised when final image composition fails."""


class CompositeError(CompositionError):
    """Raised when template, cover or marquee compositing fails."""


class TextRenderError(CompositionError):
    """Raised when the caption overlay fails."""


class BackendUnavailableError(CompositionError):
    """Raised when the compositing backend cannot be used at all."""
