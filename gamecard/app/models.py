"""Data structures for GameCard."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path

from .config import Config
from .constants import SKIPPED_STATUSES
from .enums import ItemStatus, TextAlign
from .exceptions import ConfigError


@dataclass(frozen=True)
class ImageSize:
    """Width/height pair of a source image or a resolved (scaled) image."""
    width: int
    height: int

    @property
    def aspect(self) -> float:
        return self.width / self.height if self.height else 0.0

    def to_tuple(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class BoundingBox:
    """Maximum size an image may be scaled to."""
    width: int
    height: int

    def to_tuple(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class FrameGeometry:
    """Pixel geometry of the template frame and everything placed on it."""
    frame_width: int = Config.FRAME_WIDTH
    frame_height: int = Config.FRAME_HEIGHT
    region_top: int = Config.REGION_TOP
    available_space: int = Config.AVAILABLE_SPACE
    cover_box: BoundingBox = BoundingBox(Config.COVER_MAX_WIDTH, Config.COVER_MAX_HEIGHT)
    marquee_box: BoundingBox = BoundingBox(Config.MARQUEE_MAX_WIDTH, Config.MARQUEE_MAX_HEIGHT)
    padding_floor: int = Config.PADDING_FLOOR
    border_width: int = Config.BORDER_WIDTH
    border_color: tuple[int, int, int, int] = Config.BORDER_COLOR
    caption_size: tuple[int, int] = Config.CAPTION_SIZE
    title_position: tuple[int, int] = Config.TITLE_POSITION
    category_position: tuple[int, int] = Config.CATEGORY_POSITION
    caption_fill: tuple[int, int, int, int] = Config.CAPTION_FILL

    @property
    def region_bottom(self) -> int:
        return self.region_top + self.available_space

    @property
    def canvas_size(self) -> tuple[int, int]:
        """Size of the template once the border has been added."""
        return (
            self.frame_width + 2 * self.border_width,
            self.frame_height + 2 * self.border_width,
        )

    @classmethod
    def from_dict(cls, data: dict) -> FrameGeometry:
        """Build a geometry from plain JSON-style data.

        Raises:
            ConfigError: On unknown keys or malformed values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown geometry keys: {', '.join(unknown)}")

        kwargs = {}
        try:
            for key, value in data.items():
                if key in ("cover_box", "marquee_box"):
                    kwargs[key] = BoundingBox(int(value[0]), int(value[1]))
                elif isinstance(value, list):
                    kwargs[key] = tuple(int(v) for v in value)
                else:
                    kwargs[key] = int(value)
        except (TypeError, ValueError, IndexError) as e:
            raise ConfigError(f"Invalid geometry value for '{key}': {e}") from e

        geometry = cls(**kwargs)
        geometry.validate()
        return geometry

    @classmethod
    def from_json(cls, path: str | Path) -> FrameGeometry:
        """Load a geometry override file."""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read geometry file '{path}': {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Geometry file '{path}' must contain a JSON object")
        return cls.from_dict(data)

    def validate(self) -> None:
        if self.frame_width <= 0 or self.frame_height <= 0:
            raise ConfigError("Frame dimensions must be positive")
        if self.available_space <= 0:
            raise ConfigError("Available space must be positive")
        if self.region_top < 0 or self.region_bottom > self.frame_height:
            raise ConfigError(
                f"Content region {self.region_top}..{self.region_bottom} "
                f"does not fit in frame height {self.frame_height}"
            )
        for name, box in (("cover_box", self.cover_box), ("marquee_box", self.marquee_box)):
            if box.width <= 0 or box.height <= 0:
                raise ConfigError(f"{name} must be positive, got {box.width}x{box.height}")
            if box.width > self.frame_width:
                raise ConfigError(f"{name} is wider than the frame")
        if self.border_width < 0 or self.padding_floor < 0:
            raise ConfigError("Border width and padding floor cannot be negative")


@dataclass
class LayoutResult:
    """Resolved sizes and vertical centres of both images."""
    marquee_size: ImageSize
    cover_size: ImageSize
    marquee_center_y: int
    cover_center_y: int
    padding: int

    @property
    def marquee_top(self) -> int:
        return self.marquee_center_y - self.marquee_size.height // 2

    @property
    def marquee_bottom(self) -> int:
        return self.marquee_top + self.marquee_size.height

    @property
    def cover_top(self) -> int:
        return self.cover_center_y - self.cover_size.height // 2

    @property
    def cover_bottom(self) -> int:
        return self.cover_top + self.cover_size.height


@dataclass
class Category:
    """One system directory holding covers, marquees and optional metadata."""
    name: str
    path: Path

    @property
    def covers_dir(self) -> Path:
        return self.path / Config.COVERS_SUBDIR

    @property
    def marquees_dir(self) -> Path:
        return self.path / Config.MARQUEES_SUBDIR

    @property
    def output_dir(self) -> Path:
        return self.path / Config.OUTPUT_SUBDIR

    @property
    def gamelist_path(self) -> Path:
        return self.path / Config.GAMELIST_NAME

    @property
    def label(self) -> str:
        return self.name.upper()


@dataclass
class Item:
    """One cover (and its marquee, if found) within a category."""
    cover_path: Path
    marquee_path: Path | None
    category: str

    @property
    def name(self) -> str:
        return self.cover_path.stem

    @property
    def file_name(self) -> str:
        return self.cover_path.name


@dataclass
class ImageLayer:
    """A source image resized to ``size`` and pasted at ``top_left``."""
    path: Path
    size: ImageSize
    top_left: tuple[int, int]


@dataclass
class TextLayer:
    """A caption drawn into a fixed box."""
    text: str
    position: tuple[int, int]
    size: tuple[int, int]
    align: TextAlign
    fill: tuple[int, int, int, int] = Config.CAPTION_FILL


@dataclass
class CompositionSpec:
    """Everything a backend needs to build one card."""
    template_path: Path
    geometry: FrameGeometry
    output_path: Path
    image_layers: list[ImageLayer] = field(default_factory=list)
    text_layers: list[TextLayer] = field(default_factory=list)


@dataclass
class ItemOutcome:
    """Terminal state of one item."""
    item: Item
    status: ItemStatus
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is ItemStatus.DONE


@dataclass
class CategoryReport:
    """Counts for one category."""
    name: str
    outcomes: list[ItemOutcome] = field(default_factory=list)
    skipped_category: bool = False

    @property
    def processed(self) -> int:
        return sum(1 for o in self.outcomes if o.ok)

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.status in SKIPPED_STATUSES)


@dataclass
class RunReport:
    """Aggregate of all category reports."""
    categories: list[CategoryReport] = field(default_factory=list)
    interrupted: bool = False

    @property
    def processed(self) -> int:
        return sum(c.processed for c in self.categories)

    @property
    def skipped(self) -> int:
        return sum(c.skipped for c in self.categories)

    def add(self, report: CategoryReport) -> RunReport:
        self.categories.append(report)
        return self
