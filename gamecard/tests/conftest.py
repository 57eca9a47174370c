"""Shared pytest fixtures for GameCard tests."""

from __future__ import annotations

import struct
import zlib
from pathlib import Path

import pytest
from PIL import Image

from gamecard.app.composition import CompositionBackend
from gamecard.app.models import Category, CompositionSpec, Item

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
WHITE = (255, 255, 255, 255)

GAMELIST = """<?xml version="1.0"?>
<gameList>
  <game>
    <path>./Metroid Fusion.gba</path>
    <name>  Metroid
        Fusion (USA)  </name>
    <thumbnail>./media/covers/Metroid Fusion.png</thumbnail>
  </game>
</gameList>
"""


def save_image(path: Path, size: tuple[int, int], color=RED, mode: str = "RGBA") -> Path:
    """Write a solid test image, creating parent folders."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new(mode, size, color if mode == "RGBA" else color[:3])
    img.save(path)
    return path


def write_png_header(path: Path, width: int, height: int) -> Path:
    """Write a tiny PNG whose header declares ``width`` x ``height`` pixels."""

    def chunk(kind: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(kind + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)

    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", ihdr)
        + chunk(b"IDAT", zlib.compress(b""))
        + chunk(b"IEND", b"")
    )
    return path


class RecordingBackend(CompositionBackend):
    """Backend that records specs and returns a blank canvas, or raises."""

    name = "recording"

    def __init__(self, error: BaseException | None = None) -> None:
        self.specs: list[CompositionSpec] = []
        self.error = error

    def compose(self, spec: CompositionSpec) -> Image.Image:
        self.specs.append(spec)
        if self.error is not None:
            raise self.error
        return Image.new("RGBA", spec.geometry.canvas_size, WHITE)


@pytest.fixture
def recording_backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture
def catalog(tmp_path: Path) -> Path:
    """A catalog root with one complete system and one without marquees.

    gba/
      covers/Metroid Fusion.png (400x600), covers/Orphan.png (300x300)
      marquees/Metroid Fusion.png (1000x100)
      gamelist.xml
    nes/
      covers/Zelda.png
    docs/          (no covers, ignored)
    template.png   (638x1012, white)
    """
    root = tmp_path / "catalog"
    save_image(root / "template.png", (638, 1012), WHITE)

    gba = root / "gba"
    save_image(gba / "covers" / "Metroid Fusion.png", (400, 600), RED)
    save_image(gba / "covers" / "Orphan.png", (300, 300), RED)
    save_image(gba / "marquees" / "Metroid Fusion.png", (1000, 100), BLUE)
    (gba / "gamelist.xml").write_text(GAMELIST, encoding="utf-8")

    save_image(root / "nes" / "covers" / "Zelda.png", (200, 300), RED)
    (root / "docs").mkdir()
    return root


@pytest.fixture
def gba_category(catalog: Path) -> Category:
    return Category(name="gba", path=catalog / "gba")


@pytest.fixture
def metroid_item(gba_category: Category) -> Item:
    return Item(
        cover_path=gba_category.covers_dir / "Metroid Fusion.png",
        marquee_path=gba_category.marquees_dir / "Metroid Fusion.png",
        category="gba",
    )
