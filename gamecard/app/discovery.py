"""Category and item discovery under the catalog root."""

from __future__ import annotations

import logging
from pathlib import Path

from .constants import SUPPORTED_EXTENSIONS
from .models import Category, Item

logger = logging.getLogger("gamecard.discovery")


def _is_supported(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS


def discover_categories(root: str | Path) -> list[Category]:
    """Return every visible subdirectory of ``root`` that has a covers folder.

    Categories are sorted by name. Whether the marquees folder exists is
    checked later, so that such categories can be reported as skipped.
    """
    root = Path(root)
    categories = []
    for path in sorted(p for p in root.iterdir() if p.is_dir()):
        if path.name.startswith("."):
            continue
        category = Category(name=path.name, path=path)
        if category.covers_dir.is_dir():
            categories.append(category)
    return categories


def discover_covers(category: Category) -> list[Path]:
    """All supported cover files below the covers folder, sorted by path."""
    return sorted(p for p in category.covers_dir.rglob("*") if _is_supported(p))


class MarqueeIndex:
    """Pairs covers with marquees by file name.

    By default a marquee matches on the stem alone and one with the same
    extension as the cover is preferred. With ``strict_extension`` the full
    file name must match.
    """

    def __init__(self, marquees_dir: Path, strict_extension: bool = False) -> None:
        self.strict_extension = strict_extension
        self._by_name: dict[str, Path] = {}
        self._by_stem: dict[str, list[Path]] = {}

        if not marquees_dir.is_dir():
            return
        for path in sorted(p for p in marquees_dir.iterdir() if _is_supported(p)):
            self._by_name[path.name] = path
            self._by_stem.setdefault(path.stem, []).append(path)

    def find(self, cover_path: Path) -> Path | None:
        exact = self._by_name.get(cover_path.name)
        if exact is not None or self.strict_extension:
            return exact

        candidates = self._by_stem.get(cover_path.stem, [])
        for candidate in candidates:
            if candidate.suffix.lower() == cover_path.suffix.lower():
                return candidate
        return candidates[0] if candidates else None


def discover_items(category: Category, strict_extension: bool = False) -> list[Item]:
    """Covers of ``category`` paired with their marquees (None when missing).

    Outputs are named after the cover file, so when covers in different
    subfolders share a file name only the first one (in path order) is kept.
    """
    marquees = MarqueeIndex(category.marquees_dir, strict_extension)
    items: list[Item] = []
    seen: dict[str, Path] = {}
    for cover in discover_covers(category):
        first = seen.setdefault(cover.name, cover)
        if first is not cover:
            logger.warning(
                "  Warning: '%s' has the same file name as '%s', skipping...",
                cover.relative_to(category.covers_dir), first.relative_to(category.covers_dir),
            )
            continue
        items.append(Item(cover_path=cover, marquee_path=marquees.find(cover), category=category.name))
    logger.debug("Category %s: %d covers", category.name, len(items))
    return items
