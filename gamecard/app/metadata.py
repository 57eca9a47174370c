"""Game title lookup in EmulationStation-style gamelist.xml files."""

from __future__ import annotations

import logging
from pathlib import Path

from lxml import etree

from .exceptions import MetadataError

logger = logging.getLogger("gamecard.metadata")


def _tag(element) -> str:
    # Comments and processing instructions have non-string tags
    return element.tag.lower() if isinstance(element.tag, str) else ""


def _first_child_text(element, tag: str) -> str | None:
    for child in element:
        if _tag(child) == tag:
            return "".join(child.itertext())
    return None


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


class GamelistIndex:
    """Thumbnail-name to title index built from one gamelist file.

    Entries keep document order; the first matching entry wins.
    """

    def __init__(self, entries: list[tuple[str, str]] | None = None) -> None:
        self.entries = entries or []

    def __len__(self) -> int:
        return len(self.entries)

    @classmethod
    def parse(cls, path: str | Path) -> GamelistIndex:
        """Parse ``path`` into an index.

        The parser recovers from malformed markup, so partially broken files
        still yield every readable ``<game>`` entry. Tag names are matched
        case-insensitively.

        Raises:
            MetadataError: If the file can't be read or holds no XML at all.
        """
        parser = etree.XMLParser(recover=True, resolve_entities=False, no_network=True)
        try:
            tree = etree.parse(str(path), parser)
        except (OSError, etree.XMLSyntaxError) as e:
            raise MetadataError(f"Cannot read gamelist '{path}': {e}") from e

        root = tree.getroot()
        if root is None:
            raise MetadataError(f"Gamelist '{path}' contains no XML elements")

        entries: list[tuple[str, str]] = []
        for game in root.iter():
            if _tag(game) != "game":
                continue
            thumbnail = _first_child_text(game, "thumbnail")
            name = _first_child_text(game, "name")
            if thumbnail is None or name is None:
                continue
            thumb_name = thumbnail.strip().rsplit("/", 1)[-1]
            title = collapse_whitespace(name)
            if thumb_name and title:
                entries.append((thumb_name.lower(), title))

        logger.debug("Loaded %d titled entries from %s", len(entries), path)
        return cls(entries)

    @classmethod
    def load(cls, path: str | Path) -> GamelistIndex:
        """Like :meth:`parse`, but a missing or unreadable file gives an empty index."""
        if not Path(path).is_file():
            return cls()
        try:
            return cls.parse(path)
        except MetadataError as e:
            logger.warning("Ignoring gamelist: %s", e)
            return cls()

    def lookup(self, cover_file_name: str) -> str | None:
        """Title of the first entry whose thumbnail file name contains
        ``cover_file_name`` (case-insensitive), or None.
        """
        needle = cover_file_name.lower()
        for thumb_name, title in self.entries:
            if needle in thumb_name:
                return title
        return None
