"""Batch driver: categories -> items -> layout -> backend -> output."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from .composition import CompositionBackend, PillowBackend
from .config import Config
from .discovery import discover_categories, discover_items
from .enums import ItemStatus, TextAlign
from .exceptions import CompositeError, LayoutError, TextRenderError, ValidationError
from .layout import LayoutEngine
from .metadata import GamelistIndex
from .models import (
    Category,
    CategoryReport,
    CompositionSpec,
    FrameGeometry,
    ImageLayer,
    Item,
    ItemOutcome,
    LayoutResult,
    RunReport,
    TextLayer,
)
from .validators import read_image_size, validate_template
from .writer import atomic_save

logger = logging.getLogger("gamecard.composer")


class CardComposer:
    """Main engine that turns a catalog directory into cards.

    Each category is processed in turn. Items within a category run one by
    one, or on a thread pool when ``workers`` > 1. Item failures become
    skipped outcomes; only a missing template or an interrupt stop the run.
    """

    def __init__(
        self,
        root: str | Path,
        template_path: str | Path | None = None,
        geometry: FrameGeometry | None = None,
        backend: CompositionBackend | None = None,
        strict_extension: bool = False,
        workers: int = Config.DEFAULT_WORKERS,
    ) -> None:
        self.root = Path(root)
        self.template_path = Path(template_path) if template_path else self.root / Config.TEMPLATE_NAME
        self.geometry = geometry or FrameGeometry()
        self.backend = backend or PillowBackend()
        self.strict_extension = strict_extension
        self.workers = max(1, workers)
        self.layout_engine = LayoutEngine(self.geometry)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self) -> RunReport:
        """Process every category under the root.

        Returns:
            RunReport folded from the category reports. ``interrupted`` is set
            when a KeyboardInterrupt stopped the run early.

        Raises:
            ValidationError: If the root or template is missing (nothing is
                processed in that case).
        """
        if not self.root.is_dir():
            raise ValidationError(f"Root directory '{self.root}' not found!")
        validate_template(self.template_path, self.geometry)

        g = self.geometry
        logger.info("Starting image composition...")
        logger.info("Template: %s (%dx%d)", self.template_path.name, g.frame_width, g.frame_height)
        logger.info("Cover max size: %dx%d", g.cover_box.width, g.cover_box.height)
        logger.info("Marquee max size: %dx%d", g.marquee_box.width, g.marquee_box.height)

        report = RunReport()
        try:
            for category in discover_categories(self.root):
                category_report = CategoryReport(name=category.name)
                try:
                    self.process_category(category, category_report)
                finally:
                    report.add(category_report)
        except KeyboardInterrupt:
            report.interrupted = True
            logger.warning("Interrupted by user. Exiting...")

        logger.info("=" * 35)
        logger.info("Composition complete!" if not report.interrupted else "Composition stopped early.")
        logger.info("Total processed: %d images", report.processed)
        logger.info("Total skipped: %d images", report.skipped)
        return report

    def process_category(
        self, category: Category, report: CategoryReport | None = None
    ) -> CategoryReport:
        """Process one category.

        Args:
            category: Category to process.
            report: Report to fill in; a new one is created when omitted.

        Returns:
            The filled-in report. A category without a marquees folder is
            flagged ``skipped_category`` and has no outcomes. When the output
            folder cannot be created every item is skipped as a composite
            error and the run moves on.
        """
        report = report or CategoryReport(name=category.name)

        if not category.marquees_dir.is_dir():
            logger.warning(
                "System '%s' has covers but no marquees directory, skipping...", category.name
            )
            report.skipped_category = True
            return report

        logger.info("Processing system: %s", category.name)
        logger.info("-" * 35)

        items = discover_items(category, self.strict_extension)
        try:
            category.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(
                "System '%s': cannot create output directory, skipping its images (%s)",
                category.name, e,
            )
            report.outcomes.extend(
                ItemOutcome(item, ItemStatus.SKIPPED_COMPOSITE, str(e)) for item in items
            )
            return report

        titles = GamelistIndex.load(category.gamelist_path)

        if self.workers == 1:
            for item in items:
                report.outcomes.append(self.process_item(item, category, titles))
        else:
            self._process_parallel(items, category, titles, report)

        logger.info(
            "  System '%s': Processed %d images, Skipped %d images",
            category.name, report.processed, report.skipped,
        )
        return report

    def _process_parallel(
        self,
        items: list[Item],
        category: Category,
        titles: GamelistIndex,
        report: CategoryReport,
    ) -> None:
        """Run items on a thread pool, recording outcomes in discovery order.

        On KeyboardInterrupt queued items are cancelled and running ones
        finish. Outcomes stay a prefix of the item list: recording stops at
        the first item that did not complete.
        """
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = [
                executor.submit(self.process_item, item, category, titles)
                for item in items
            ]
            try:
                for future in futures:
                    report.outcomes.append(future.result())
            except KeyboardInterrupt:
                # Let running items finish their write, drop the queued ones
                executor.shutdown(wait=True, cancel_futures=True)
                for future in futures[len(report.outcomes):]:
                    if future.cancelled() or future.exception() is not None:
                        break
                    report.outcomes.append(future.result())
                raise

    # ------------------------------------------------------------------
    # Item
    # ------------------------------------------------------------------

    def process_item(
        self, item: Item, category: Category, titles: GamelistIndex | None = None
    ) -> ItemOutcome:
        """Run one item through layout, composition and output.

        This is the only place where item-level errors become outcomes.
        """
        if item.marquee_path is None:
            logger.warning("  Warning: No matching marquee for '%s', skipping...", item.name)
            return ItemOutcome(item, ItemStatus.SKIPPED_NO_MARQUEE, "no matching marquee")

        title = (titles.lookup(item.file_name) if titles else None) or item.name
        logger.info("  Processing: %s", item.name)

        try:
            cover_size = read_image_size(item.cover_path)
            marquee_size = read_image_size(item.marquee_path)
        except ValidationError as e:
            return self._skip(item, ItemStatus.SKIPPED_COMPOSITE, "Error processing", e)

        try:
            layout = self.layout_engine.calculate_layout(cover_size, marquee_size)
        except LayoutError as e:
            return self._skip(item, ItemStatus.SKIPPED_LAYOUT, "No valid layout for", e)

        spec = self.build_spec(item, title, category.label, layout, category.output_dir)

        try:
            image = self.backend.compose(spec)
        except TextRenderError as e:
            return self._skip(item, ItemStatus.SKIPPED_TEXT, "Error adding text to", e)
        except CompositeError as e:
            return self._skip(item, ItemStatus.SKIPPED_COMPOSITE, "Error processing", e)

        try:
            atomic_save(image, spec.output_path)
        except (OSError, ValueError) as e:
            return self._skip(item, ItemStatus.SKIPPED_COMPOSITE, "Error writing", e)

        return ItemOutcome(item, ItemStatus.DONE)

    @staticmethod
    def _skip(item: Item, status: ItemStatus, action: str, error: Exception) -> ItemOutcome:
        logger.warning("    %s %s, continuing... (%s)", action, item.name, error)
        return ItemOutcome(item, status, str(error))

    def build_spec(
        self,
        item: Item,
        title: str,
        label: str,
        layout: LayoutResult,
        output_dir: Path,
    ) -> CompositionSpec:
        """Place the layout on the bordered canvas.

        Images are horizontally centred and shifted by the border width;
        caption positions are absolute canvas coordinates.
        """
        g = self.geometry
        canvas_w, _canvas_h = g.canvas_size
        b = g.border_width

        def centred(width: int, top: int) -> tuple[int, int]:
            return ((canvas_w - width) // 2, top + b)

        return CompositionSpec(
            template_path=self.template_path,
            geometry=g,
            output_path=output_dir / item.file_name,
            image_layers=[
                ImageLayer(item.cover_path, layout.cover_size,
                           centred(layout.cover_size.width, layout.cover_top)),
                ImageLayer(item.marquee_path, layout.marquee_size,
                           centred(layout.marquee_size.width, layout.marquee_top)),
            ],
            text_layers=[
                TextLayer(title, g.title_position, g.caption_size, TextAlign.LEFT, g.caption_fill),
                TextLayer(label, g.category_position, g.caption_size, TextAlign.RIGHT, g.caption_fill),
            ],
        )
