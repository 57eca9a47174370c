"""End-to-end tests for the batch composer."""

import logging

import pytest
from PIL import Image

from gamecard.app.composer import CardComposer
from gamecard.app.composition import PillowBackend
from gamecard.app.discovery import discover_items
from gamecard.app.enums import ItemStatus, TextAlign
from gamecard.app.exceptions import CompositeError, TemplateNotFoundError, TextRenderError, ValidationError
from gamecard.app.models import ImageSize

from .conftest import BLUE, RED, RecordingBackend, save_image, write_png_header


class TestRun:
    def test_full_catalog(self, catalog):
        report = CardComposer(catalog, backend=PillowBackend()).run()

        assert [c.name for c in report.categories] == ["gba", "nes"]
        gba, nes = report.categories
        assert (gba.processed, gba.skipped) == (1, 1)
        assert nes.skipped_category
        assert (report.processed, report.skipped) == (1, 1)
        assert not report.interrupted

        out = catalog / "gba" / "output" / "Metroid Fusion.png"
        with Image.open(out) as img:
            assert img.size == (640, 1014)
            assert img.convert("RGBA").getpixel((319, 501))[:3] == RED[:3]
        assert not (catalog / "gba" / "output" / "Orphan.png").exists()
        assert not (catalog / "nes" / "output").exists()
        assert not (catalog / "docs" / "output").exists()

    def test_reruns_are_idempotent(self, catalog):
        first = CardComposer(catalog).run()
        out = catalog / "gba" / "output" / "Metroid Fusion.png"
        before = out.read_bytes()

        second = CardComposer(catalog).run()
        assert out.read_bytes() == before
        assert (first.processed, first.skipped) == (second.processed, second.skipped)

    def test_output_is_not_rediscovered(self, catalog, recording_backend):
        CardComposer(catalog).run()
        report = CardComposer(catalog, backend=recording_backend).run()
        assert report.categories[0].processed == 1
        assert len(recording_backend.specs) == 1

    def test_missing_root(self, tmp_path):
        with pytest.raises(ValidationError, match="not found"):
            CardComposer(tmp_path / "nowhere").run()

    def test_missing_template_stops_before_any_output(self, catalog, recording_backend):
        (catalog / "template.png").unlink()
        with pytest.raises(TemplateNotFoundError):
            CardComposer(catalog, backend=recording_backend).run()
        assert not recording_backend.specs
        assert not (catalog / "gba" / "output").exists()

    def test_explicit_template(self, catalog, tmp_path, recording_backend):
        template = save_image(tmp_path / "frames" / "card.png", (638, 1012))
        CardComposer(catalog, template_path=template, backend=recording_backend).run()
        assert recording_backend.specs[0].template_path == template

    def test_system_without_marquees_is_logged(self, catalog, recording_backend, caplog):
        with caplog.at_level(logging.INFO, logger="gamecard"):
            CardComposer(catalog, backend=recording_backend).run()
        assert "System 'nes' has covers but no marquees directory" in caplog.text
        assert "No matching marquee for 'Orphan'" in caplog.text
        assert "Processed 1 images, Skipped 1 images" in caplog.text

    def test_oversized_cover_is_skipped(self, catalog, recording_backend):
        gba = catalog / "gba"
        write_png_header(gba / "covers" / "Aaa Huge.png", 20000, 20000)
        save_image(gba / "marquees" / "Aaa Huge.png", (1000, 100), BLUE)

        report = CardComposer(catalog, backend=recording_backend).run()
        gba_report = report.categories[0]
        assert gba_report.outcomes[0].item.name == "Aaa Huge"
        assert gba_report.outcomes[0].status is ItemStatus.SKIPPED_COMPOSITE
        assert (gba_report.processed, gba_report.skipped) == (1, 2)
        assert not report.interrupted

    def test_blocked_output_dir_skips_only_that_system(self, catalog, recording_backend, caplog):
        aaa = catalog / "aaa"
        save_image(aaa / "covers" / "X.png", (300, 400))
        save_image(aaa / "marquees" / "X.png", (600, 100), BLUE)
        (aaa / "output").write_text("not a directory")

        with caplog.at_level(logging.WARNING, logger="gamecard"):
            report = CardComposer(catalog, backend=recording_backend).run()

        assert [c.name for c in report.categories] == ["aaa", "gba", "nes"]
        aaa_report, gba_report, _ = report.categories
        assert [o.status for o in aaa_report.outcomes] == [ItemStatus.SKIPPED_COMPOSITE]
        assert gba_report.processed == 1
        assert "cannot create output directory" in caplog.text
        assert (aaa / "output").is_file()

    def test_interrupt_keeps_partial_report(self, catalog):
        backend = RecordingBackend(error=KeyboardInterrupt())
        report = CardComposer(catalog, backend=backend).run()
        assert report.interrupted
        assert [c.name for c in report.categories] == ["gba"]
        assert report.processed == 0


class TestProcessItem:
    def test_spec_for_reference_item(self, catalog, gba_category, metroid_item, recording_backend):
        composer = CardComposer(catalog, backend=recording_backend)
        outcome = composer.process_item(metroid_item, gba_category)
        assert outcome.status is ItemStatus.DONE

        spec = recording_backend.specs[0]
        assert spec.output_path == gba_category.output_dir / "Metroid Fusion.png"
        cover, marquee = spec.image_layers
        assert (cover.size, cover.top_left) == (ImageSize(475, 713), (82, 145))
        assert (marquee.size, marquee.top_left) == (ImageSize(589, 58), (25, 70))

        title, label = spec.text_layers
        assert (title.text, title.position, title.align) == ("Metroid Fusion", (71, 885), TextAlign.LEFT)
        assert (label.text, label.position, label.align) == ("GBA", (396, 885), TextAlign.RIGHT)
        assert title.size == label.size == (174, 90)

    def test_title_from_gamelist(self, catalog, recording_backend):
        CardComposer(catalog, backend=recording_backend).run()
        assert recording_backend.specs[0].text_layers[0].text == "Metroid Fusion (USA)"

    def test_title_falls_back_to_stem(self, catalog, recording_backend):
        (catalog / "gba" / "gamelist.xml").unlink()
        CardComposer(catalog, backend=recording_backend).run()
        assert recording_backend.specs[0].text_layers[0].text == "Metroid Fusion"

    def test_no_marquee(self, catalog, gba_category, recording_backend):
        item = next(i for i in discover_items(gba_category) if i.name == "Orphan")
        outcome = CardComposer(catalog, backend=recording_backend).process_item(item, gba_category)
        assert outcome.status is ItemStatus.SKIPPED_NO_MARQUEE
        assert not recording_backend.specs

    @pytest.mark.parametrize("error, status", [
        (CompositeError("bad layer"), ItemStatus.SKIPPED_COMPOSITE),
        (TextRenderError("no font"), ItemStatus.SKIPPED_TEXT),
    ])
    def test_backend_errors(self, catalog, gba_category, metroid_item, error, status):
        composer = CardComposer(catalog, backend=RecordingBackend(error=error))
        outcome = composer.process_item(metroid_item, gba_category)
        assert outcome.status is status
        assert not (gba_category.output_dir / "Metroid Fusion.png").exists()

    def test_layout_error(self, catalog, gba_category, metroid_item, recording_backend):
        save_image(metroid_item.marquee_path, (5000, 1), BLUE)
        outcome = CardComposer(catalog, backend=recording_backend).process_item(metroid_item, gba_category)
        assert outcome.status is ItemStatus.SKIPPED_LAYOUT
        assert not recording_backend.specs

    def test_unreadable_cover(self, catalog, gba_category, metroid_item, recording_backend):
        metroid_item.cover_path.write_bytes(b"garbage")
        outcome = CardComposer(catalog, backend=recording_backend).process_item(metroid_item, gba_category)
        assert outcome.status is ItemStatus.SKIPPED_COMPOSITE

    def test_write_error(self, catalog, gba_category, metroid_item, recording_backend):
        # A directory in place of the output file makes the final rename fail
        (gba_category.output_dir / "Metroid Fusion.png").mkdir(parents=True)
        outcome = CardComposer(catalog, backend=recording_backend).process_item(metroid_item, gba_category)
        assert outcome.status is ItemStatus.SKIPPED_COMPOSITE


class TestParallel:
    def test_workers_keep_discovery_order(self, catalog, recording_backend):
        gba = catalog / "gba"
        for name in ("Advance Wars", "Golden Sun", "Wario Land"):
            save_image(gba / "covers" / f"{name}.png", (300, 400))
            save_image(gba / "marquees" / f"{name}.png", (600, 100), BLUE)

        report = CardComposer(catalog, backend=recording_backend, workers=3).run()
        gba_report = report.categories[0]
        assert [o.item.name for o in gba_report.outcomes] == [
            "Advance Wars", "Golden Sun", "Metroid Fusion", "Orphan", "Wario Land",
        ]
        assert (gba_report.processed, gba_report.skipped) == (4, 1)

    def test_interrupt_cancels_queued_items(self, catalog):
        gba = catalog / "gba"
        for name in ("Advance Wars", "Golden Sun", "Wario Land"):
            save_image(gba / "covers" / f"{name}.png", (300, 400))
            save_image(gba / "marquees" / f"{name}.png", (600, 100), BLUE)
        backend = InterruptingBackend(stop_at="Golden Sun")

        report = CardComposer(catalog, backend=backend, workers=3).run()

        assert report.interrupted
        all_names = ["Advance Wars", "Golden Sun", "Metroid Fusion", "Orphan", "Wario Land"]
        recorded = [o.item.name for o in report.categories[0].outcomes]
        assert recorded == all_names[:len(recorded)]
        assert recorded[0] == "Advance Wars"
        assert "Golden Sun" not in recorded

        composed = {spec.output_path.name for spec in backend.specs}
        written = {p.name for p in (gba / "output").iterdir()}
        assert "Golden Sun.png" not in written
        assert written <= composed


class InterruptingBackend(RecordingBackend):
    """Raises KeyboardInterrupt when asked to compose one named item."""

    def __init__(self, stop_at: str) -> None:
        super().__init__()
        self.stop_at = stop_at

    def compose(self, spec):
        if spec.output_path.stem == self.stop_at:
            raise KeyboardInterrupt
        return super().compose(spec)
