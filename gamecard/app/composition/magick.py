"""ImageMagick 7 compositing backend."""

from __future__ import annotations

import logging
import subprocess
import tempfile
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from ..config import Config
from ..enums import TextAlign
from ..exceptions import BackendUnavailableError, CompositeError, TextRenderError
from ..models import CompositionSpec
from .base_backend import CompositionBackend

logger = logging.getLogger("gamecard.composition.magick")

_GRAVITY = {
    TextAlign.LEFT: "West",
    TextAlign.RIGHT: "East",
}


def _color(rgba: tuple[int, ...]) -> str:
    r, g, b, *rest = rgba
    a = rest[0] if rest else 255
    return f"rgba({r},{g},{b},{a / 255:.4f})"


def _escape_caption(text: str) -> str:
    """Keep ImageMagick from expanding escapes or reading ``@file`` text."""
    text = text.replace("\\", "\\\\").replace("%", "%%")
    if text.startswith("@"):
        text = "\\" + text
    return text


class MagickBackend(CompositionBackend):
    """Compose cards by invoking the ``magick`` command line tool.

    Runs one command for the template and images and a second one for the
    captions, inside a private temporary directory. The result is read back
    with Pillow so the caller writes it the same way as any other backend.
    """

    name = "magick"

    def __init__(self, cmd: str = Config.MAGICK_CMD, timeout: int = Config.MAGICK_TIMEOUT) -> None:
        self.cmd = cmd
        self.timeout = timeout
        self._check_available()

    def _check_available(self) -> None:
        """Raises BackendUnavailableError if ``magick`` can't be run."""
        try:
            subprocess.run(
                [self.cmd, "--version"],
                capture_output=True,
                check=True,
                timeout=self.timeout,
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError) as e:
            raise BackendUnavailableError(
                f"ImageMagick command '{self.cmd}' not available: {e}"
            ) from e

    def _run(self, args: list[str]) -> None:
        cmd = [self.cmd, *args]
        logger.debug("Running: %s", " ".join(cmd))
        subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            check=True,
            timeout=self.timeout,
        )

    def base_args(self, spec: CompositionSpec, output: Path) -> list[str]:
        """Arguments for template erosion, border, cover and marquee."""
        g = spec.geometry
        args = [
            str(spec.template_path),
            "(", "+clone", "-alpha", "extract",
            "-morphology", "erode", f"square:{Config.ERODE_SIZE}", ")",
            "-compose", "copy_opacity", "-composite",
            "-bordercolor", _color(g.border_color),
            "-compose", "over", "-border", f"{g.border_width}x{g.border_width}",
        ]
        for layer in spec.image_layers:
            x, y = layer.top_left
            args += [
                "(", str(layer.path), "-resize", f"{layer.size.width}x{layer.size.height}!", ")",
                "-gravity", "NorthWest", "-geometry", f"+{x}+{y}", "-composite",
            ]
        args.append(f"png32:{output}")
        return args

    def text_args(self, spec: CompositionSpec, base: Path, output: Path) -> list[str]:
        """Arguments for the caption overlay."""
        args = [str(base)]
        for layer in spec.text_layers:
            w, h = layer.size
            x, y = layer.position
            args += [
                "(", "-background", "none", "-fill", _color(layer.fill),
                "-font", Config.MAGICK_FONT, "-size", f"{w}x{h}",
                "-gravity", _GRAVITY[layer.align], f"caption:{_escape_caption(layer.text)}", ")",
                "-gravity", "NorthWest", "-geometry", f"+{x}+{y}", "-composite",
            ]
        args.append(f"png32:{output}")
        return args

    def compose(self, spec: CompositionSpec) -> Image.Image:
        with tempfile.TemporaryDirectory(prefix="gamecard-") as tmp:
            base = Path(tmp) / "base.png"
            final = Path(tmp) / "final.png"

            try:
                self._run(self.base_args(spec, base))
            except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
                raise CompositeError(f"magick composite failed: {getattr(e, 'stderr', '') or e}") from e

            try:
                self._run(self.text_args(spec, base, final))
            except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
                raise TextRenderError(f"magick caption failed: {getattr(e, 'stderr', '') or e}") from e

            try:
                with Image.open(final) as img:
                    return img.convert("RGBA")
            except (OSError, UnidentifiedImageError) as e:
                raise CompositeError(f"Cannot read magick output: {e}") from e
