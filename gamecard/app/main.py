"""Command line interface for GameCard."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from .composer import CardComposer
from .composition import get_backend
from .config import Config
from .constants import EXIT_FATAL, EXIT_INTERRUPTED, EXIT_OK
from .enums import BackendKind
from .exceptions import BackendUnavailableError, ConfigError, ValidationError
from .logging_config import setup_logging
from .models import FrameGeometry

logger = logging.getLogger("gamecard.main")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gamecard",
        description=(
            "Composite template, cover and marquee images for every game in "
            "each system directory under ROOT."
        ),
    )
    parser.add_argument(
        "root", nargs="?", default=".",
        help="Directory containing the template and system subdirectories (default: .)",
    )
    parser.add_argument(
        "--template",
        help=f"Template image (default: ROOT/{Config.TEMPLATE_NAME})",
    )
    parser.add_argument(
        "--geometry",
        help="JSON file overriding frame, region, box and caption geometry",
    )
    parser.add_argument(
        "--backend", choices=[k.value for k in BackendKind], default=BackendKind.PILLOW.value,
        help="Compositing backend (default: pillow)",
    )
    parser.add_argument(
        "--workers", type=int, default=Config.DEFAULT_WORKERS,
        help="Items composed in parallel within a system (default: 1)",
    )
    parser.add_argument(
        "--strict-extension", action="store_true",
        help="Require cover and marquee to share the extension as well as the name",
    )
    parser.add_argument(
        "--log-level", default=os.environ.get("GAMECARD_LOG_LEVEL", "INFO"),
        help="DEBUG, INFO, WARNING or ERROR (default: $GAMECARD_LOG_LEVEL or INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Returns:
        Process exit code: 0 on completion, 1 on a fatal precondition,
        130 when interrupted.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    if args.workers < 1:
        logger.error("--workers must be at least 1, got %d", args.workers)
        return EXIT_FATAL

    try:
        geometry = FrameGeometry.from_json(args.geometry) if args.geometry else FrameGeometry()
        backend = get_backend(args.backend)
        composer = CardComposer(
            args.root,
            template_path=args.template,
            geometry=geometry,
            backend=backend,
            strict_extension=args.strict_extension,
            workers=args.workers,
        )
        report = composer.run()
    except (ConfigError, ValidationError, BackendUnavailableError) as e:
        logger.error("Error: %s", e)
        return EXIT_FATAL
    except KeyboardInterrupt:
        logger.warning("Interrupted by user. Exiting...")
        return EXIT_INTERRUPTED

    return EXIT_INTERRUPTED if report.interrupted else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
