from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from .core.logger import configure_logging
from .core.settings import load_settings
from .ui.main_window import MainWindow


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Image Editor")
    parser.add_argument(
        "image",
        nargs="?",
        help="Optionaler Pfad zu einer Bilddatei, die beim Start geöffnet wird.",
    )
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="Pfad zu einer settings.json (Standard: image_editor/config/settings.json).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug-Ausgabe auf der Konsole.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv if argv is not None else sys.argv[1:])
    log_path = configure_logging(verbose=args.verbose)
    logger = logging.getLogger(__name__)
    settings = load_settings(args.settings)
    logger.debug("Log-Datei: %s", log_path)

    initial_path = Path(args.image).expanduser() if args.image else None
    if initial_path and not initial_path.exists():
        logger.warning("Datei nicht gefunden: %s", initial_path)
        initial_path = None

    app = QApplication(sys.argv[:1])
    app.setApplicationName("Image Editor")
    app.setDesktopFileName("image-editor")

    window = MainWindow(settings, initial_path=initial_path)
    window.show()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
