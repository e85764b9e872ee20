"""Application entry point and setup for the Kanatype typing game."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from kanatype.core.config import clamp_duration, load_app_config
from kanatype.core.storage import JsonFileStore
from kanatype.ui.main_window import MainWindow


def configure_logging(verbose: bool = False) -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kanatype",
        description="Timed kana / romaji typing practice",
    )
    parser.add_argument("--config", "-c", type=Path, help="Path to a YAML config file")
    parser.add_argument("--duration", "-t", type=int, help="Session length in seconds (1-600)")
    parser.add_argument("--list", dest="word_list", help="Word list file to use")
    parser.add_argument("--storage", type=Path, help="Where scores and settings are kept")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Command-line values that take priority over config and saved settings."""
    overrides: Dict[str, Any] = {}
    if args.duration is not None:
        overrides["gameDurationSeconds"] = clamp_duration(args.duration)
    if args.word_list:
        overrides["wordListPath"] = args.word_list
    return overrides


def run(argv: Optional[List[str]] = None) -> None:
    """Parse arguments, load configuration and start the main window."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    storage = JsonFileStore(args.storage)
    config = load_app_config(storage, args.config, overrides_from_args(args))

    app = QApplication(sys.argv[:1])
    app.setApplicationName("Kanatype")
    app.setApplicationDisplayName("Kanatype")

    window = MainWindow(config=config, storage=storage)
    screen = QGuiApplication.primaryScreen()
    if screen is not None:
        geometry = screen.availableGeometry()
        window.resize(min(1200, geometry.width()), min(800, geometry.height()))
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
