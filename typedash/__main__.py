#!/usr/bin/env python3
"""
typedash - command line entry point
Run with: python -m typedash
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional

from .config import ConfigError, Settings, data_dir, load_settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="typedash",
        description="Timed typing practice in the terminal.",
        epilog=(
            "Examples:\n"
            "  typedash --duration 30\n"
            "  typedash --text-file path/to/paragraph.txt\n"
            "\n"
            "Without a text file (or with one that is too short) the test\n"
            "uses randomly chosen common words."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--text-file", help="UTF-8 text whose words are typed first")
    parser.add_argument("--duration", type=int, help="test length in seconds")
    parser.add_argument("--theme", help="colour theme (slate, ember, mint or one from the config)")
    parser.add_argument("--image", help="decorative topic image reference shown with the stats")
    parser.add_argument("--no-sound", action="store_true", help="do not ring the bell on mistakes")
    parser.add_argument("--seed", type=int, help="random seed for filler words")
    parser.add_argument("--debug", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def setup_logging(debug: bool = False, log_path: Optional[Path] = None) -> Path:
    # the terminal belongs to the TUI, so log to a file only
    log_path = log_path or data_dir() / "typedash.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.FileHandler(log_path, encoding="utf-8")],
    )
    return log_path


def apply_args(settings: Settings, args: argparse.Namespace) -> Settings:
    if args.duration is not None:
        if args.duration <= 0:
            raise ConfigError(f"--duration must be positive, got {args.duration}")
        settings.duration_sec = args.duration
    if args.text_file:
        settings.text_file = args.text_file
    if args.theme:
        settings.theme = args.theme
    if args.no_sound:
        settings.sound = False
    return settings


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.debug)
    try:
        settings = apply_args(load_settings(), args)
    except ConfigError as exc:
        logging.error("bad configuration: %s", exc)
        print(f"typedash: {exc}", file=sys.stderr)
        return 2

    try:
        from .app import TypingTUI
    except ModuleNotFoundError as exc:
        missing = getattr(exc, "name", "")
        hint = "python3 -m pip install -U rich textual"
        print(f"Missing dependency '{missing}'. Install with: {hint}", file=sys.stderr)
        return 1

    rng = random.Random(args.seed) if args.seed is not None else None
    TypingTUI(settings=settings, image=args.image, rng=rng).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
