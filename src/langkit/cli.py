#!/usr/bin/env python3
"""Command-line interface for language files.

Computes runtime string keys, prints language metadata and looks up
runtime translations without writing any code. The file format is
inferred from the file extension (``.json``, ``.lng``, ``.clng``).

Usage:
    langkit-cli make-key "Open file" "Save as..."
    langkit-cli info languages/it/lang.lng
    langkit-cli lookup languages/it/runtime.lng "Open file"
"""

from __future__ import annotations

import argparse
import configparser
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .encoder import make_key
from .engines.engine_registry import get_default_registry
from .language_types import ConfigurationError, LanguageInfo, PersistenceFormat
from .translation_store import TranslationStore

logger = logging.getLogger(__name__)

# Errors reported to the user instead of a traceback.
# ValueError also covers json.JSONDecodeError and invalid booleans.
_FILE_ERRORS = (OSError, configparser.Error, ValueError, ConfigurationError)


def print_language_info(info: LanguageInfo) -> None:
    """Print language metadata to stdout.

    Args:
        info: The metadata to display.
    """
    print(f"Id:          {info.id}")
    print(f"Name:        {info.name}")
    print(f"Native name: {info.native_name}")
    print(f"Direction:   {'right-to-left' if info.is_right_to_left else 'left-to-right'}")
    print(f"UI font:     {info.ui_font}")
    print(f"Fallback:    {info.fallback_font}")


def cmd_make_key(texts: List[str]) -> int:
    """Print the runtime key of every text.

    Args:
        texts: Source strings.

    Returns:
        Exit code (always 0).
    """
    for text in texts:
        print(f"{make_key(text)}\t{text}")
    return 0


def cmd_info(file_path: Path) -> int:
    """Print the metadata stored in a language info file.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    try:
        engine = get_default_registry().create(PersistenceFormat.from_extension(file_path))
        info = engine.read_language_info(file_path)
    except _FILE_ERRORS as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print_language_info(info)
    return 0


def cmd_lookup(file_path: Path, texts: List[str]) -> int:
    """Load a runtime strings file and print the translation of each text.

    Texts without a translation are printed unchanged.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    store = TranslationStore()
    try:
        engine = get_default_registry().create(PersistenceFormat.from_extension(file_path))
        result = engine.load(None, file_path, store)
    except _FILE_ERRORS as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    logger.debug("%d runtime strings in %s", len(store), file_path)
    for text in texts:
        print(f"{text}\t{engine.translate(text)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="langkit-cli",
        description="Inspect langkit language files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s make-key "Open file"                     Print the key of a string
  %(prog)s info languages/it/lang.lng               Show language metadata
  %(prog)s lookup languages/it/runtime.json "Open file"  Translate a string
        """,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    make_key_parser = subparsers.add_parser(
        "make-key",
        help="Print the runtime key of strings",
    )
    make_key_parser.add_argument("texts", nargs="+", help="Strings to hash")

    info_parser = subparsers.add_parser(
        "info",
        help="Show the metadata of a language info file",
    )
    info_parser.add_argument("file", type=Path, help="Language info file (lang.*)")

    lookup_parser = subparsers.add_parser(
        "lookup",
        help="Translate strings with a runtime strings file",
    )
    lookup_parser.add_argument("file", type=Path, help="Runtime strings file (runtime.*)")
    lookup_parser.add_argument("texts", nargs="+", help="Strings to translate")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point.

    Args:
        argv: Command-line arguments; uses sys.argv if None.

    Returns:
        Exit code for the process.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "make-key":
        return cmd_make_key(args.texts)
    elif args.command == "info":
        return cmd_info(args.file)
    elif args.command == "lookup":
        return cmd_lookup(args.file, args.texts)
    else:
        parser.print_help()
        return 0 if not args.command else 1


if __name__ == "__main__":
    sys.exit(main())
