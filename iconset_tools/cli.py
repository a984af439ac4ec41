"""Command-line interface for creating an icon set from SVG files."""

import argparse
import logging
import re
import sys
from typing import Optional

from .pipeline import generate_icon_set
from .types import ConfigurationError, GenerateSetOptions, SanitizeConfig, SourceReadError

# Icon set prefixes: lowercase letters, digits and single hyphens
PREFIX_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="iconset-create",
        description="Create Iconify icon sets from SVG files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  iconset-create
  iconset-create -p brand -s assets/icons/svgs -o assets/icons/json
        """,
    )

    parser.add_argument(
        "-p",
        "--prefix",
        default="custom",
        help="Icon set prefix (default: custom)",
    )

    parser.add_argument(
        "-s",
        "--source",
        default="assets/icons/svgs",
        help="Path to the folder hosting the SVG files (default: assets/icons/svgs)",
    )

    parser.add_argument(
        "-o",
        "--output",
        default="assets/icons/json",
        help="Path to the output folder for the JSON file (default: assets/icons/json)",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show cleanup notices and debug output",
    )

    return parser


def validate_args(parsed: argparse.Namespace) -> None:
    """Check argument values before any icon is processed.

    Raises:
        ConfigurationError: If an argument value is unusable
    """
    if not PREFIX_RE.match(parsed.prefix or ""):
        raise ConfigurationError(
            f"invalid prefix '{parsed.prefix}': use lowercase letters, digits and hyphens"
        )
    if not parsed.source:
        raise ConfigurationError("source folder must not be empty")
    if not parsed.output:
        raise ConfigurationError("output folder must not be empty")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
    )


def main(args: Optional[list] = None) -> int:
    """Main entry point for CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for error, 2 for invalid arguments)
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    try:
        validate_args(parsed)
    except ConfigurationError as e:
        parser.print_usage(sys.stderr)
        print(f"Error: {e}", file=sys.stderr)
        return 2

    configure_logging(parsed.verbose)

    print("Generating icon set...")
    try:
        options = GenerateSetOptions(
            output_dir=parsed.output,
            sanitize=SanitizeConfig(verbose=parsed.verbose),
        )
        generate_icon_set(parsed.prefix, parsed.source, options)
        return 0

    except SourceReadError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"An error occurred while generating the icon set: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
