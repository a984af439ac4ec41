"""Batch conversion of the bundled glyph collections into icon sets.

Loads the brands, regular and solid collections from
assets/collections/<prefix>.json and writes one icon set per
collection to dist/.

Run with: iconset-convert
"""

import logging
import sys
from pathlib import Path
from typing import List, Sequence

from .pipeline import generate_icon_sets
from .types import DEFAULT_OUTPUT_DIR, GenerateSetsOptions

COLLECTIONS_DIR = "assets/collections"
COLLECTION_PREFIXES = ("fab", "far", "fas")


def collection_paths(
    collections_dir=COLLECTIONS_DIR, prefixes: Sequence[str] = COLLECTION_PREFIXES
) -> List[Path]:
    """Pack file of each collection: <collections_dir>/<prefix>.json."""
    return [Path(collections_dir) / f"{prefix}.json" for prefix in prefixes]


def print_progress(current: int, total: int, name: str) -> None:
    """Single-line progress bar, redrawn in place."""
    width = 40
    filled = int(width * current / total) if total else width
    bar = "█" * filled + "░" * (width - filled)
    end = "\n" if current >= total else ""
    print(f"\r{bar} {current}/{total}", end=end, flush=True)


def main(collections_dir=COLLECTIONS_DIR, output_dir=DEFAULT_OUTPUT_DIR) -> int:
    """Convert all bundled collections.

    A collection that cannot be loaded or saved is reported in the
    summary and the others still run. Per-icon and per-family failures
    never change the exit code; only an error escaping the whole batch
    does.
    """
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    try:
        generate_icon_sets(
            collection_paths(collections_dir),
            GenerateSetsOptions(output_dir=str(output_dir)),
            progress=print_progress,
        )
        return 0
    except Exception as e:
        print(f"An error occurred while generating the icon sets: {e}", file=sys.stderr)
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
