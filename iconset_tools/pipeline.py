"""Icon set assembly: one family at a time, or many in a batch."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Union

from .iconset import ICON, IconSet, create_empty_icon_set
from .persistence import save_icon_set
from .sanitize import sanitize_icons
from .sources import GlyphCollection, RawIcon, load_glyph_collection, read_directory
from .types import (
    DEFAULT_OUTPUT_DIR,
    AssemblyResult,
    GenerateSetOptions,
    GenerateSetsOptions,
    InvalidIconError,
    PersistenceError,
    SanitizeConfig,
    SourceReadError,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]

# A loaded collection, or the path of a pack file loaded on demand
CollectionSource = Union[GlyphCollection, str, Path]


class Progress:
    """Counts processed icons against a total known up front."""

    def __init__(self, total: int, callback: Optional[ProgressCallback] = None):
        self.total = total
        self.current = 0
        self.callback = callback

    def increment(self, name: str = "") -> None:
        self.current += 1
        if self.callback is not None:
            self.callback(self.current, self.total, name)


@dataclass
class SetAssembly:
    """A finished family: the icon set, its saved file and the rejected icons."""

    icon_set: IconSet
    result: AssemblyResult
    failures: List[InvalidIconError] = field(default_factory=list)

    def __iter__(self):
        yield self.icon_set
        yield self.result
        yield self.failures


class IconSetPipeline:
    """Turns raw (name, markup) streams into sanitized icon sets."""

    def __init__(self, config: Optional[SanitizeConfig] = None):
        """Initialize pipeline with configuration.

        Args:
            config: Sanitization configuration. Uses defaults if None.
        """
        self.config = config or SanitizeConfig()

    def assemble(
        self,
        prefix: str,
        entries: Iterable[RawIcon],
        icons: Optional[Iterable[str]] = None,
        on_progress: Optional[Callable[[str], None]] = None,
    ):
        """Build an icon set from raw icons without saving it.

        Args:
            prefix: Icon set prefix
            entries: (name, markup) pairs in source order; markup is None
                for glyphs the source does not have
            icons: Optional allow-list; empty or None keeps everything
            on_progress: Called once per entry, processed or skipped

        Returns:
            Tuple of (icon_set, failures)
        """
        icon_set = create_empty_icon_set(prefix)
        outcome = sanitize_icons(self._present(prefix, entries, on_progress), self.config, on_progress)

        for name, doc in outcome.successes.items():
            icon_set.put(name, doc)
        icon_set.restrict_to(icons or ())

        if outcome.failures:
            logger.warning(f"{prefix}: skipped {len(outcome.failures)} invalid icon(s)")
        return icon_set, outcome.failures

    @staticmethod
    def _present(prefix: str, entries: Iterable[RawIcon], on_progress) -> Iterator[RawIcon]:
        for name, markup in entries:
            if markup is None:
                logger.debug(f"Glyph {prefix}:{name} not found, skipping")
                if on_progress is not None:
                    on_progress(name)
                continue
            yield name, markup


def generate_icon_set(
    prefix: str,
    source: Union[str, Path, GlyphCollection],
    options: Optional[GenerateSetOptions] = None,
) -> SetAssembly:
    """Generate and save one icon set from a directory or glyph collection.

    Args:
        prefix: Icon set prefix
        source: Directory of SVG files, or a glyph collection
        options: Allow-list, output location and sanitization settings

    Returns:
        SetAssembly with the icon set, the saved file info and failures

    Raises:
        SourceReadError: If the source directory cannot be enumerated
        PersistenceError: If the icon set cannot be written
    """
    if isinstance(source, GlyphCollection):
        entries: Iterable[RawIcon] = source.entries()
    else:
        entries = read_directory(source)
    return assemble_icon_set(prefix, entries, options)


def assemble_icon_set(
    prefix: str,
    entries: Iterable[RawIcon],
    options: Optional[GenerateSetOptions] = None,
) -> SetAssembly:
    """Sanitize raw icons into a set and save it.

    Raises:
        PersistenceError: If the icon set cannot be written
    """
    options = options or GenerateSetOptions()
    pipeline = IconSetPipeline(options.sanitize)
    icon_set, failures = pipeline.assemble(prefix, entries, icons=options.icons)

    result = save_icon_set(
        icon_set,
        output_dir=options.output_dir,
        filename=options.output_filename,
        enable_logs=options.enable_logs,
    )
    return SetAssembly(icon_set=icon_set, result=result, failures=failures)


def collection_prefix(source: CollectionSource) -> str:
    """Prefix of a loaded collection, or the file stem of a pack path."""
    if isinstance(source, GlyphCollection):
        return source.prefix
    return Path(source).stem


def filter_collections(
    collections: Iterable[CollectionSource], sets: Optional[Iterable[str]] = None
) -> List[CollectionSource]:
    """Keep collections whose prefix is selected; no selection keeps all."""
    selected = set(sets or ())
    return [c for c in collections if not selected or collection_prefix(c) in selected]


def log_summary(summary: Dict[str, AssemblyResult]) -> None:
    logger.info("Saved the following icon sets:")
    for prefix, result in summary.items():
        if result.failed:
            logger.error(f"- {prefix} failed: {result.error}")
        else:
            logger.info(f"+ {result.count} icons to {result.target} ({result.size} bytes)")


def _load_families(sources: Iterable[CollectionSource]):
    """Load every selected source, keeping read errors per family."""
    families = []
    for source in sources:
        if isinstance(source, GlyphCollection):
            families.append((source.prefix, source, None))
            continue
        try:
            collection = load_glyph_collection(source)
            families.append((collection.prefix, collection, None))
        except SourceReadError as e:
            families.append((collection_prefix(source), None, e))
    return families


def generate_icon_sets(
    collections: Iterable[CollectionSource],
    options: Optional[GenerateSetsOptions] = None,
    progress: Optional[ProgressCallback] = None,
) -> Dict[str, AssemblyResult]:
    """Generate one icon set per glyph collection.

    Families are processed sequentially. A family that cannot be read or
    saved is reported and marked failed; the remaining families still run.

    Args:
        collections: Glyph collections, or paths to pack JSON files whose
            stem is the prefix
        options: Family selection, output directory and sanitization
        progress: Called as (current, total, icon name) per glyph

    Returns:
        Mapping of prefix to AssemblyResult
    """
    options = options or GenerateSetsOptions()
    families = _load_families(filter_collections(collections, options.sets))

    tracker = Progress(sum(len(c) for _, c, _ in families if c is not None), progress)
    pipeline = IconSetPipeline(options.sanitize)
    summary: Dict[str, AssemblyResult] = {}

    for prefix, collection, error in families:
        if error is None:
            try:
                icon_set, _ = pipeline.assemble(prefix, collection.entries(), on_progress=tracker.increment)
                summary[prefix] = save_icon_set(
                    icon_set,
                    output_dir=options.output_dir,
                    filename=prefix,
                    enable_logs=False,
                )
            except PersistenceError as e:
                error = e
        if error is not None:
            logger.error(f"Error generating icon set {prefix}: {error}")
            summary[prefix] = AssemblyResult(prefix=prefix, failed=True, error=str(error))

    if options.enable_logs:
        log_summary(summary)
    return summary


def extract_subset(name: str, icons: Iterable[str], source_dir=DEFAULT_OUTPUT_DIR) -> IconSet:
    """Load <source_dir>/<name>.json and keep only the listed icons.

    Unlike restrict_to, an empty list keeps no icons.

    Raises:
        SourceReadError: If the icon set file cannot be read
    """
    path = Path(source_dir) / f"{name}.json"
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        icon_set = IconSet.from_dict(data)
    except (OSError, ValueError, KeyError, TypeError) as e:
        raise SourceReadError(f"Cannot read icon set {path}: {e}") from e

    wanted = set(icons)
    for icon_name in icon_set.names(ICON):
        if icon_name not in wanted:
            icon_set.remove(icon_name)
    return icon_set
