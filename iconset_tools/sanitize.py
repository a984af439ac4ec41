"""Per-icon sanitization: cleanup, color policy, optimization."""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple
import xml.etree.ElementTree as ET

from .cleanup import CleanupError, CleanupReporter, cleanup_svg
from .colors import normalize_colors
from .optimize import PathDataError, optimize_svg
from .svg import SVGDocument
from .types import InvalidIconError, SanitizeConfig

logger = logging.getLogger(__name__)


@dataclass
class SanitizeOutcome:
    """Aggregated result of sanitizing a batch of icons."""

    successes: Dict[str, SVGDocument] = field(default_factory=dict)
    failures: List[InvalidIconError] = field(default_factory=list)

    def __iter__(self):
        # Allows `successes, failures = sanitize_icons(...)`
        yield self.successes
        yield self.failures


def sanitize_icon(
    name: str, doc: SVGDocument, config: Optional[SanitizeConfig] = None
) -> SVGDocument:
    """Clean, recolor and optimize one icon.

    Args:
        name: Icon name, used in errors and notices
        doc: Parsed document (mutated in place)
        config: Sanitization settings (defaults if None)

    Returns:
        The sanitized document

    Raises:
        InvalidIconError: If the icon cannot be turned into valid geometry
    """
    config = config or SanitizeConfig()
    reporter = CleanupReporter(name, verbose=config.verbose)

    try:
        cleanup_svg(doc, reporter)
        normalize_colors(doc, token=config.color_token, default_color=config.default_color)
        optimize_svg(doc, config.optimize)
    except (CleanupError, PathDataError) as e:
        raise InvalidIconError(name, e) from e

    return doc


def sanitize_markup(
    name: str, markup: str, config: Optional[SanitizeConfig] = None
) -> SVGDocument:
    """Parse raw markup and sanitize it.

    Raises:
        InvalidIconError: On parse errors or sanitization failures
    """
    if not name or not isinstance(name, str):
        raise InvalidIconError(name, "empty icon name")
    if markup is None or not str(markup).strip():
        raise InvalidIconError(name, "empty source")
    try:
        doc = SVGDocument.from_string(markup)
    except (ET.ParseError, UnicodeDecodeError) as e:
        raise InvalidIconError(name, e) from e
    return sanitize_icon(name, doc, config)


def sanitize_icons(
    entries: Iterable[Tuple[str, Optional[str]]],
    config: Optional[SanitizeConfig] = None,
    on_progress: Optional[Callable[[str], None]] = None,
) -> SanitizeOutcome:
    """Sanitize a stream of (name, markup) pairs.

    Entries are processed in iteration order; a later entry with the
    same name replaces an earlier one. Failures never stop the batch.

    Args:
        entries: (name, raw markup) pairs; markup may be None for
            glyphs missing from their source
        config: Sanitization settings
        on_progress: Called with each icon name once it is processed

    Returns:
        SanitizeOutcome with the cleaned documents and the failures
    """
    outcome = SanitizeOutcome()
    for name, markup in entries:
        try:
            outcome.successes[name] = sanitize_markup(name, markup, config)
        except InvalidIconError as e:
            outcome.failures.append(e)
            logger.error(f"Error parsing {name}: {e.cause}")
        finally:
            if on_progress is not None:
                on_progress(name)
    return outcome
