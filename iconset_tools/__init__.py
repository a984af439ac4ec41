"""iconset-tools: build normalized Iconify icon sets from SVG icons.

Validates, cleans, recolors to currentColor and optimizes each icon, then
assembles them into one JSON icon set per family.
"""

from .iconset import IconSet, create_empty_icon_set, icon_set_to_json
from .persistence import save_icon_set
from .pipeline import assemble_icon_set, extract_subset, generate_icon_set, generate_icon_sets
from .sanitize import sanitize_icon, sanitize_markup
from .sources import GlyphCollection, GlyphDefinition, load_glyph_collection
from .types import (
    AssemblyResult,
    ConfigurationError,
    GenerateSetOptions,
    GenerateSetsOptions,
    IconSetError,
    InvalidIconError,
    PersistenceError,
    SanitizeConfig,
    SourceReadError,
)

__version__ = "0.1.0"
__all__ = [
    "IconSet",
    "create_empty_icon_set",
    "icon_set_to_json",
    "save_icon_set",
    "assemble_icon_set",
    "extract_subset",
    "generate_icon_set",
    "generate_icon_sets",
    "sanitize_icon",
    "sanitize_markup",
    "GlyphCollection",
    "GlyphDefinition",
    "load_glyph_collection",
    "AssemblyResult",
    "ConfigurationError",
    "GenerateSetOptions",
    "GenerateSetsOptions",
    "IconSetError",
    "InvalidIconError",
    "PersistenceError",
    "SanitizeConfig",
    "SourceReadError",
]
