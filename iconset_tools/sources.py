"""Icon sources: SVG directories and glyph collections."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .types import SourceReadError

logger = logging.getLogger(__name__)

SVG_EXTENSIONS = {".svg"}

RawIcon = Tuple[str, Optional[str]]


def get_svg_files(folder) -> List[Path]:
    """Get all SVG files from a folder, sorted by file name."""
    folder = Path(folder)
    if not folder.is_dir():
        raise SourceReadError(f"Source folder not found: {folder}")
    try:
        files = [p for p in folder.iterdir() if p.is_file() and p.suffix.lower() in SVG_EXTENSIONS]
    except OSError as e:
        raise SourceReadError(f"Cannot list source folder {folder}: {e}") from e
    return sorted(files, key=lambda p: p.name)


def read_directory(folder) -> List[RawIcon]:
    """Read (name, markup) pairs from a directory; file stem = icon name.

    Files that cannot be read are returned with empty markup so that
    they surface as per-icon failures.

    Raises:
        SourceReadError: If the directory cannot be enumerated
    """
    icons: List[RawIcon] = []
    for path in get_svg_files(folder):
        try:
            markup = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read {path}: {e}")
            markup = ""
        icons.append((path.stem, markup))
    logger.debug(f"Found {len(icons)} SVG file(s) in {folder}")
    return icons


@dataclass(frozen=True)
class GlyphDefinition:
    """Vector data of one glyph: canvas size plus path data.

    path_data is a list of two strings for duotone glyphs
    (secondary, primary).
    """

    width: float
    height: float
    path_data: Union[str, Tuple[str, ...]]

    def to_svg(self, prefix: str = "", name: str = "") -> str:
        """Render the glyph as standalone SVG markup."""
        head = (
            f'<svg aria-hidden="true" focusable="false" data-prefix="{prefix}" '
            f'data-icon="{name}" class="svg-inline--fa fa-{name}" role="img" '
            f'xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {self.width:g} {self.height:g}">'
        )
        if isinstance(self.path_data, str):
            body = f'<path fill="currentColor" d="{self.path_data}"></path>'
        else:
            secondary, primary = (list(self.path_data) + ["", ""])[:2]
            body = (
                '<g class="fa-duotone-group">'
                f'<path class="fa-secondary" fill="currentColor" d="{secondary}"></path>'
                f'<path class="fa-primary" fill="currentColor" d="{primary}"></path>'
                "</g>"
            )
        return f"{head}{body}</svg>"


@dataclass
class GlyphCollection:
    """An enumerable glyph collection for one prefix."""

    prefix: str
    glyphs: Dict[str, Optional[GlyphDefinition]] = field(default_factory=dict)

    def lookup(self, name: str) -> Optional[str]:
        """Return raw markup for a glyph, or None if it is absent."""
        glyph = self.glyphs.get(name)
        if glyph is None:
            return None
        return glyph.to_svg(self.prefix, name)

    def names(self) -> List[str]:
        return list(self.glyphs)

    def entries(self) -> Iterator[RawIcon]:
        for name in self.glyphs:
            yield name, self.lookup(name)

    def __len__(self) -> int:
        return len(self.glyphs)


def _glyph_from_tuple(icon) -> Optional[GlyphDefinition]:
    # [width, height, ligatures, unicode, pathData]
    if not isinstance(icon, (list, tuple)) or len(icon) < 5:
        return None
    width, height, path_data = icon[0], icon[1], icon[4]
    if isinstance(path_data, list):
        path_data = tuple(path_data)
    return GlyphDefinition(width=float(width), height=float(height), path_data=path_data)


def glyph_collection_from_dict(data: dict, prefix: Optional[str] = None) -> GlyphCollection:
    """Build a collection from pack data.

    Two shapes are accepted:
        {"prefix": "fas", "icons": {"star": [w, h, ligatures, unicode, d]}}
        {"faStar": {"prefix": "fas", "iconName": "star", "icon": [...]}, ...}

    Raises:
        SourceReadError: If the data has neither shape or no prefix
    """
    if not isinstance(data, dict):
        raise SourceReadError("Glyph collection data must be an object")

    glyphs: Dict[str, Optional[GlyphDefinition]] = {}
    if isinstance(data.get("icons"), dict):
        prefix = prefix or data.get("prefix")
        for name, icon in data["icons"].items():
            glyphs[name] = _glyph_from_tuple(icon)
    else:
        for definition in data.values():
            if not isinstance(definition, dict) or "iconName" not in definition:
                raise SourceReadError("Unrecognized glyph collection entry")
            prefix = prefix or definition.get("prefix")
            glyphs[definition["iconName"]] = _glyph_from_tuple(definition.get("icon"))

    if not prefix:
        raise SourceReadError("Glyph collection has no prefix")
    return GlyphCollection(prefix=prefix, glyphs=glyphs)


def load_glyph_collection(path) -> GlyphCollection:
    """Load a glyph collection from a JSON pack file.

    Raises:
        SourceReadError: If the file is missing or not a valid pack
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise SourceReadError(f"Cannot read glyph collection {path}: {e}") from e
    collection = glyph_collection_from_dict(data, prefix=None)
    logger.debug(f"Loaded {len(collection)} glyph(s) for '{collection.prefix}' from {path}")
    return collection
