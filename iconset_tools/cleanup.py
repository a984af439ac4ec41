"""Structural cleanup of parsed SVG icons."""

import logging
from typing import List, Optional
import xml.etree.ElementTree as ET

from .colors import SHAPE_ELEMENTS
from .svg import SVGDocument, local_name, namespace_of, parse_number

logger = logging.getLogger(__name__)

# Elements with no effect on rendering
NON_ESSENTIAL_ELEMENTS = {"metadata", "title", "desc", "script"}

# Elements that draw something when referenced from the visible tree
RENDERABLE_ELEMENTS = SHAPE_ELEMENTS | {"use", "image"}

DEFINITION_ELEMENTS = {"defs", "clipPath", "mask", "symbol", "pattern", "linearGradient",
                       "radialGradient", "filter", "marker"}

# Presentation attributes inherited by descendants; pushed down from the root
INHERITED_ATTRIBUTES = (
    "fill",
    "fill-opacity",
    "fill-rule",
    "stroke",
    "stroke-width",
    "stroke-linecap",
    "stroke-linejoin",
    "stroke-miterlimit",
    "stroke-dasharray",
    "stroke-dashoffset",
    "stroke-opacity",
    "clip-rule",
    "color",
    "opacity",
)


class CleanupError(ValueError):
    """Raised when an icon cannot be reduced to a valid SVG document."""

    pass


class CleanupReporter:
    """Scoped reporter for non-fatal cleanup notices.

    Notices go to this module's logger at DEBUG, or WARNING when verbose,
    and are also kept on the instance for callers that want them.
    """

    def __init__(self, name: str = "", verbose: bool = False):
        self.name = name
        self.level = logging.WARNING if verbose else logging.DEBUG
        self.notices: List[str] = []

    def notice(self, message: str) -> None:
        self.notices.append(message)
        if self.name:
            message = f"{self.name}: {message}"
        logger.log(self.level, message)


def _remove_non_essential(parent: ET.Element, reporter: CleanupReporter) -> None:
    for child in list(parent):
        tag = child.tag
        if not isinstance(tag, str):
            # Comments and processing instructions
            parent.remove(child)
            continue
        if namespace_of(tag) is not None:
            reporter.notice(f"removed editor element <{local_name(tag)}>")
            parent.remove(child)
            continue
        if tag in NON_ESSENTIAL_ELEMENTS:
            parent.remove(child)
            continue
        if tag == "style" and not (child.text or "").strip():
            parent.remove(child)
            continue
        _clean_attributes(child, reporter)
        _remove_non_essential(child, reporter)


def _clean_attributes(elem: ET.Element, reporter: CleanupReporter) -> None:
    for key in list(elem.attrib):
        if namespace_of(key) is not None:
            reporter.notice(f"removed attribute {local_name(key)} on <{elem.tag}>")
            del elem.attrib[key]
        elif key.startswith("on"):
            reporter.notice(f"removed event handler {key} on <{elem.tag}>")
            del elem.attrib[key]
        elif ":" in key and not key.startswith("xlink:"):
            del elem.attrib[key]


def _ensure_view_box(root: ET.Element) -> None:
    view_box = root.get("viewBox")
    if view_box:
        values = view_box.replace(",", " ").split()
        try:
            numbers = [float(v) for v in values]
        except ValueError:
            numbers = []
        if len(numbers) != 4 or numbers[2] <= 0 or numbers[3] <= 0:
            raise CleanupError(f"invalid viewBox '{view_box}'")
        return

    width = parse_number(root.get("width"))
    height = parse_number(root.get("height"))
    if not width or not height or width <= 0 or height <= 0:
        raise CleanupError("missing viewBox and dimensions")
    root.set("viewBox", f"0 0 {_fmt(width)} {_fmt(height)}")


def _fmt(value: float) -> str:
    return f"{value:g}"


def _style_declarations(style: Optional[str]) -> dict:
    result = {}
    for chunk in (style or "").split(";"):
        if ":" in chunk:
            prop, val = chunk.split(":", 1)
            result[prop.strip()] = val.strip()
    return result


def _normalize_root(root: ET.Element, reporter: CleanupReporter) -> None:
    """Keep only viewBox on the root; push inherited presentation down."""
    _ensure_view_box(root)

    inherited = {}
    for key, value in _style_declarations(root.get("style")).items():
        if key in INHERITED_ATTRIBUTES:
            inherited[key] = value
    for key in INHERITED_ATTRIBUTES:
        value = root.get(key)
        if value is not None:
            inherited[key] = value

    if inherited:
        for child in root:
            if not isinstance(child.tag, str) or child.tag in DEFINITION_ELEMENTS:
                continue
            if child.tag == "style":
                continue
            child_style = _style_declarations(child.get("style"))
            for key, value in inherited.items():
                if child.get(key) is None and key not in child_style:
                    child.set(key, value)

    view_box = root.get("viewBox")
    dropped = [k for k in root.attrib if k != "viewBox"]
    if dropped:
        reporter.notice(f"dropped root attributes: {', '.join(sorted(dropped))}")
    root.attrib.clear()
    root.set("viewBox", view_box)


def _unwrap_groups(parent: ET.Element) -> None:
    """Replace attribute-less <g> wrappers by their children."""
    index = 0
    while index < len(parent):
        child = parent[index]
        if child.tag == "g" and not child.attrib:
            parent.remove(child)
            for offset, grandchild in enumerate(list(child)):
                parent.insert(index + offset, grandchild)
            continue
        if isinstance(child.tag, str) and child.tag not in DEFINITION_ELEMENTS:
            _unwrap_groups(child)
        index += 1


def _has_renderable_content(elem: ET.Element) -> bool:
    for child in elem:
        if not isinstance(child.tag, str) or child.tag in DEFINITION_ELEMENTS:
            continue
        if child.tag in RENDERABLE_ELEMENTS:
            return True
        if _has_renderable_content(child):
            return True
    return False


def cleanup_svg(doc: SVGDocument, reporter: Optional[CleanupReporter] = None) -> SVGDocument:
    """Strip non-essential content and normalize the root element.

    Args:
        doc: Parsed document (mutated in place)
        reporter: Receives non-fatal notices; a quiet one is used if None

    Returns:
        The same document

    Raises:
        CleanupError: If no valid single-root SVG with content remains
    """
    reporter = reporter or CleanupReporter()
    root = doc.root

    if local_name(root.tag) != "svg":
        raise CleanupError(f"root element is <{local_name(root.tag)}>, expected <svg>")
    if namespace_of(root.tag) is not None:
        raise CleanupError(f"unsupported root namespace {namespace_of(root.tag)}")

    _clean_attributes(root, reporter)
    _remove_non_essential(root, reporter)
    _normalize_root(root, reporter)
    _unwrap_groups(root)

    if not _has_renderable_content(root):
        raise CleanupError("icon has no renderable content")

    return doc
