"""Geometry and size optimization for cleaned SVG icons."""

import logging
import re
from typing import List, Optional, Tuple
import xml.etree.ElementTree as ET

import numpy as np

from .svg import SVGDocument
from .types import OptimizeConfig

logger = logging.getLogger(__name__)

# Number of parameters per path command
PATH_ARITY = {
    "m": 2, "l": 2, "h": 1, "v": 1, "c": 6, "s": 4, "q": 4, "t": 2, "a": 7, "z": 0,
}

# Geometry attributes holding a single number
NUMERIC_ATTRIBUTES = (
    "x", "y", "width", "height", "cx", "cy", "r", "rx", "ry",
    "x1", "y1", "x2", "y2", "stroke-width", "fx", "fy",
)

# Attribute values equal to the SVG initial value
DEFAULT_ATTRIBUTES = {
    "fill-opacity": "1",
    "stroke-opacity": "1",
    "opacity": "1",
    "fill-rule": "nonzero",
    "clip-rule": "nonzero",
    "stroke-dasharray": "none",
    "stroke-dashoffset": "0",
    "stroke-linecap": "butt",
    "stroke-linejoin": "miter",
    "stroke-miterlimit": "4",
}

_FLAG_RE = re.compile(r"[\s,]*([01])")
_NUMBER_RE = re.compile(r"[\s,]*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")
_PLAIN_NUMBER_RE = re.compile(r"^[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?$")

PathSegment = Tuple[str, List[float]]


class PathDataError(ValueError):
    """Raised for path data that cannot be tokenized."""

    pass


def parse_path(d: str) -> List[PathSegment]:
    """Split path data into (command, parameters) segments.

    Implicit repeats are expanded, so every segment carries exactly the
    command's arity. Extra coordinate pairs after a moveto become lineto
    segments, as in the SVG grammar.

    Raises:
        PathDataError: On unexpected characters or a truncated segment
    """
    segments: List[PathSegment] = []
    pos = 0
    command: Optional[str] = None
    length = len(d)

    while pos < length:
        char = d[pos]
        if char in " \t\r\n,":
            pos += 1
            continue
        if char.isalpha():
            if char.lower() not in PATH_ARITY:
                raise PathDataError(f"unknown path command '{char}'")
            command = char
            pos += 1
            if command in "Zz":
                segments.append((command, []))
                continue
        elif command is None or command in "Zz":
            raise PathDataError(f"path data must start with a command, got '{char}'")

        arity = PATH_ARITY[command.lower()]
        params: List[float] = []
        for index in range(arity):
            # Arc flags may be written without separators ("a1 1 0 011 1")
            pattern = _FLAG_RE if command in "Aa" and index in (3, 4) else _NUMBER_RE
            match = pattern.match(d, pos)
            if not match:
                raise PathDataError(f"truncated '{command}' segment at offset {pos}")
            params.append(float(match.group(1)))
            pos = match.end()
        segments.append((command, params))
        if command == "M":
            command = "L"
        elif command == "m":
            command = "l"

    return segments


def format_number(value: float, precision: int = 3) -> str:
    """Format a number compactly: no trailing zeros, no leading zero."""
    value = round(float(value), precision)
    s = f"{value:.{precision}f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    if s in ("-0", ""):
        s = "0"
    if s.startswith("0."):
        s = s[1:]
    elif s.startswith("-0."):
        s = "-" + s[2:]
    return s


def round_values(values: List[float], precision: int) -> List[float]:
    """Round coordinates to the configured precision."""
    if not values:
        return []
    rounded = np.round(np.asarray(values, dtype=float), precision)
    # Avoid -0.0 leaking into the output
    rounded[rounded == 0] = 0.0
    return rounded.tolist()


def _is_redundant(command: str, params: List[float], next_command: Optional[str] = None) -> bool:
    # Smooth curves reflect the previous control point only after a curve
    if next_command is not None and next_command in "SsTt":
        return False
    if command == "l":
        return params[0] == 0 and params[1] == 0
    if command in ("h", "v"):
        return params[0] == 0
    return False


def _needs_separator(previous: Optional[str], token: str) -> bool:
    if previous is None or previous[-1].isalpha():
        return False
    if token.startswith("-"):
        return False
    if token.startswith(".") and "." in previous:
        return False
    return True


def format_path(segments: List[PathSegment], precision: int = 3) -> str:
    """Serialize segments, omitting repeated command letters."""
    out: List[str] = []
    previous_command: Optional[str] = None
    previous_token: Optional[str] = None
    for command, params in segments:
        # A repeated moveto letter would read back as lineto
        implicit = bool(params) and command not in "Mm" and (
            previous_command == command
            or (previous_command, command) in (("M", "L"), ("m", "l"))
        )
        if not implicit:
            out.append(command)
            previous_token = command
        for index, value in enumerate(params):
            if command in "Aa" and index in (3, 4):
                token = "1" if value else "0"
            else:
                token = format_number(value, precision)
            if _needs_separator(previous_token, token):
                out.append(" ")
            out.append(token)
            previous_token = token
        previous_command = command
    return "".join(out)


def optimize_path_data(d: str, precision: int = 3) -> str:
    """Round coordinates and drop zero-length relative segments."""
    segments = parse_path(d)
    optimized: List[PathSegment] = []
    for index, (command, params) in enumerate(segments):
        if command in "Aa":
            # Flags must stay 0/1; radii and endpoint are rounded
            rounded = round_values(params, precision)
            rounded[3], rounded[4] = params[3], params[4]
        else:
            rounded = round_values(params, precision)
        next_command = segments[index + 1][0] if index + 1 < len(segments) else None
        if _is_redundant(command, rounded, next_command):
            continue
        optimized.append((command, rounded))
    return format_path(optimized, precision)


def _optimize_numbers(elem: ET.Element, precision: int) -> None:
    for attr in NUMERIC_ATTRIBUTES:
        value = elem.get(attr)
        if value is not None and _PLAIN_NUMBER_RE.match(value.strip()):
            elem.set(attr, format_number(float(value), precision))

    points = elem.get("points")
    if points is not None:
        numbers = [float(v) for v in _NUMBER_RE.findall(points)]
        rounded = round_values(numbers, precision)
        pairs = [
            f"{format_number(rounded[i], precision)},{format_number(rounded[i + 1], precision)}"
            for i in range(0, len(rounded) - 1, 2)
        ]
        elem.set("points", " ".join(pairs))


def _remove_defaults(elem: ET.Element, declared: frozenset) -> None:
    for attr, default in DEFAULT_ATTRIBUTES.items():
        if elem.get(attr) == default and attr not in declared:
            del elem.attrib[attr]


def _walk(elem: ET.Element, config: OptimizeConfig, declared: frozenset) -> None:
    if elem.text is not None and not elem.text.strip():
        elem.text = None
    if elem.tail is not None and not elem.tail.strip():
        elem.tail = None

    if config.remove_default_attributes:
        _remove_defaults(elem, declared)

    d = elem.get("d")
    if d is not None:
        elem.set("d", optimize_path_data(d, config.precision))
    _optimize_numbers(elem, config.precision)

    inherited = declared | frozenset(k for k in elem.attrib if k in DEFAULT_ATTRIBUTES)
    for child in list(elem):
        if not isinstance(child.tag, str):
            elem.remove(child)
            continue
        _walk(child, config, inherited)
        if _is_empty(child):
            elem.remove(child)


def _is_empty(elem: ET.Element) -> bool:
    if elem.tag in ("g", "defs") and len(elem) == 0:
        return True
    if elem.tag == "path" and not elem.get("d"):
        return True
    return False


def optimize_view_box(doc: SVGDocument, precision: int) -> None:
    view_box = doc.view_box
    if view_box is None:
        return
    values = round_values(list(view_box), precision)
    doc.root.set("viewBox", " ".join(format_number(v, precision) for v in values))


def optimize_svg(doc: SVGDocument, config: Optional[OptimizeConfig] = None) -> SVGDocument:
    """Optimize a cleaned document in place.

    Args:
        doc: Cleaned SVG document
        config: Optimization settings (defaults if None)

    Returns:
        The same document

    Raises:
        PathDataError: If a path's data is malformed
    """
    config = config or OptimizeConfig()
    before = len(doc.to_string())
    _walk(doc.root, config, frozenset())
    optimize_view_box(doc, config.precision)
    after = len(doc.to_string())
    logger.debug(f"Optimized SVG: {before} -> {after} bytes")
    return doc
