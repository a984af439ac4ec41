"""Color parsing and the uniform currentColor policy."""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .svg import SVGDocument
from .types import CURRENT_COLOR

logger = logging.getLogger(__name__)

# Attributes that carry paint or color values
COLOR_ATTRIBUTES = ("fill", "stroke", "stop-color", "flood-color", "lighting-color", "color")

# Elements that render with an implicit black fill when nothing sets one
SHAPE_ELEMENTS = {"path", "circle", "ellipse", "line", "polygon", "polyline", "rect", "text"}

NAMED_COLORS = frozenset(
    """
    aliceblue antiquewhite aqua aquamarine azure beige bisque black blanchedalmond blue
    blueviolet brown burlywood cadetblue chartreuse chocolate coral cornflowerblue cornsilk
    crimson cyan darkblue darkcyan darkgoldenrod darkgray darkgreen darkgrey darkkhaki
    darkmagenta darkolivegreen darkorange darkorchid darkred darksalmon darkseagreen
    darkslateblue darkslategray darkslategrey darkturquoise darkviolet deeppink deepskyblue
    dimgray dimgrey dodgerblue firebrick floralwhite forestgreen fuchsia gainsboro ghostwhite
    gold goldenrod gray green greenyellow grey honeydew hotpink indianred indigo ivory khaki
    lavender lavenderblush lawngreen lemonchiffon lightblue lightcoral lightcyan
    lightgoldenrodyellow lightgray lightgreen lightgrey lightpink lightsalmon lightseagreen
    lightskyblue lightslategray lightslategrey lightsteelblue lightyellow lime limegreen linen
    magenta maroon mediumaquamarine mediumblue mediumorchid mediumpurple mediumseagreen
    mediumslateblue mediumspringgreen mediumturquoise mediumvioletred midnightblue mintcream
    mistyrose moccasin navajowhite navy oldlace olive olivedrab orange orangered orchid
    palegoldenrod palegreen paleturquoise palevioletred papayawhip peachpuff peru pink plum
    powderblue purple rebeccapurple red rosybrown royalblue saddlebrown salmon sandybrown
    seagreen seashell sienna silver skyblue slateblue slategray slategrey snow springgreen
    steelblue tan teal thistle tomato turquoise violet wheat white whitesmoke yellow
    yellowgreen
    """.split()
)

_HEX_RE = re.compile(r"^#([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_FUNC_RE = re.compile(r"^(rgba?|hsla?)\(\s*([^)]*)\)$", re.IGNORECASE)
_COMPONENT_RE = re.compile(r"^[-+]?(?:\d+\.?\d*|\.\d+)(?:%|deg)?$")
_CSS_DECL_RE = re.compile(
    r"(?P<prop>(?<![\w-])(?:fill|stroke|stop-color|flood-color|lighting-color|color))\s*:\s*(?P<value>[^;}!]+)",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class Color:
    """A recognized color value.

    kind is one of 'rgb', 'hsl', 'named', 'none', 'transparent', 'current'.
    """

    kind: str
    alpha: float = 1.0
    keyword: Optional[str] = None


def _parse_alpha(token: str) -> Optional[float]:
    if not _COMPONENT_RE.match(token):
        return None
    if token.endswith("%"):
        return float(token[:-1]) / 100.0
    return float(token)


def _parse_function(name: str, args: str) -> Optional[Color]:
    # Accept both comma and space separated syntax, with optional "/ alpha"
    tokens = [t for t in re.split(r"[\s,/]+", args.strip()) if t]
    if len(tokens) not in (3, 4):
        return None
    if not all(_COMPONENT_RE.match(t) for t in tokens):
        return None
    alpha = 1.0
    if len(tokens) == 4:
        alpha = _parse_alpha(tokens[3])
        if alpha is None:
            return None
    kind = "rgb" if name.lower().startswith("rgb") else "hsl"
    return Color(kind=kind, alpha=alpha)


def parse_color(value: str) -> Optional[Color]:
    """Parse a CSS/SVG color value.

    Returns None for malformed values, paint server references and
    CSS-wide keywords.
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    lowered = value.lower()

    if lowered == "none":
        return Color(kind="none", alpha=0.0, keyword="none")
    if lowered == "transparent":
        return Color(kind="transparent", alpha=0.0, keyword="transparent")
    if lowered == "currentcolor":
        return Color(kind="current", keyword=CURRENT_COLOR)
    if lowered in NAMED_COLORS:
        return Color(kind="named", keyword=lowered)

    match = _HEX_RE.match(value)
    if match:
        digits = match.group(1)
        alpha = 1.0
        if len(digits) == 4:
            alpha = int(digits[3] * 2, 16) / 255.0
        elif len(digits) == 8:
            alpha = int(digits[6:8], 16) / 255.0
        return Color(kind="rgb", alpha=alpha)

    match = _FUNC_RE.match(value)
    if match:
        return _parse_function(match.group(1), match.group(2))

    return None


def is_empty_color(color: Optional[Color]) -> bool:
    """True for missing, 'none', 'transparent' or fully transparent colors."""
    if color is None:
        return True
    if color.kind in ("none", "transparent"):
        return True
    return color.alpha <= 0


def replace_color(value: str, token: str = CURRENT_COLOR) -> str:
    """Return the value the color policy assigns to a single declaration."""
    color = parse_color(value)
    if is_empty_color(color):
        return value
    return token


def _parse_style(style: str):
    declarations = []
    for chunk in style.split(";"):
        if ":" not in chunk:
            if chunk.strip():
                declarations.append((chunk.strip(), None))
            continue
        prop, val = chunk.split(":", 1)
        declarations.append((prop.strip(), val.strip()))
    return declarations


def _format_style(declarations) -> str:
    parts = []
    for prop, val in declarations:
        parts.append(prop if val is None else f"{prop}:{val}")
    return ";".join(parts)


def _rewrite_stylesheet(css: str, token: str):
    """Apply the color policy to declarations inside a <style> element."""
    count = 0

    def repl(match):
        nonlocal count
        value = match.group("value").strip()
        new_value = replace_color(value, token)
        if new_value == value:
            return match.group(0)
        count += 1
        return f"{match.group('prop')}:{new_value}"

    return _CSS_DECL_RE.sub(repl, css), count


def _declares_fill(elem) -> bool:
    if elem.get("fill") is not None:
        return True
    style = elem.get("style")
    if style:
        return any(prop == "fill" for prop, _ in _parse_style(style))
    return False


def _apply_default_color(doc: SVGDocument, default_color: str) -> int:
    """Set fill on shapes that inherit no fill from any ancestor."""
    added = 0

    def walk(elem, inherited: bool):
        nonlocal added
        for child in elem:
            if not isinstance(child.tag, str):
                continue
            has_fill = inherited or _declares_fill(child)
            if child.tag in SHAPE_ELEMENTS and not has_fill:
                child.set("fill", default_color)
                added += 1
                has_fill = True
            # Definitions are only rendered through references
            if child.tag in ("defs", "clipPath", "mask", "symbol", "pattern"):
                continue
            walk(child, has_fill)

    walk(doc.root, _declares_fill(doc.root))
    return added


def normalize_colors(
    doc: SVGDocument,
    token: str = CURRENT_COLOR,
    default_color: Optional[str] = None,
) -> int:
    """Rewrite every non-empty color declaration to the given token.

    Empty colors ('none', 'transparent', zero alpha) and values that do
    not parse as colors are left untouched. The document is mutated in
    place.

    Args:
        doc: Parsed SVG document
        token: Replacement value for meaningful colors
        default_color: If set, shapes with no fill anywhere in their
            ancestry get this fill

    Returns:
        Number of declarations rewritten or added
    """
    changed = 0
    for elem in doc.iter_elements():
        for attr in COLOR_ATTRIBUTES:
            value = elem.get(attr)
            if value is None:
                continue
            new_value = replace_color(value, token)
            if new_value != value:
                elem.set(attr, new_value)
                changed += 1

        style = elem.get("style")
        if style:
            declarations = _parse_style(style)
            rewritten = []
            for prop, val in declarations:
                if val is not None and prop.lower() in COLOR_ATTRIBUTES:
                    new_val = replace_color(val, token)
                    if new_val != val:
                        changed += 1
                    val = new_val
                rewritten.append((prop, val))
            new_style = _format_style(rewritten)
            if new_style != style:
                elem.set("style", new_style)

        if elem.tag == "style" and elem.text:
            elem.text, count = _rewrite_stylesheet(elem.text, token)
            changed += count

    if default_color:
        changed += _apply_default_color(doc, default_color)

    logger.debug(f"Normalized {changed} color declaration(s)")
    return changed
