"""SVG document parsing and serialization."""

import re
from typing import Iterator, Optional, Tuple
import xml.etree.ElementTree as ET

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")


def local_name(tag) -> str:
    """Return the tag without its namespace ('{ns}path' -> 'path')."""
    if not isinstance(tag, str):
        return ""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def namespace_of(name: str) -> Optional[str]:
    """Return the namespace URI of a qualified name, or None."""
    if name.startswith("{"):
        return name[1:].split("}", 1)[0]
    return None


def _unqualify(root: ET.Element) -> None:
    """Drop the SVG namespace from tags and rewrite xlink attributes.

    Elements in foreign namespaces keep their qualified tag so that
    cleanup can recognize and remove them.
    """
    for elem in root.iter():
        if isinstance(elem.tag, str) and namespace_of(elem.tag) == SVG_NS:
            elem.tag = local_name(elem.tag)
        for key in list(elem.attrib):
            if namespace_of(key) == XLINK_NS:
                elem.attrib[f"xlink:{local_name(key)}"] = elem.attrib.pop(key)


def parse_number(value: str) -> Optional[float]:
    """Parse a leading number from an attribute value ('24px' -> 24.0)."""
    if value is None:
        return None
    match = _NUMBER_RE.match(value.strip())
    if not match:
        return None
    return float(match.group(0))


class SVGDocument:
    """A parsed SVG document with namespace-free tags."""

    def __init__(self, root: ET.Element):
        self.root = root

    @classmethod
    def from_string(cls, markup: str) -> "SVGDocument":
        """Parse raw markup.

        Raises:
            ET.ParseError: If the markup is not well-formed XML
        """
        if isinstance(markup, bytes):
            markup = markup.decode("utf-8")
        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        root = ET.fromstring(markup.strip(), parser=parser)
        _unqualify(root)
        return cls(root)

    def copy(self) -> "SVGDocument":
        return SVGDocument.from_string(self.to_string())

    def iter_elements(self) -> Iterator[ET.Element]:
        """Iterate over all elements, skipping comments and processing instructions."""
        for elem in self.root.iter():
            if isinstance(elem.tag, str):
                yield elem

    @property
    def view_box(self) -> Optional[Tuple[float, float, float, float]]:
        """Return (left, top, width, height) from the viewBox attribute."""
        raw = self.root.get("viewBox")
        if not raw:
            return None
        values = [float(v) for v in _NUMBER_RE.findall(raw)]
        if len(values) != 4:
            return None
        return values[0], values[1], values[2], values[3]

    @property
    def body(self) -> str:
        """Inner markup of the root element."""
        parts = []
        if self.root.text and self.root.text.strip():
            parts.append(self.root.text.strip())
        for child in self.root:
            parts.append(ET.tostring(child, encoding="unicode"))
        return "".join(parts)

    def to_string(self) -> str:
        """Serialize the whole document, root element included."""
        attrs = {"xmlns": SVG_NS}
        if any(k.startswith("xlink:") for e in self.iter_elements() for k in e.attrib):
            attrs["xmlns:xlink"] = XLINK_NS
        for key, value in self.root.attrib.items():
            if key not in attrs:
                attrs[key] = value
        head = " ".join(f'{k}="{_escape_attr(v)}"' for k, v in attrs.items())
        tag = local_name(self.root.tag)
        body = self.body
        if not body:
            return f"<{tag} {head}/>"
        return f"<{tag} {head}>{body}</{tag}>"

    def __repr__(self) -> str:
        return f"SVGDocument(view_box={self.view_box!r})"


def _escape_attr(value: str) -> str:
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace('"', "&quot;")
    )
