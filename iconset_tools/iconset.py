"""In-memory icon set and its exportable JSON representation."""

import copy
import json
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from .svg import SVGDocument
from .types import AUTHOR, DEFAULT_HEIGHT

ICON = "icon"
ALIAS = "alias"


def default_info() -> dict:
    """Shared metadata block, a fresh copy per set."""
    return {
        "name": AUTHOR,
        "author": {"name": AUTHOR},
        "height": DEFAULT_HEIGHT,
    }


def _number(value: float):
    # Keep integral dimensions as ints in the JSON output
    return int(value) if float(value).is_integer() else value


@dataclass
class IconEntry:
    """One entry of an icon set: an icon body or an alias to another entry."""

    kind: str
    data: dict = field(default_factory=dict)

    @classmethod
    def from_document(cls, doc: SVGDocument) -> "IconEntry":
        data = {"body": doc.body}
        view_box = doc.view_box
        if view_box is not None:
            left, top, width, height = view_box
            if left:
                data["left"] = _number(left)
            if top:
                data["top"] = _number(top)
            data["width"] = _number(width)
            data["height"] = _number(height)
        return cls(kind=ICON, data=data)


class IconSet:
    """A named collection of sanitized icons sharing one metadata block.

    Entries keep insertion order so that exports are deterministic.
    """

    def __init__(self, prefix: str, info: Optional[dict] = None):
        if not prefix or not isinstance(prefix, str):
            raise ValueError("Icon set prefix must be a non-empty string")
        self.prefix = prefix
        self.info = copy.deepcopy(info) if info is not None else default_info()
        self._entries: Dict[str, IconEntry] = {}

    @classmethod
    def from_dict(cls, data: dict) -> "IconSet":
        """Load a previously exported icon set document."""
        icon_set = cls(data["prefix"], info=data.get("info") or default_info())
        for name, body in (data.get("icons") or {}).items():
            icon_set._entries[name] = IconEntry(kind=ICON, data=copy.deepcopy(body))
        for name, body in (data.get("aliases") or {}).items():
            icon_set._entries[name] = IconEntry(kind=ALIAS, data=copy.deepcopy(body))
        return icon_set

    def put(self, name: str, doc: SVGDocument) -> None:
        """Insert or overwrite an icon from an already sanitized document."""
        if not name or not isinstance(name, str):
            raise ValueError("Icon name must be a non-empty string")
        self._entries[name] = IconEntry.from_document(doc)

    def remove(self, name: str) -> None:
        """Remove an entry; unknown names are ignored."""
        self._entries.pop(name, None)

    def restrict_to(self, names: Iterable[str]) -> None:
        """Keep only the icons listed in names.

        An empty allow-list keeps everything. Aliases whose parent icon
        is removed are removed with it.
        """
        allowed = set(names or ())
        if not allowed:
            return
        for name in self.names(ICON):
            if name not in allowed:
                del self._entries[name]
        for name in self.names(ALIAS):
            if self._entries[name].data.get("parent") not in self._entries:
                del self._entries[name]

    def names(self, kind: Optional[str] = None) -> List[str]:
        return [n for n, e in self._entries.items() if kind is None or e.kind == kind]

    def get(self, name: str) -> Optional[dict]:
        entry = self._entries.get(name)
        return entry.data if entry is not None else None

    def count(self) -> int:
        """Number of entries of kind icon."""
        return sum(1 for e in self._entries.values() if e.kind == ICON)

    def export(self) -> dict:
        """Exportable document: prefix, info and icons in insertion order."""
        data = {
            "prefix": self.prefix,
            "info": copy.deepcopy(self.info),
            "icons": {
                n: copy.deepcopy(e.data) for n, e in self._entries.items() if e.kind == ICON
            },
        }
        aliases = {n: copy.deepcopy(e.data) for n, e in self._entries.items() if e.kind == ALIAS}
        if aliases:
            data["aliases"] = aliases
        return data

    def __contains__(self, name: str) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.names(ICON))

    def __len__(self) -> int:
        return self.count()

    def __repr__(self) -> str:
        return f"IconSet(prefix={self.prefix!r}, icons={self.count()})"


def create_empty_icon_set(prefix: str) -> IconSet:
    """Create an empty icon set with the shared metadata."""
    return IconSet(prefix)


def icon_set_to_json(icon_set: IconSet) -> str:
    """Serialize an icon set to indented JSON."""
    return json.dumps(icon_set.export(), indent=2, ensure_ascii=False)
