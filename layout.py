# Keyboard layouts as a matrix of single-character keys.
# Layout files are JSON: {"name": ..., "authors": [...], "keys": [[...], ...]}

import copy
import json
import logging
import os
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

Pos = Tuple[int, int] # (row, col) into Layout.keys

class Layout:

    def __init__(
            self, name: str, authors: List[str] = None,
            keys: List[List[str]] = None) -> None:
        self.name = name
        self.authors = list(authors) if authors else []
        self.keys = [list(row) for row in keys] if keys else []
        self.positions = {} # type: Dict[str, Pos]
        self._index_positions()

    def _index_positions(self):
        self.positions.clear()
        for r, row in enumerate(self.keys):
            for c, key in enumerate(row):
                if key:
                    self.positions[key] = (r, c)

    def position(self, key: str) -> Optional[Pos]:
        """Where `key` sits in the matrix, or None if the layout doesn't
        have it."""
        return self.positions.get(key, None)

    def swap(self, a: str, b: str) -> bool:
        """Exchanges two keys. Returns False without changing anything if
        either key is missing."""
        pa = self.position(a)
        pb = self.position(b)
        if pa is None or pb is None:
            return False
        self.keys[pa[0]][pa[1]] = b
        self.keys[pb[0]][pb[1]] = a
        self.positions[a] = pb
        self.positions[b] = pa
        return True

    def copy(self) -> "Layout":
        return Layout(self.name, self.authors, copy.deepcopy(self.keys))

    def renamed(self, name: str, authors: List[str]) -> "Layout":
        new = self.copy()
        new.name = name
        new.authors = list(authors)
        return new

    def to_json(self) -> dict:
        return {
            "name": self.name,
            "authors": self.authors,
            "keys": self.keys,
        }

    @classmethod
    def from_json(cls, data: dict) -> "Layout":
        """Raises KeyError or TypeError if the data isn't shaped like a
        layout."""
        keys = data["keys"]
        if not isinstance(keys, list) or not all(
                isinstance(row, list) for row in keys):
            raise TypeError("layout keys must be a list of rows")
        return cls(data["name"], data.get("authors", []),
                   [[str(key) for key in row] for row in keys])

    def save(self, path: str):
        with open(path, "w") as file:
            json.dump(self.to_json(), file, indent=2)

    def __str__(self) -> str:
        if self.authors:
            return f"{self.name} ({', '.join(self.authors)})"
        return self.name

    def __repr__(self) -> str:
        return "\n".join(" ".join(key or "." for key in row)
                         for row in self.keys)

def load(path: str) -> Layout:
    with open(path) as file:
        return Layout.from_json(json.load(file))

def layout_key(name: str) -> str:
    return name.lower().replace(" ", "-")

def scan_layouts(directory: str) -> Dict[str, Layout]:
    """Loads every layout file in `directory`, keyed by `layout_key` of
    its name. Files that fail to parse are skipped."""
    result = {}
    with os.scandir(directory) as files:
        for file in sorted(files, key=lambda f: f.name):
            if not file.is_file():
                continue
            try:
                layout_ = load(file.path)
            except (OSError, ValueError, KeyError, TypeError) as e:
                logger.warning("couldn't parse layout file %s: %s",
                               file.path, e)
                continue
            result[layout_key(layout_.name)] = layout_
    return result
