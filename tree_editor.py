"""Path-addressed editing of a JSON value held in a single cell.

A ``TreeWorkingCopy`` is detached from the document: edits only touch the
copy until the session commits it back as one cell edit.
"""

import copy
from enum import Enum
from typing import Any, Tuple

from cell_coercion import compact_json, json_scalar_from_text, loads_strict
from errors import ParseFailure, PathNotFound, TreeOperationError

NEW_KEY = "newKey"


class JsonKind(str, Enum):
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def kind_of(value) -> JsonKind:
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOL
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def parse_embedded(text):
    """Return the object/array held in ``text`` or None if it is not one."""
    if not isinstance(text, str):
        return None
    stripped = text.strip()
    if not stripped or stripped[0] not in "[{":
        return None
    try:
        value = loads_strict(stripped)
    except ValueError:
        return None
    if isinstance(value, (dict, list)):
        return value
    return None


def is_embedded_json(text) -> bool:
    return parse_embedded(text) is not None


def _step(node, segment, path, depth):
    kind = kind_of(node)
    if kind == JsonKind.OBJECT:
        if isinstance(segment, str) and segment in node:
            return node[segment]
    elif kind == JsonKind.ARRAY:
        if (
            isinstance(segment, int)
            and not isinstance(segment, bool)
            and 0 <= segment < len(node)
        ):
            return node[segment]
    raise PathNotFound(path[: depth + 1], segment)


class TreeWorkingCopy:
    def __init__(self, row: int, col: int, root: Any):
        self.row = row
        self.col = col
        self.root = root

    @classmethod
    def from_cell(cls, row: int, col: int, text: str):
        value = parse_embedded(text)
        if value is None:
            raise ParseFailure("Cell does not contain a JSON object or array")
        return cls(row, col, value)

    # ---------- navigation ----------
    def _resolve(self, path) -> Any:
        path = tuple(path)
        node = self.root
        for depth, segment in enumerate(path):
            node = _step(node, segment, path, depth)
        return node

    def _resolve_parent(self, path) -> Tuple[Any, Any]:
        path = tuple(path)
        if not path:
            raise TreeOperationError("The root has no parent")
        parent = self._resolve(path[:-1])
        # resolves the last segment too, so a missing child raises PathNotFound
        self._resolve(path)
        return parent, path[-1]

    def get(self, path=()):
        return self._resolve(path)

    def kind(self, path=()) -> JsonKind:
        return kind_of(self._resolve(path))

    # ---------- mutations ----------
    def set(self, path, text):
        value = json_scalar_from_text(text)
        path = tuple(path)
        if not path:
            self.root = value
            return value
        parent, last = self._resolve_parent(path)
        parent[last] = value
        return value

    def rename_key(self, parent_path, old_key: str, new_key: str):
        parent_path = tuple(parent_path)
        parent = self._resolve(parent_path)
        if kind_of(parent) != JsonKind.OBJECT:
            raise TreeOperationError("Only object keys can be renamed")
        if old_key not in parent:
            raise PathNotFound(parent_path + (old_key,), old_key)
        new_key = str(new_key)
        if new_key == old_key:
            return parent_path + (new_key,)
        if new_key in parent:
            raise TreeOperationError(f"Key already exists: {new_key}")
        parent[new_key] = parent.pop(old_key)
        return parent_path + (new_key,)

    def insert(self, path, is_array_parent: bool):
        """Add an empty-string child to the container at ``path``; returns its path."""
        path = tuple(path)
        parent = self._resolve(path)
        kind = kind_of(parent)
        if is_array_parent:
            if kind != JsonKind.ARRAY:
                raise TreeOperationError("Target is not an array")
            parent.append("")
            return path + (len(parent) - 1,)

        if kind != JsonKind.OBJECT:
            raise TreeOperationError("Target is not an object")
        key = NEW_KEY
        suffix = 1
        while key in parent:
            key = f"{NEW_KEY}{suffix}"
            suffix += 1
        parent[key] = ""
        return path + (key,)

    def delete(self, path):
        parent, last = self._resolve_parent(path)
        # list deletion shifts the later indices down by one
        del parent[last]

    # ---------- output ----------
    def serialize(self) -> str:
        return compact_json(self.root)

    def snapshot(self):
        return copy.deepcopy(self.root)
