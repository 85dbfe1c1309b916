"""
Dot-separated path addressing into a decoded JSON document.

A segment made only of ASCII digits is always an array index; any other
segment is an object key. Object keys that are all digits are therefore not
addressable: an index segment applied to an object does not resolve.
"""

from __future__ import annotations

import re
from typing import Any

from .json_kinds import JsonKind, kind_of

INDEX_SEGMENT_RE = re.compile(r"[0-9]+")


class _Unresolved:
    _instance: "_Unresolved | None" = None

    def __new__(cls) -> "_Unresolved":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNRESOLVED"

    def __bool__(self) -> bool:
        return False


UNRESOLVED = _Unresolved()


def is_index_segment(segment: str) -> bool:
    return bool(INDEX_SEGMENT_RE.fullmatch(segment))


def split_path(path: str) -> list[str]:
    """The empty path addresses the root and has no segments."""
    if path == "":
        return []
    return path.split(".")


def parent_and_field(path: str) -> tuple[str, str]:
    """Split "a.b.c" into ("a.b", "c"); a single segment has the empty (root) parent."""
    parent, _, field = path.rpartition(".")
    return parent, field


def step(node: Any, segment: str) -> Any:
    kind = kind_of(node)
    if is_index_segment(segment):
        if kind is not JsonKind.ARRAY:
            return UNRESOLVED
        index = int(segment)
        return node[index] if index < len(node) else UNRESOLVED
    if segment == "" or kind is not JsonKind.OBJECT:
        return UNRESOLVED
    if segment not in node:
        return UNRESOLVED
    return node[segment]


def resolve(root: Any, path: str) -> Any:
    """
    Return the node at `path` inside `root`, or UNRESOLVED as soon as a segment
    is missing or the current node cannot be indexed by it.

    Pure: never mutates `root`. A resolved JSON null is returned as None, which
    is distinct from UNRESOLVED.
    """
    node = root
    for segment in split_path(path):
        node = step(node, segment)
        if node is UNRESOLVED:
            return UNRESOLVED
    return node
