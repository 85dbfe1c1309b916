from __future__ import annotations

import copy
import logging
from typing import Any

from errors import InvalidPath, InvalidRequest, ItemNotFound
from persistence.interfaces import VersionedDocumentStore

from .json_kinds import JsonKind, kind_of
from .path_resolver import UNRESOLVED, is_index_segment, parent_and_field, resolve, split_path

logger = logging.getLogger(__name__)

# Appending to this top-level array numbers the new week server-side, so two
# clients adding a week concurrently can never produce the same weekNumber.
WEEKS_PATH = "weeks"
WEEK_NUMBER_FIELD = "weekNumber"


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _same_id(a: Any, b: Any) -> bool:
    # JSON identity: "3" and 3 are different ids, and so are true and 1.
    if isinstance(a, bool) or isinstance(b, bool):
        return False
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    if isinstance(a, int) and isinstance(b, int):
        return a == b
    return False


def assign_week_number(weeks: list[Any], week: dict[str, Any]) -> None:
    if weeks:
        last = weeks[-1]
        previous = last.get(WEEK_NUMBER_FIELD) if kind_of(last) is JsonKind.OBJECT else None
        if not _is_positive_int(previous):
            previous = 1
        week[WEEK_NUMBER_FIELD] = previous + 1
    elif not _is_positive_int(week.get(WEEK_NUMBER_FIELD)):
        week[WEEK_NUMBER_FIELD] = 1


def _array_at(doc: Any, path: str) -> list[Any]:
    target = resolve(doc, path)
    if target is UNRESOLVED or kind_of(target) is not JsonKind.ARRAY:
        raise InvalidPath("Path must point to array")
    return target


class DocumentOperations:
    """
    The atomic sub-document mutations.

    Every mutation runs one read-modify-conditional-write cycle against the
    store: read with version, resolve the path, apply exactly one change to
    the freshly decoded copy, write with the read version as precondition.
    A VersionConflict from the store propagates unchanged; retrying is the
    caller's decision (see documents.retry).
    """

    def __init__(self, store: VersionedDocumentStore):
        self._store = store

    @property
    def store(self) -> VersionedDocumentStore:
        return self._store

    def fetch(self, name: str) -> Any:
        doc, _version = self._store.read_with_version(name)
        return doc

    def replace(self, name: str, doc: Any) -> str:
        """Unconditional create/replace. Only for creating documents, never as a conflict fallback."""
        try:
            return self._store.write_unconditional(name, doc)
        except ValueError as e:
            raise InvalidRequest(str(e)) from e

    def append(self, name: str, path: str, value: Any) -> Any:
        doc, version = self._store.read_with_version(name)
        target = _array_at(doc, path)

        item = copy.deepcopy(value)
        if path == WEEKS_PATH and kind_of(item) is JsonKind.OBJECT:
            assign_week_number(target, item)
        target.append(item)

        self._commit(name, doc, version, "append", path)
        return doc

    def remove_by_id(self, name: str, path: str, item_id: str | int) -> Any:
        doc, version = self._store.read_with_version(name)
        target = _array_at(doc, path)

        for index, item in enumerate(target):
            if kind_of(item) is JsonKind.OBJECT and _same_id(item.get("id"), item_id):
                del target[index]
                break
        else:
            raise ItemNotFound(f"Item {item_id!r} not found at {path!r}")

        self._commit(name, doc, version, "remove", path)
        return doc

    def patch_field(self, name: str, path: str, value: Any) -> Any:
        """
        Set one field. The parent of the final segment must be an object or an
        array, at any depth:

        - object parent: the field is created or overwritten
        - array parent: the final segment must be an existing index
        """
        if not path or "" in split_path(path):
            raise InvalidPath("Invalid path")
        doc, version = self._store.read_with_version(name)

        parent_path, field = parent_and_field(path)
        parent = resolve(doc, parent_path)
        if parent is UNRESOLVED:
            raise InvalidPath("Invalid path")

        kind = kind_of(parent)
        if kind is JsonKind.OBJECT and field and not is_index_segment(field):
            parent[field] = copy.deepcopy(value)
        elif kind is JsonKind.ARRAY and is_index_segment(field) and int(field) < len(parent):
            parent[int(field)] = copy.deepcopy(value)
        else:
            raise InvalidPath("Invalid path")

        self._commit(name, doc, version, "patch", path)
        return doc

    def _commit(self, name: str, doc: Any, version: str, action: str, path: str) -> str:
        try:
            new_version = self._store.write_if_version(name, doc, version)
        except ValueError as e:
            raise InvalidRequest(str(e)) from e
        logger.debug("DOCUMENT %s: %s at %r committed (version %s)", name, action, path, new_version)
        return new_version
