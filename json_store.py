from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def encode_document(doc: Any, *, indent: int | None = 2) -> bytes:
    """
    Serialize a JSON value to the bytes stored for a document.

    Key order is preserved. Raises ValueError for values JSON cannot represent
    (NaN, infinities, non-JSON types).
    """
    try:
        text = json.dumps(doc, indent=indent, ensure_ascii=False, allow_nan=False)
    except TypeError as e:
        raise ValueError(f"Value is not JSON serializable: {e}") from e
    return (text + "\n").encode("utf-8")


def decode_document(raw: bytes) -> Any:
    """
    Parse stored bytes back into a JSON value.

    Unlike a lenient config reader, empty or invalid content is an error here:
    a stored document must always be exactly one well-formed JSON value.
    """
    text = raw.decode("utf-8")
    if not text.strip():
        raise ValueError("Stored document is empty")
    return json.loads(text)


def atomic_write_bytes(path: Path, payload: bytes) -> None:
    """
    Atomically write bytes to disk by writing to a temp file then replacing.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("wb") as f:
        f.write(payload)
    tmp_path.replace(path)
