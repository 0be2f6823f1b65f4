"""
Entry codec.

Turns an `Entry` into the binary chunk a segment stores, and back. The chunk
is the compact UTF-8 JSON of the export envelope, so its length is exactly
what the capacity ledger charges for the entry. Tuples come back as lists
and dict keys must be strings. Divider entries carry no payload and encode
to an empty chunk.

Public API:
- encode_entry(entry) -> StoredEntry
- decode_entry(stored) -> Entry
"""

from __future__ import annotations

import json
from typing import Any

from .dto import Entry, StoredEntry
from .errors import MalformedEntryError

_SEPARATORS = (",", ":")


def encode_entry(entry: Entry) -> StoredEntry:
    """
    Encode one entry.

    Raises
    ------
    MalformedEntryError
        If the payload is not representable as strict JSON (unsupported types,
        NaN/Infinity, circular references, non-string dict keys).
    """
    if entry.is_divider:
        return StoredEntry(kind=entry.kind, chunk=b"", timestamp=entry.timestamp)

    try:
        text = json.dumps(
            entry.to_message(),
            ensure_ascii=False,
            allow_nan=False,
            separators=_SEPARATORS,
        )
    except (TypeError, ValueError, RecursionError) as e:
        raise MalformedEntryError(f"Cannot encode {entry.kind} entry: {e}") from e

    try:
        chunk = text.encode("utf-8")
    except UnicodeEncodeError as e:
        # lone surrogates survive json.dumps but not utf-8
        raise MalformedEntryError(f"Cannot encode {entry.kind} entry: {e}") from e

    # json.dumps stringifies int/float/bool/None keys, which would not decode back
    bad_key = _non_string_key(entry.payload)
    if bad_key is not None:
        raise MalformedEntryError(f"Cannot encode {entry.kind} entry: non-string key {bad_key!r}")

    return StoredEntry(kind=entry.kind, chunk=chunk, timestamp=entry.timestamp)


def _non_string_key(value: Any) -> Any:
    """First dict key anywhere in `value` that is not a str, else None."""
    stack = [value]
    while stack:
        item = stack.pop()
        if isinstance(item, dict):
            for key, child in item.items():
                if not isinstance(key, str):
                    return key
                stack.append(child)
        elif isinstance(item, (list, tuple)):
            stack.extend(item)
    return None


def decode_entry(stored: StoredEntry) -> Entry:
    """Decode a stored chunk back into an Entry."""
    if not stored.chunk:
        return Entry(kind=stored.kind, payload=None, timestamp=stored.timestamp)

    message = json.loads(stored.chunk.decode("utf-8"))
    return Entry(
        kind=message.get("type", stored.kind),
        payload=message.get("data"),
        timestamp=int(message.get("timestamp", stored.timestamp)),
    )
