# src/docrest/query/fields.py
"""
Field projection grammar and value extraction.

    "some.deep.key:base64:text/plain;key2;key3" ->
    [FieldSpec('some.deep.key', 'base64', 'text/plain'),
     FieldSpec('key2', None, None),
     FieldSpec('key3', None, None)]
"""

import base64
import json
import re
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Mapping, Optional

BASE64 = "base64"

_MISSING = object()
_NON_BASE64 = re.compile(rb"[^A-Za-z0-9+/_-]")


@dataclass(frozen=True)
class FieldSpec:
    """One projected field: a dot-path key plus optional decoding instructions."""

    key: str
    decode: Optional[str] = None
    # Advisory only; the projection itself does not use it.
    content_type: Optional[str] = None


def fieldify(text: Optional[str]) -> Optional[List[FieldSpec]]:
    """Convert a projection string into an ordered list of field specs."""
    if not text:
        return None

    result = []
    for entry in text.split(";"):
        tokens = entry.split(":")
        tokens += [None] * (3 - len(tokens))
        result.append(FieldSpec(key=tokens[0], decode=tokens[1], content_type=tokens[2]))

    return result


def get_value(record: Any, path: str, default: Any = None) -> Any:
    """Read a dot-path out of nested mappings and lists."""
    current = record
    for part in path.split("."):
        if isinstance(current, Mapping):
            current = current.get(part, _MISSING)
        elif isinstance(current, list) and part.isdigit() and int(part) < len(current):
            current = current[int(part)]
        else:
            current = _MISSING

        if current is _MISSING:
            return default

    return current


def decode_base64(value: Any) -> str:
    """Decode base64 (or url-safe base64) text leniently, never raising."""
    raw = value if isinstance(value, (bytes, bytearray)) else str(value).encode("utf-8")
    raw = _NON_BASE64.sub(b"", bytes(raw)).replace(b"-", b"+").replace(b"_", b"/")
    # A single dangling character cannot encode a byte
    if len(raw) % 4 == 1:
        raw = raw[:-1]
    raw += b"=" * (-len(raw) % 4)
    return base64.b64decode(raw).decode("utf-8", errors="replace")


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    return json.dumps(value, separators=(",", ":"), default=str).encode("utf-8")


def project(records: Iterable[Any], fields: List[FieldSpec]) -> Iterator[bytes]:
    """
    Yield the projected values of every record, field by field.

    Missing and null values are skipped; `base64` fields are decoded first.
    """
    for record in records:
        for field in fields:
            value = get_value(record, field.key)
            if value is None:
                continue

            if field.decode == BASE64:
                value = decode_base64(value)

            yield _to_bytes(value)
