"""Firestore REST ``fields`` codec for the scalar values a credential holds.

Credential documents only carry strings, integers, timestamps and nulls
(booleans and doubles are accepted for completeness). Timestamps are
written as UTC with microseconds and read back as aware UTC datetimes.
"""

import re
from datetime import datetime
from typing import Any

from onetime_access.shared.utils.datetime import ensure_utc

# Firestore may return up to nanosecond precision; datetime keeps microseconds.
_FRACTION_RE = re.compile(r"\.(\d{6})\d+")


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 ``timestampValue`` into an aware UTC datetime."""
    trimmed = _FRACTION_RE.sub(r".\1", value.replace("Z", "+00:00"))
    return ensure_utc(datetime.fromisoformat(trimmed))


def _encode_value(v: Any) -> dict:
    if v is None:
        return {"nullValue": None}
    # bool before int: bool is an int subclass
    if isinstance(v, bool):
        return {"booleanValue": v}
    if isinstance(v, int):
        return {"integerValue": str(v)}
    if isinstance(v, float):
        return {"doubleValue": v}
    if isinstance(v, str):
        return {"stringValue": v}
    if isinstance(v, datetime):
        return {"timestampValue": f"{ensure_utc(v):%Y-%m-%dT%H:%M:%S.%f}Z"}
    raise TypeError(f"Unsupported Firestore value type: {type(v).__name__}")


_DECODERS = {
    "nullValue": lambda raw: None,
    "booleanValue": bool,
    "integerValue": int,
    "doubleValue": float,
    "stringValue": str,
    "timestampValue": parse_timestamp,
}


def _decode_value(obj: dict) -> Any:
    for kind, raw in obj.items():
        decoder = _DECODERS.get(kind)
        if decoder is not None:
            return decoder(raw)
    return None


def encode_document(data: dict[str, Any]) -> dict:
    """Python dict -> REST Document body (``{"fields": {...}}``)."""
    return {"fields": {k: _encode_value(v) for k, v in data.items()}}


def decode_document(fields: dict | None) -> dict:
    """REST Document ``fields`` -> Python dict."""
    return {k: _decode_value(v) for k, v in (fields or {}).items()}
