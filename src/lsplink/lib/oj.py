"""orjson helpers shared across the package."""

from __future__ import annotations

from typing import Any

import orjson

JSONDecodeError = orjson.JSONDecodeError
JSONEncodeError = orjson.JSONEncodeError


def loads(data: bytes | str) -> Any:
    """Parse JSON from bytes or str."""
    return orjson.loads(data)


def dumps(obj: Any) -> bytes:
    """Serialize to compact UTF-8 JSON bytes."""
    return orjson.dumps(obj)


def dumps_str(obj: Any) -> str:
    """Serialize to a JSON text string (for text frames)."""
    return orjson.dumps(obj).decode("utf-8")
