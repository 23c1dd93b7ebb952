"""
Canonical Example Encoder

Serializes example values exactly the way the live API serializes its
responses, so every generator displays the same JSON.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter

# Serialization options shared with the API responses
SERIALIZATION_OPTIONS: dict[str, Any] = {
    "by_alias": True,
    "exclude_none": True,
}


@lru_cache(maxsize=256)
def _type_adapter(declared_type: Any) -> TypeAdapter:
    return TypeAdapter(declared_type)


def encode(value: Any, declared_type: Any = None) -> Any:
    """
    Encode a value into a canonical JSON node.

    The value is dumped through a pydantic ``TypeAdapter`` for its declared
    type using the API's serialization options, then parsed back into plain
    ``dict``/``list``/scalar values with property order preserved.

    Args:
        value: Value to encode
        declared_type: Type the value is declared as (defaults to its runtime type)

    Returns:
        JSON-compatible value, or None for a None value
    """
    if value is None:
        return None

    if declared_type is None:
        declared_type = type(value)

    try:
        adapter = _type_adapter(declared_type)
    except TypeError:
        # Unhashable type annotations cannot be cached
        adapter = TypeAdapter(declared_type)

    return json.loads(adapter.dump_json(value, **SERIALIZATION_OPTIONS))


def encode_json(value: Any, declared_type: Any = None) -> bytes:
    """Encode a value into canonical JSON bytes."""
    return json.dumps(
        encode(value, declared_type),
        ensure_ascii=False,
        separators=(",", ":"),
    ).encode("utf-8")
