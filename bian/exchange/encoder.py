"""
Canonical query string encoding.

The string produced here is both what goes on the wire and what gets
signed, so it must be a pure function of the parameter values: fields are
emitted in declaration order, ``None`` fields are left out entirely and
nested structures are flattened in place.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Iterator, Mapping, Optional, Tuple
from urllib.parse import quote

import msgspec


def canonical_query(params: Optional[Any]) -> str:
    """
    Encode a parameter value as ``key=value`` pairs joined with ``&``.

    Args:
        params: A ``msgspec.Struct`` (keys are the fields' wire names), a
            mapping (keys used as-is, insertion order), or None

    Returns:
        Query string without a leading ``?`` (empty if nothing to send)

    Raises:
        TypeError: If a value has no query representation
    """
    return "&".join(f"{key}={value}" for key, value in iter_pairs(params))


def iter_pairs(params: Optional[Any]) -> Iterator[Tuple[str, str]]:
    """Yield encoded ``(key, value)`` pairs in canonical order."""
    if params is None:
        return

    if isinstance(params, msgspec.Struct):
        items = (
            (info.encode_name, getattr(params, info.name))
            for info in msgspec.structs.fields(params)
        )
    elif isinstance(params, Mapping):
        items = params.items()
    else:
        raise TypeError(f"Cannot encode parameters of type {type(params).__name__}")

    for key, value in items:
        if value is None:
            continue
        if isinstance(value, msgspec.Struct):
            # flattened: nested fields land at the current position
            yield from iter_pairs(value)
            continue
        yield key, encode_value(value)


def encode_value(value: Any) -> str:
    """Render a single scalar (or JSON-able container) for the query."""
    # bool first: bool is a subclass of int
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return encode_value(value.value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Decimal):
        return format(value, "f")
    if isinstance(value, float):
        return format(Decimal(repr(value)), "f")
    if isinstance(value, str):
        return quote(value, safe="")
    if isinstance(value, (list, tuple, dict)):
        # batch endpoints take a JSON document as a single parameter
        return quote(msgspec.json.encode(value).decode(), safe="")

    raise TypeError(f"Cannot encode value of type {type(value).__name__}")
