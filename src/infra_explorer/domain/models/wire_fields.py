"""Helpers for decoding loosely typed API records.

The infrastructure API has no fixed schema. Each record field may arrive
under several names and with inconsistent types, so the record models pick
the first usable alias and coerce its value. A value that cannot be coerced
is kept in the record's metadata instead of failing the record.
"""

import math
from typing import Any


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def first_present(data: dict[str, Any], *keys: str) -> tuple[str, Any] | tuple[None, None]:
    """Return the first of ``keys`` holding a non-blank value, with that value."""
    for key in keys:
        value = data.get(key)
        if not is_blank(value):
            return key, value
    return None, None


def coerce_text(value: Any) -> str | None:
    """Text of a string or number; None for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value)
    return None


def coerce_float(value: Any) -> float | None:
    """Finite float of a number or numeric string; None when not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def split_known_fields(
    data: dict[str, Any], known_fields: frozenset[str]
) -> tuple[dict[str, Any], dict[str, Any]]:
    """Separate recognised wire fields from everything else.

    An explicit ``metadata`` object is merged into the returned metadata.
    """
    raw_metadata = data.get("metadata")
    metadata = dict(raw_metadata) if isinstance(raw_metadata, dict) else {}
    if raw_metadata is not None and not isinstance(raw_metadata, dict):
        metadata["metadata"] = raw_metadata

    known: dict[str, Any] = {}
    for key, value in data.items():
        if key == "metadata":
            continue
        if key in known_fields:
            known[key] = value
        else:
            metadata[key] = value
    return known, metadata
