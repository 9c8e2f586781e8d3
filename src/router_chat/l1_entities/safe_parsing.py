"""Lenient numeric coercion for loosely-typed API payloads."""

from __future__ import annotations

import unicodedata
from typing import Any


def parse_int(value: Any) -> int | None:
    """int → itself, float → truncated, numeric str → parsed; anything else → None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float('inf'), float('-inf')):
            return None
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            parsed = parse_float(value)
            return int(parsed) if parsed is not None else None
    return None


def parse_float(value: Any) -> float | None:
    """float/int → float, numeric str → parsed; anything else → None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def normalize_text(text: str) -> str:
    """Round-trip through UTF-8 and NFC-normalize so every layer sees the same code points.

    Lone surrogates (e.g. from a mis-decoded transport) become U+FFFD.
    """
    raw = text.encode('utf-8', errors='surrogatepass')
    return unicodedata.normalize('NFC', raw.decode('utf-8', errors='replace'))
