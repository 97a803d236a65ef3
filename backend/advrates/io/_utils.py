"""Shared IO utilities for walking provider documents and parsing their leaves."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Sequence

import pandas as pd

from advrates.errors import MalformedDateError, MalformedDocumentError


def to_sequence(value: Any) -> list[Any]:
    """Wrap scalars in a list; pass lists/tuples through; None becomes []."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def dig(node: Any, path: Sequence[str]) -> Any:
    """
    Follow ``path`` through nested mappings. A list met on the way stands for
    a repeated element: its first item is taken. Missing keys give None.
    """
    current = node
    for key in path:
        if isinstance(current, (list, tuple)):
            current = current[0] if current else None
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def norm_token(value: Any) -> str | None:
    """Normalise a leaf to a stripped string, or None if blank/NaN."""
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    if isinstance(value, Mapping):
        # XML-to-dict decoders put element text under "#text" / "_value".
        value = value.get("#text", value.get("_value"))
        if value is None:
            return None
    s = str(value).strip()
    return s if s else None


def parse_rate(value: Any) -> Decimal | None:
    """Rate leaf as Decimal; None for blanks, error for non-numeric text."""
    s = norm_token(value)
    if s is None:
        return None
    try:
        return Decimal(s.replace(" ", ""))
    except InvalidOperation as exc:
        raise MalformedDocumentError(f"Rate is not a number: {value!r}") from exc


def parse_date(value: Any, *, field: str = "date") -> date:
    """Parse a date leaf; anything that is not a date is fatal for the document."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    s = norm_token(value)
    if s is None:
        raise MalformedDateError(f"Missing {field}")

    dt = pd.to_datetime(s, errors="coerce")
    if pd.isna(dt):
        raise MalformedDateError(f"Unparseable {field}: {value!r}")
    return dt.date()
