"""Numeric coercion and formatting helpers."""
import math
from typing import Any, Optional


def parse_finite(value: Any) -> Optional[float]:
    """
    Parse a persisted numeric field.

    Returns None when the value is absent, empty, non-numeric or not finite.
    Booleans are not numbers here.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def to_finite_number(value: Any, fallback: float = 0.0) -> float:
    """Coerce to a finite float, substituting fallback when that fails."""
    parsed = parse_finite(value)
    return fallback if parsed is None else parsed


def pick_first_finite(*values: Any) -> float:
    """The first candidate that parses to a finite number, else 0."""
    for value in values:
        parsed = parse_finite(value)
        if parsed is not None:
            return parsed
    return 0.0


def fmt_fixed(value: Any, places: int) -> str:
    return f"{to_finite_number(value):.{places}f}"
