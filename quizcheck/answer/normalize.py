"""
Input normalization helpers shared by the validators.

All helpers are total: they never raise on user input, they return a
sentinel (``None`` or ``False``) instead.
"""

from __future__ import annotations

import math
import re
from typing import Iterable

# Plain ASCII decimal: sign, digits with optional point, optional exponent
NUMBER_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)


def is_blank(text: str | None) -> bool:
    """True for ``None``, empty, or whitespace-only input."""
    return text is None or not text.strip()


def normalize_text(text: str, case_sensitive: bool = False) -> str:
    """Trim and, unless case-sensitive, lower-case a string answer."""
    text = text.strip()
    if not case_sensitive:
        text = text.lower()
    return text


def parse_number(text: str) -> float | None:
    """
    Parse a decimal floating-point answer.

    Accepts a leading sign, a decimal point and exponent notation
    ("-1.5", ".5", "2e3") written with ASCII digits. Anything else is
    rejected: fractions, units, separators, non-ASCII digits, and values
    that are not finite ("nan", "1e999").

    Args:
        text: Raw answer text

    Returns:
        Parsed value, or None if the text is not a finite number
    """
    if not isinstance(text, str):
        return None

    text = text.strip()
    # float() alone would also take "1_000", "nan" and non-ASCII digits
    if NUMBER_PATTERN.fullmatch(text) is None:
        return None

    value = float(text)

    if not math.isfinite(value):
        return None

    return value


def distinct_sorted(indices: Iterable[int]) -> list[int]:
    """Sorted list of the distinct indices."""
    return sorted(set(indices))
