"""
Numeric answer validator.

Compares a typed number against the stored value with an absolute,
inclusive tolerance. A tolerance of zero means the parsed number must equal
the stored value exactly ("100" and "100.0" both match 100).

The comparison runs in decimal on the typed text and on the shortest
decimal spelling of the stored floats, so 3.15 is exactly 0.01 away from
3.14 instead of 0.010000000000000231.
"""

from __future__ import annotations

from decimal import Decimal

from ..content import IntegerContent
from ..normalize import is_blank, parse_number
from ..result import ENTER_PROMPT, INVALID_NUMBER, ValidationResult


def within_tolerance(answer: str, expected: float, tolerance: float) -> bool:
    """
    True iff |answer - expected| <= tolerance, boundary inclusive.

    Args:
        answer: Answer text already accepted by ``parse_number``
        expected: Stored correct value
        tolerance: Stored non-negative tolerance
    """
    difference = abs(Decimal(answer.strip()) - Decimal(repr(float(expected))))
    return difference <= Decimal(repr(float(tolerance)))


def validate_integer(content: IntegerContent, answer: str | None) -> ValidationResult:
    """
    Validate a numeric answer.

    Args:
        content: Integer content with correct value and tolerance
        answer: Raw text typed by the user

    Returns:
        ValidationResult; correct iff |parsed - correct| <= tolerance
    """
    if is_blank(answer):
        return ValidationResult.missing(ENTER_PROMPT)

    value = parse_number(answer)
    if value is None:
        return ValidationResult.malformed(INVALID_NUMBER)

    return ValidationResult.graded(
        is_correct=within_tolerance(answer, content.correct_answer, content.tolerance),
        explanation=content.explanation,
        user_answer=value,
        correct_answer=content.correct_answer,
    )
