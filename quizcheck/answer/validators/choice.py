"""
Choice validators: single-answer (MCQ) and multi-select.

Option indices are plain ints. ``True`` and ``False`` are not indices even
though they compare equal to 1 and 0, so they count as no selection.
"""

from __future__ import annotations

from typing import Any, Iterable

from ..content import McqContent, MultipleContent
from ..normalize import distinct_sorted
from ..result import SELECT_MANY_PROMPT, SELECT_PROMPT, ValidationResult


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_mcq(content: McqContent, selected: int | None) -> ValidationResult:
    """
    Validate a single selected option index.

    Args:
        content: MCQ content with the correct option index
        selected: Selected option index, or None when nothing is selected

    Returns:
        ValidationResult; correct iff the indices are equal
    """
    if not _is_index(selected):
        return ValidationResult.missing(SELECT_PROMPT)

    return ValidationResult.graded(
        is_correct=selected == content.correct_answer,
        explanation=content.explanation,
        user_answer=selected,
        correct_answer=content.correct_answer,
    )


def validate_multiple(
    content: MultipleContent, selected: Iterable[int] | None
) -> ValidationResult:
    """
    Validate a set of selected option indices.

    Order and duplicates in the selection do not matter. Sets of different
    size are never equal, whatever they have in common.

    Args:
        content: Multi-select content with the correct indices
        selected: Selected indices (possibly empty)

    Returns:
        ValidationResult with both answers reported as sorted index lists
    """
    selected = list(selected or ())
    if not selected or not all(_is_index(index) for index in selected):
        return ValidationResult.missing(SELECT_MANY_PROMPT)

    chosen = distinct_sorted(selected)
    expected = distinct_sorted(content.correct_answers)

    return ValidationResult.graded(
        is_correct=chosen == expected,
        explanation=content.explanation,
        user_answer=chosen,
        correct_answer=expected,
    )
