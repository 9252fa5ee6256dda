"""
String answer validator.

Matches a trimmed answer against the canonical answer and a list of
acceptable aliases, case-insensitively unless the question says otherwise.

The stored answer and aliases are trimmed as well as the typed answer, so an
authored "Paris " still accepts "Paris". Case-sensitive questions differ
from this only in skipping the lower-casing.
"""

from __future__ import annotations

from ..content import StringContent
from ..normalize import is_blank, normalize_text
from ..result import ENTER_PROMPT, ValidationResult


def validate_string(content: StringContent, answer: str | None) -> ValidationResult:
    """
    Validate a free-text answer.

    Args:
        content: String content with canonical answer, aliases and case flag
        answer: Raw text typed by the user

    Returns:
        ValidationResult; correct iff the normalized answer equals the
        normalized canonical answer or any normalized alias
    """
    if is_blank(answer):
        return ValidationResult.missing(ENTER_PROMPT)

    trimmed = answer.strip()
    case_sensitive = content.case_sensitive

    candidate = normalize_text(trimmed, case_sensitive)
    accepted = {normalize_text(content.correct_answer, case_sensitive)}
    accepted.update(
        normalize_text(alias, case_sensitive) for alias in content.acceptable_answers
    )

    return ValidationResult.graded(
        is_correct=candidate in accepted,
        explanation=content.explanation,
        user_answer=trimmed,
        correct_answer=content.correct_answer,
    )
