"""
Validation result data structure.

A ValidationResult is produced by every validator, whether the answer was
right, wrong, or could not be graded at all. Missing and malformed input are
ordinary incorrect results carrying a fixed prompt instead of the question's
stored explanation, never exceptions.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Prompts substituted for the stored explanation when input is unusable
SELECT_PROMPT = "Please select an answer"
SELECT_MANY_PROMPT = "Please select at least one answer"
ENTER_PROMPT = "Please enter an answer"
INVALID_NUMBER = "Please enter a valid number"


class ValidationResult(BaseModel):
    """
    Outcome of validating one candidate answer.

    Attributes:
        is_correct: Whether the answer is accepted
        explanation: Text shown to the user regardless of outcome
        user_answer: The answer as interpreted by the validator (parsed
            number, trimmed string, sorted index list)
        correct_answer: The canonical correct answer for display
        error_flag: True when the input was missing or malformed and the
            answer was not actually graded
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    is_correct: bool = False
    explanation: str = ""
    user_answer: Any = None
    correct_answer: Any = None
    error_flag: bool = False

    @classmethod
    def graded(
        cls,
        is_correct: bool,
        explanation: str,
        user_answer: Any,
        correct_answer: Any,
    ) -> ValidationResult:
        """Result for an answer that was actually compared."""
        return cls(
            is_correct=is_correct,
            explanation=explanation,
            user_answer=user_answer,
            correct_answer=correct_answer,
        )

    @classmethod
    def missing(cls, prompt: str) -> ValidationResult:
        """Result for an empty answer or empty selection."""
        return cls(is_correct=False, explanation=prompt, error_flag=True)

    @classmethod
    def malformed(cls, message: str = INVALID_NUMBER) -> ValidationResult:
        """Result for input that could not be interpreted."""
        return cls(is_correct=False, explanation=message, error_flag=True)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-ready dictionary.

        Keys use the camelCase spelling stored alongside submission records
        (``isCorrect``, ``userAnswer``, ...).
        """
        return self.model_dump(by_alias=True)
