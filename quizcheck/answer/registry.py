"""
Validator registry for type-based dispatch.

Maps a question type tag (``mcq``, ``multiple``, ``integer``, ``string``) to
the validator function for that content variant.
"""

from __future__ import annotations

from typing import Any, Callable

from .content import MathsContent, UnknownQuestionType
from .result import ValidationResult
from .validators import validate_integer, validate_mcq, validate_multiple, validate_string

Validator = Callable[[Any, Any], ValidationResult]


class ValidatorRegistry:
    """
    Registry of validators keyed by question type.
    """

    def __init__(self) -> None:
        self._validators: dict[str, Validator] = {}

    def register(self, question_type: str, validator: Validator) -> None:
        """
        Register the validator for a question type.

        Raises:
            TypeError: If validator is not callable
        """
        if not callable(validator):
            raise TypeError(f"validator must be callable, got {validator!r}")
        self._validators[question_type] = validator

    def get_validator(self, question_type: str) -> Validator | None:
        """Validator for a question type, or None if not registered."""
        return self._validators.get(question_type)

    def validate(self, content: MathsContent, answer: Any) -> ValidationResult:
        """
        Validate an answer with the validator matching ``content.type``.

        Raises:
            UnknownQuestionType: If no validator is registered for the tag
        """
        validator = self.get_validator(content.type)
        if validator is None:
            raise UnknownQuestionType(content.type)
        return validator(content, answer)

    def get_registered_types(self) -> list[str]:
        return list(self._validators.keys())


# Global registry instance
_global_registry = ValidatorRegistry()
_global_registry.register("mcq", validate_mcq)
_global_registry.register("multiple", validate_multiple)
_global_registry.register("integer", validate_integer)
_global_registry.register("string", validate_string)


def register_validator(question_type: str, validator: Validator) -> None:
    """Register a validator in the global registry."""
    _global_registry.register(question_type, validator)


def get_validator(question_type: str) -> Validator | None:
    """Get a validator from the global registry."""
    return _global_registry.get_validator(question_type)


def validate_answer(content: MathsContent, answer: Any) -> ValidationResult:
    """
    Validate an answer against any maths content variant.

    Args:
        content: Content resolved to the variant of the question's type
        answer: Selected index, list of indices, or raw text, depending on type

    Returns:
        ValidationResult
    """
    return _global_registry.validate(content, answer)
