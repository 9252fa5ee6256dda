"""
quizcheck.answer - Answer validation for maths questions

Provides pure, deterministic validators for the four maths question types:
- mcq: single selected option index
- multiple: set of selected option indices
- integer: numeric answer within an absolute tolerance
- string: text answer, optionally case-sensitive, with accepted aliases

Missing or malformed input yields an incorrect ValidationResult with a
fixed prompt; validators never raise on user input.
"""

from .content import (
    MATHS_TYPES,
    IntegerContent,
    MathsContent,
    McqContent,
    MultipleContent,
    StringContent,
    UnknownQuestionType,
    parse_content,
)
from .registry import ValidatorRegistry, get_validator, register_validator, validate_answer
from .result import (
    ENTER_PROMPT,
    INVALID_NUMBER,
    SELECT_MANY_PROMPT,
    SELECT_PROMPT,
    ValidationResult,
)
from .validators import validate_integer, validate_mcq, validate_multiple, validate_string

__all__ = [
    "MATHS_TYPES",
    "McqContent",
    "MultipleContent",
    "IntegerContent",
    "StringContent",
    "MathsContent",
    "UnknownQuestionType",
    "parse_content",
    "ValidationResult",
    "SELECT_PROMPT",
    "SELECT_MANY_PROMPT",
    "ENTER_PROMPT",
    "INVALID_NUMBER",
    "ValidatorRegistry",
    "register_validator",
    "get_validator",
    "validate_answer",
    # Validators
    "validate_mcq",
    "validate_multiple",
    "validate_integer",
    "validate_string",
]
