"""
Question content variants for maths questions.

Each question type (``mcq``, ``multiple``, ``integer``, ``string``) has its
own content shape. The shapes form a tagged union keyed by ``type`` so a
validator can be picked from the tag instead of inspecting fields.

Content documents written by the web front end use camelCase keys
(``questionText``, ``correctAnswer``, ``acceptableAnswers``); both spellings
are accepted.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, TypeAdapter
from pydantic.alias_generators import to_camel


MATHS_TYPES = ("mcq", "multiple", "integer", "string")


class UnknownQuestionType(ValueError):
    """Raised when a type tag has no content variant."""

    def __init__(self, question_type: str):
        self.question_type = question_type
        super().__init__(f"No content variant for question type: {question_type}")


class _Content(BaseModel):
    """Fields shared by every maths content variant."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    question_text: str = ""
    explanation: str = ""


class McqContent(_Content):
    """Single-answer multiple choice."""

    type: Literal["mcq"] = "mcq"
    options: list[str] = Field(default_factory=list)
    correct_answer: NonNegativeInt


class MultipleContent(_Content):
    """Multi-answer selection; correct iff the selected set equals the correct set."""

    type: Literal["multiple"] = "multiple"
    options: list[str] = Field(default_factory=list)
    correct_answers: list[NonNegativeInt] = Field(min_length=1)


class IntegerContent(_Content):
    """Numeric answer accepted within an absolute tolerance."""

    type: Literal["integer"] = "integer"
    correct_answer: float
    tolerance: float = Field(default=0.0, ge=0.0)


class StringContent(_Content):
    """Free-text answer with optional aliases."""

    type: Literal["string"] = "string"
    correct_answer: str
    case_sensitive: bool = False
    acceptable_answers: list[str] = Field(default_factory=list)


MathsContent = Annotated[
    Union[McqContent, MultipleContent, IntegerContent, StringContent],
    Field(discriminator="type"),
]

_content_adapter: TypeAdapter[MathsContent] = TypeAdapter(MathsContent)


def parse_content(question_type: str, raw: Mapping[str, Any]) -> MathsContent:
    """
    Build the content variant for a question type.

    Args:
        question_type: Type tag stored on the question
        raw: Content document as stored (camelCase or snake_case keys)

    Returns:
        The matching content model

    Raises:
        UnknownQuestionType: If the tag is not a maths question type
        pydantic.ValidationError: If the document does not fit the variant
    """
    if question_type not in MATHS_TYPES:
        raise UnknownQuestionType(question_type)

    return _content_adapter.validate_python({**raw, "type": question_type})
