"""Pydantic schemas for question models and API contracts.

Field names are snake_case in Python and camelCase on the wire, matching the
editor UI payloads (``promptBlocks``, ``isCorrect``, ``maxChoices`` ...).
"""

from __future__ import annotations

from typing import Any, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from qtibuilder.enums import BlockType, HottextContentType, Orientation, QuestionType


def new_block_id() -> str:
    return f"block_{uuid4().hex[:12]}"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ContentBlock(CamelModel):
    id: str = Field(default_factory=new_block_id)
    type: BlockType = BlockType.TEXT
    content: str = ""
    styles: dict[str, str] = Field(default_factory=dict)
    attributes: dict[str, Any] = Field(default_factory=dict)


class QuestionBase(CamelModel):
    identifier: str
    title: str = ""
    prompt_blocks: list[ContentBlock] = Field(default_factory=list)
    correct_feedback_blocks: list[ContentBlock] = Field(default_factory=list)
    incorrect_feedback_blocks: list[ContentBlock] = Field(default_factory=list)


class HottextContent(CamelModel):
    type: HottextContentType = HottextContentType.TEXT
    value: str = ""


class HottextPosition(CamelModel):
    """Canvas position kept for the editor; not serialized."""

    x: float = 0
    y: float = 0


class HottextItem(CamelModel):
    identifier: str
    content: HottextContent = Field(default_factory=HottextContent)
    styles: dict[str, str] = Field(default_factory=dict)
    position: HottextPosition = Field(default_factory=HottextPosition)


class HottextQuestion(QuestionBase):
    content_blocks: list[ContentBlock] = Field(default_factory=list)
    hottext_items: list[HottextItem] = Field(default_factory=list)
    correct_answers: list[str] = Field(default_factory=list)
    max_choices: int = 1
    global_styles: dict[str, str] = Field(default_factory=dict)
    custom_css: str = Field(default="", alias="customCSS")


class MultipleChoiceOption(CamelModel):
    identifier: str
    content_blocks: list[ContentBlock] = Field(default_factory=list)
    is_correct: bool = False
    inline_feedback_blocks: list[ContentBlock] = Field(default_factory=list)


class MultipleChoiceQuestion(QuestionBase):
    options: list[MultipleChoiceOption] = Field(default_factory=list)
    max_choices: int = 1
    shuffle: bool = False
    orientation: Orientation | None = Orientation.VERTICAL


class OrderOption(CamelModel):
    identifier: str
    content_blocks: list[ContentBlock] = Field(default_factory=list)
    correct_order: int


class OrderQuestion(QuestionBase):
    options: list[OrderOption] = Field(default_factory=list)
    shuffle: bool = False
    orientation: Orientation | None = Orientation.VERTICAL


class MatchPair(CamelModel):
    left_id: str
    left_content_blocks: list[ContentBlock] = Field(default_factory=list)
    right_id: str
    right_content_blocks: list[ContentBlock] = Field(default_factory=list)


class MatchQuestion(QuestionBase):
    pairs: list[MatchPair] = Field(default_factory=list)
    max_associations: int = 3
    shuffle: bool = False


class TextEntryQuestion(QuestionBase):
    correct_answers: list[str] = Field(default_factory=list)
    case_sensitive: bool = False
    expected_length: int | None = None
    pattern_mask: str | None = None


Question = Union[
    HottextQuestion,
    MultipleChoiceQuestion,
    OrderQuestion,
    MatchQuestion,
    TextEntryQuestion,
]


class XMLGenerationRequest(BaseModel):
    type: str
    data: dict[str, Any]


class ParseXMLRequest(BaseModel):
    xml: str = Field(min_length=1)
    type: QuestionType | None = None
    strict: bool | None = None


class ParseXMLResponse(BaseModel):
    type: QuestionType
    data: dict[str, Any]


class DetectTypeRequest(BaseModel):
    xml: str = Field(min_length=1)


class DetectTypeResponse(BaseModel):
    type: QuestionType


class ValidationIssue(BaseModel):
    code: str
    message: str
    path: str | None = None


class ValidationResult(BaseModel):
    valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
