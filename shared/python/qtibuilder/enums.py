"""Domain enumerations."""

from enum import StrEnum


class QuestionType(StrEnum):
    HOTTEXT = "hottext"
    CHOICE = "choice"
    ORDER = "order"
    MATCH = "match"
    TEXT_ENTRY = "text-entry"


class BlockType(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    HTML = "html"


class HottextContentType(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    HTML = "html"


class Orientation(StrEnum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


class Cardinality(StrEnum):
    SINGLE = "single"
    MULTIPLE = "multiple"
    ORDERED = "ordered"


class BaseType(StrEnum):
    IDENTIFIER = "identifier"
    DIRECTED_PAIR = "directedPair"
    STRING = "string"
    FLOAT = "float"


class ResponseProcessingMode(StrEnum):
    """How an item scores itself: an inline condition tree or a standard template."""

    INLINE = "inline"
    TEMPLATE = "template"


class FeedbackIdentifier(StrEnum):
    CORRECT = "CORRECT"
    INCORRECT = "INCORRECT"
