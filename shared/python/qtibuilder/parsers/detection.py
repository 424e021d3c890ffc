"""Question type detection from an interaction tag."""

from __future__ import annotations

import logging

from qtibuilder.enums import QuestionType
from qtibuilder.xmltree import ParseError, local_tag, parse_xml

logger = logging.getLogger(__name__)

# QTI 3.0 dashed names and their QTI 2.x camelCase spellings, in lookup order.
INTERACTION_TAGS: tuple[tuple[QuestionType, tuple[str, ...]], ...] = (
    (QuestionType.CHOICE, ("qti-choice-interaction", "choiceInteraction")),
    (QuestionType.ORDER, ("qti-order-interaction", "orderInteraction")),
    (QuestionType.MATCH, ("qti-match-interaction", "matchInteraction")),
    (QuestionType.TEXT_ENTRY, ("qti-text-entry-interaction", "textEntryInteraction")),
    (QuestionType.HOTTEXT, ("qti-hottext-interaction", "hottextInteraction")),
)


def detect_question_type(xml_text: str) -> QuestionType | None:
    """Return the question type of the first known interaction in ``xml_text``."""

    try:
        root = parse_xml(xml_text)
    except ParseError as exc:
        logger.warning("cannot detect type of malformed XML", extra={"error": str(exc)})
        return None

    tags = {local_tag(node.tag) for node in root.iter() if isinstance(node.tag, str)}
    for question_type, names in INTERACTION_TAGS:
        if tags.intersection(names):
            return question_type
    logger.info("no known interaction found")
    return None
