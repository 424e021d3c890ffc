"""Text entry parser."""

from __future__ import annotations

import logging

from qtibuilder.enums import QuestionType
from qtibuilder.parsers.common import (
    correct_response_values,
    feedback_blocks,
    find_interaction,
    item_metadata,
    load_assessment_item,
    prompt_blocks,
    read_bool,
    read_int,
)
from qtibuilder.schemas import TextEntryQuestion
from qtibuilder.xmltree import Element, iter_descendants

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Text Entry Question"


def _map_entries(item: Element) -> list[Element]:
    return list(iter_descendants(item, "qti-map-entry"))


def parse_text_entry_xml(xml_text: str, *, strict: bool = False) -> TextEntryQuestion | None:
    """Rebuild a :class:`TextEntryQuestion` from a QTI 3.0 document.

    Case sensitivity is read from the ``qti-map-entry`` elements. Without a
    mapping the item is scored by plain string match, which is case-sensitive.
    """

    try:
        return _parse_text_entry(xml_text, strict=strict)
    except Exception:
        logger.exception("text entry XML parsing failed")
        return None


def _parse_text_entry(xml_text: str, *, strict: bool) -> TextEntryQuestion | None:
    item = load_assessment_item(xml_text, QuestionType.TEXT_ENTRY)
    if item is None:
        return None
    identifier, title = item_metadata(item, "text-entry", DEFAULT_TITLE)

    interaction = find_interaction(item, "qti-text-entry-interaction", QuestionType.TEXT_ENTRY)
    if interaction is None:
        return None

    entries = _map_entries(item)
    answers = correct_response_values(item)
    if not answers:
        if strict:
            logger.warning("strict parse rejected empty text entry response", extra={"identifier": identifier})
            return None
        answers = [key for key in (entry.get("map-key") for entry in entries) if key]

    case_sensitive = read_bool(entries[0].get("case-sensitive"), default=True) if entries else True

    return TextEntryQuestion(
        identifier=identifier,
        title=title,
        prompt_blocks=prompt_blocks(item, interaction),
        correct_answers=answers,
        case_sensitive=case_sensitive,
        correct_feedback_blocks=feedback_blocks(item, "CORRECT"),
        incorrect_feedback_blocks=feedback_blocks(item, "INCORRECT"),
        expected_length=read_int(interaction.get("expected-length"), None),
        pattern_mask=interaction.get("pattern-mask") or None,
    )
