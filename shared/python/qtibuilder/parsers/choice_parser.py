"""Multiple choice parser."""

from __future__ import annotations

import logging

from qtibuilder.enums import QuestionType
from qtibuilder.parsers.common import (
    correct_response_values,
    element_identifier,
    feedback_blocks,
    find_interaction,
    item_metadata,
    load_assessment_item,
    parse_blocks,
    prompt_blocks,
    read_bool,
    read_int,
    read_orientation,
)
from qtibuilder.schemas import MultipleChoiceOption, MultipleChoiceQuestion
from qtibuilder.xmltree import find_first_child, iter_descendants

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Multiple Choice Question"
INLINE_FEEDBACK_TAG = "qti-feedback-inline"


def parse_choice_xml(xml_text: str, *, strict: bool = False) -> MultipleChoiceQuestion | None:
    try:
        return _parse_choice(xml_text, strict=strict)
    except Exception:
        logger.exception("choice XML parsing failed")
        return None


def _parse_choice(xml_text: str, *, strict: bool) -> MultipleChoiceQuestion | None:
    item = load_assessment_item(xml_text, QuestionType.CHOICE)
    if item is None:
        return None
    identifier, title = item_metadata(item, "choice", DEFAULT_TITLE)

    interaction = find_interaction(item, "qti-choice-interaction", QuestionType.CHOICE)
    if interaction is None:
        return None

    correct = set(correct_response_values(item))
    options: list[MultipleChoiceOption] = []
    for index, choice in enumerate(iter_descendants(interaction, "qti-simple-choice")):
        option_id = element_identifier(choice, "choice", index)
        options.append(
            MultipleChoiceOption(
                identifier=option_id,
                content_blocks=parse_blocks(choice, skip_tags=(INLINE_FEEDBACK_TAG,)),
                is_correct=option_id in correct,
                inline_feedback_blocks=parse_blocks(find_first_child(choice, INLINE_FEEDBACK_TAG)),
            )
        )

    unresolved = sorted(correct - {option.identifier for option in options})
    if strict and (unresolved or not correct):
        logger.warning(
            "strict parse rejected choice correct response",
            extra={"identifier": identifier, "unresolved": unresolved},
        )
        return None
    if unresolved:
        logger.warning(
            "ignoring unresolved choice values",
            extra={"identifier": identifier, "unresolved": unresolved},
        )

    return MultipleChoiceQuestion(
        identifier=identifier,
        title=title,
        prompt_blocks=prompt_blocks(item, interaction),
        options=options,
        correct_feedback_blocks=feedback_blocks(item, "CORRECT"),
        incorrect_feedback_blocks=feedback_blocks(item, "INCORRECT"),
        max_choices=read_int(interaction.get("max-choices"), 1),
        shuffle=read_bool(interaction.get("shuffle")),
        orientation=read_orientation(interaction.get("orientation")),
    )
