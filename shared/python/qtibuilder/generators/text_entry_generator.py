"""Text entry generator."""

from __future__ import annotations

import logging

from qtibuilder.enums import BaseType, Cardinality, QuestionType
from qtibuilder.generators.base import BaseItemGenerator
from qtibuilder.generators.envelope import (
    RESPONSE_IDENTIFIER,
    ResponseDeclaration,
    build_assessment_item,
    prompt_rows,
)
from qtibuilder.schemas import TextEntryQuestion
from qtibuilder.xmltree import attr

logger = logging.getLogger(__name__)

MAX_INPUT_WIDTH_CLASS = 25


def _mapping_rows(question: TextEntryQuestion) -> list[str]:
    case_sensitive = "true" if question.case_sensitive else "false"
    rows = ['<qti-mapping default-value="0">']
    rows.extend(
        f"  <qti-map-entry{attr('map-key', answer)} mapped-value=\"1\""
        f' case-sensitive="{case_sensitive}"/>'
        for answer in question.correct_answers
    )
    rows.append("</qti-mapping>")
    return rows


def generate_text_entry_xml(question: TextEntryQuestion) -> str:
    response = ResponseDeclaration(
        cardinality=Cardinality.SINGLE,
        base_type=BaseType.STRING,
        correct_values=list(question.correct_answers),
        extra_rows=_mapping_rows(question) if question.correct_answers else [],
    )

    interaction = f'<qti-text-entry-interaction response-identifier="{RESPONSE_IDENTIFIER}"'
    if question.expected_length:
        width = min(question.expected_length, MAX_INPUT_WIDTH_CLASS)
        interaction += attr("expected-length", question.expected_length)
        interaction += attr("class", f"qti-input-width-{width}")
    if question.pattern_mask:
        interaction += attr("pattern-mask", question.pattern_mask)

    body = [
        *prompt_rows(question),
        '<div id="reference_text">',
        f"  {interaction}/>",
        "</div>",
    ]

    logger.debug("generating text entry item", extra={"identifier": question.identifier})
    return build_assessment_item(
        question=question,
        question_type=QuestionType.TEXT_ENTRY,
        response=response,
        body_rows=body,
    )


class TextEntryGenerator(BaseItemGenerator):
    question_type = QuestionType.TEXT_ENTRY
    question_model = TextEntryQuestion

    def generate(self, question: TextEntryQuestion) -> str:
        return generate_text_entry_xml(question)
