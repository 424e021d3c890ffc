"""Multiple choice generator."""

from __future__ import annotations

import logging

from qtibuilder.enums import BaseType, Cardinality, QuestionType
from qtibuilder.generators.base import BaseItemGenerator
from qtibuilder.generators.envelope import (
    FEEDBACK_INLINE_IDENTIFIER,
    RESPONSE_IDENTIFIER,
    OutcomeDeclaration,
    ResponseDeclaration,
    block_rows,
    build_assessment_item,
    prompt_rows,
)
from qtibuilder.schemas import MultipleChoiceOption, MultipleChoiceQuestion
from qtibuilder.xmltree import attr

logger = logging.getLogger(__name__)


def choice_cardinality(max_choices: int) -> Cardinality:
    return Cardinality.SINGLE if max_choices <= 1 else Cardinality.MULTIPLE


def _choice_rows(option: MultipleChoiceOption) -> list[str]:
    rows = [f"<qti-simple-choice{attr('identifier', option.identifier)}>"]
    rows.extend(f"  {row}" for row in block_rows(option.content_blocks))
    if option.inline_feedback_blocks:
        rows.append(
            f'  <qti-feedback-inline outcome-identifier="{FEEDBACK_INLINE_IDENTIFIER}"'
            f"{attr('identifier', option.identifier)} show-hide=\"show\">"
        )
        rows.extend(f"    {row}" for row in block_rows(option.inline_feedback_blocks))
        rows.append("  </qti-feedback-inline>")
    rows.append("</qti-simple-choice>")
    return rows


def generate_choice_xml(question: MultipleChoiceQuestion) -> str:
    """Build a ``qti-choice-interaction`` item.

    ``max_choices`` of 1 (or less) declares a single identifier response,
    anything above declares a multiple one. The correct response lists the
    options flagged ``is_correct`` in option order.
    """

    correct = [option.identifier for option in question.options if option.is_correct]
    response = ResponseDeclaration(
        cardinality=choice_cardinality(question.max_choices),
        base_type=BaseType.IDENTIFIER,
        correct_values=correct,
    )

    interaction = (
        f'<qti-choice-interaction response-identifier="{RESPONSE_IDENTIFIER}"'
        f"{attr('max-choices', question.max_choices)}"
    )
    if question.shuffle:
        interaction += ' shuffle="true"'
    if question.orientation:
        interaction += attr("orientation", question.orientation.value)

    body = [*prompt_rows(question), f"{interaction}>"]
    for option in question.options:
        body.extend(f"  {row}" for row in _choice_rows(option))
    body.append("</qti-choice-interaction>")

    extra_outcomes = []
    if any(option.inline_feedback_blocks for option in question.options):
        extra_outcomes.append(
            OutcomeDeclaration(FEEDBACK_INLINE_IDENTIFIER, Cardinality.SINGLE, BaseType.IDENTIFIER)
        )

    logger.debug("generating choice item", extra={"identifier": question.identifier})
    return build_assessment_item(
        question=question,
        question_type=QuestionType.CHOICE,
        response=response,
        body_rows=body,
        extra_outcomes=extra_outcomes,
    )


class ChoiceGenerator(BaseItemGenerator):
    question_type = QuestionType.CHOICE
    question_model = MultipleChoiceQuestion

    def generate(self, question: MultipleChoiceQuestion) -> str:
        return generate_choice_xml(question)
