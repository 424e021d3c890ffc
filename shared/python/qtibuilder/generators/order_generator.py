"""Order interaction generator."""

from __future__ import annotations

import logging

from qtibuilder.enums import BaseType, Cardinality, QuestionType
from qtibuilder.generators.base import BaseItemGenerator
from qtibuilder.generators.envelope import (
    RESPONSE_IDENTIFIER,
    ResponseDeclaration,
    block_rows,
    build_assessment_item,
    prompt_rows,
)
from qtibuilder.schemas import OrderQuestion
from qtibuilder.xmltree import attr

logger = logging.getLogger(__name__)


def generate_order_xml(question: OrderQuestion) -> str:
    """Build a ``qti-order-interaction`` item.

    Choices keep the authored order; the correct response lists them by
    ascending ``correct_order``.
    """

    ranked = sorted(question.options, key=lambda option: option.correct_order)
    response = ResponseDeclaration(
        cardinality=Cardinality.ORDERED,
        base_type=BaseType.IDENTIFIER,
        correct_values=[option.identifier for option in ranked],
    )

    interaction = f'<qti-order-interaction response-identifier="{RESPONSE_IDENTIFIER}"'
    if question.shuffle:
        interaction += ' shuffle="true"'
    if question.orientation:
        interaction += attr("orientation", question.orientation.value)

    body = [*prompt_rows(question), f"{interaction}>"]
    for option in question.options:
        body.append(f"  <qti-simple-choice{attr('identifier', option.identifier)}>")
        body.extend(f"    {row}" for row in block_rows(option.content_blocks))
        body.append("  </qti-simple-choice>")
    body.append("</qti-order-interaction>")

    logger.debug("generating order item", extra={"identifier": question.identifier})
    return build_assessment_item(
        question=question,
        question_type=QuestionType.ORDER,
        response=response,
        body_rows=body,
    )


class OrderGenerator(BaseItemGenerator):
    question_type = QuestionType.ORDER
    question_model = OrderQuestion

    def generate(self, question: OrderQuestion) -> str:
        return generate_order_xml(question)
