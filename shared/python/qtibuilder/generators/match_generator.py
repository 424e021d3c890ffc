"""Match interaction generator."""

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
from qtibuilder.schemas import ContentBlock, MatchQuestion
from qtibuilder.xmltree import attr

logger = logging.getLogger(__name__)

LEFT_MATCH_MAX = 1
RIGHT_MATCH_MAX = 2


def _match_set_rows(entries: list[tuple[str, list[ContentBlock]]], match_max: int) -> list[str]:
    rows = ["<qti-simple-match-set>"]
    for identifier, blocks in entries:
        rows.append(
            f"  <qti-simple-associable-choice{attr('identifier', identifier)}"
            f'{attr("match-max", match_max)}>'
        )
        rows.extend(f"    {row}" for row in block_rows(blocks))
        rows.append("  </qti-simple-associable-choice>")
    rows.append("</qti-simple-match-set>")
    return rows


def generate_match_xml(question: MatchQuestion) -> str:
    """Build a ``qti-match-interaction`` item.

    The first match set holds the left side, the second the right side, both
    in pair order. Each pair becomes one ``left right`` directed pair value.
    """

    response = ResponseDeclaration(
        cardinality=Cardinality.MULTIPLE,
        base_type=BaseType.DIRECTED_PAIR,
        correct_values=[f"{pair.left_id} {pair.right_id}" for pair in question.pairs],
    )

    interaction = (
        f"<qti-match-interaction{attr('max-associations', question.max_associations)}"
        f' response-identifier="{RESPONSE_IDENTIFIER}"'
    )
    if question.shuffle:
        interaction += ' shuffle="true"'

    left = [(pair.left_id, pair.left_content_blocks) for pair in question.pairs]
    right = [(pair.right_id, pair.right_content_blocks) for pair in question.pairs]

    body = [*prompt_rows(question), f"{interaction}>"]
    body.extend(f"  {row}" for row in _match_set_rows(left, LEFT_MATCH_MAX))
    body.extend(f"  {row}" for row in _match_set_rows(right, RIGHT_MATCH_MAX))
    body.append("</qti-match-interaction>")

    logger.debug("generating match item", extra={"identifier": question.identifier})
    return build_assessment_item(
        question=question,
        question_type=QuestionType.MATCH,
        response=response,
        body_rows=body,
    )


class MatchGenerator(BaseItemGenerator):
    question_type = QuestionType.MATCH
    question_model = MatchQuestion

    def generate(self, question: MatchQuestion) -> str:
        return generate_match_xml(question)
