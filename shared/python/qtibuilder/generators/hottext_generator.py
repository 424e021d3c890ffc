"""Hottext interaction generator."""

from __future__ import annotations

import logging

from qtibuilder.enums import BaseType, Cardinality, HottextContentType, QuestionType
from qtibuilder.generators.base import BaseItemGenerator
from qtibuilder.generators.envelope import (
    RESPONSE_IDENTIFIER,
    ResponseDeclaration,
    block_rows,
    build_assessment_item,
    prompt_rows,
)
from qtibuilder.rendering.blocks import markup_content, style_attr
from qtibuilder.schemas import HottextItem, HottextQuestion
from qtibuilder.xmltree import attr, escape_text

logger = logging.getLogger(__name__)

HOTTEXT_CONTAINER_STYLE = "display: flex; gap: 20px; flex-wrap: wrap;"


def _hottext_content(item: HottextItem) -> str:
    value = item.content.value
    if item.content.type == HottextContentType.IMAGE:
        return f"<img{attr('src', value)}{attr('alt', item.identifier)}{style_attr(item.styles)}/>"
    if item.content.type == HottextContentType.HTML:
        inner = markup_content(value, source=item.identifier)
    else:
        inner = escape_text(value)
    return f"<span{style_attr(item.styles)}>{inner}</span>"


def generate_hottext_xml(question: HottextQuestion) -> str:
    """Build a ``qti-hottext-interaction`` item.

    Everything sits in one container carrying the global styles. Inside the
    interaction the prompt goes into ``qti-prompt``, followed by the body
    content blocks and the row of hottext items. Scoring only drives the
    ``FEEDBACK`` outcome.
    """

    response = ResponseDeclaration(
        cardinality=Cardinality.MULTIPLE,
        base_type=BaseType.IDENTIFIER,
        correct_values=list(question.correct_answers),
    )

    interaction = [
        f'<qti-hottext-interaction response-identifier="{RESPONSE_IDENTIFIER}"'
        f"{attr('max-choices', question.max_choices)}>",
    ]
    prompt = prompt_rows(question)
    if prompt:
        interaction.append("  <qti-prompt>")
        interaction.extend(f"    {row}" for row in prompt)
        interaction.append("  </qti-prompt>")
    interaction.extend(f"  {row}" for row in block_rows(question.content_blocks))
    interaction.append(f'  <div style="{HOTTEXT_CONTAINER_STYLE}">')
    interaction.extend(
        f"    <qti-hottext{attr('identifier', item.identifier)}>{_hottext_content(item)}</qti-hottext>"
        for item in question.hottext_items
    )
    interaction.extend(["  </div>", "</qti-hottext-interaction>"])

    body = [f"<div{style_attr(question.global_styles)}>"]
    if question.custom_css.strip():
        body.append(f"  <style>{escape_text(question.custom_css)}</style>")
    body.extend(f"  {row}" for row in interaction)
    body.append("</div>")

    logger.debug("generating hottext item", extra={"identifier": question.identifier})
    return build_assessment_item(
        question=question,
        question_type=QuestionType.HOTTEXT,
        response=response,
        body_rows=body,
        feedback_wrapper_styles=question.global_styles,
    )


class HottextGenerator(BaseItemGenerator):
    question_type = QuestionType.HOTTEXT
    question_model = HottextQuestion

    def generate(self, question: HottextQuestion) -> str:
        return generate_hottext_xml(question)
