"""Shared assessment-item envelope for every interaction type.

A generator only supplies what differs per interaction: the response
declaration, the item body rows and any extra outcome. Namespaces, outcome
declarations, feedback blocks and response processing come from here.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from qtibuilder.config import get_settings
from qtibuilder.enums import (
    BaseType,
    Cardinality,
    FeedbackIdentifier,
    QuestionType,
    ResponseProcessingMode,
)
from qtibuilder.rendering.blocks import render_block, style_attr
from qtibuilder.schemas import ContentBlock, QuestionBase
from qtibuilder.xmltree import XML_DECLARATION, XSI_NAMESPACE, attr, escape_attr, escape_text

RESPONSE_IDENTIFIER = "RESPONSE"
SCORE_IDENTIFIER = "SCORE"
FEEDBACK_IDENTIFIER = "FEEDBACK"
FEEDBACK_INLINE_IDENTIFIER = "FEEDBACK-INLINE"


@dataclass(frozen=True, slots=True)
class ItemPolicy:
    response_processing: ResponseProcessingMode
    scored: bool


ITEM_POLICIES: dict[QuestionType, ItemPolicy] = {
    QuestionType.HOTTEXT: ItemPolicy(ResponseProcessingMode.INLINE, scored=False),
    QuestionType.CHOICE: ItemPolicy(ResponseProcessingMode.INLINE, scored=True),
    QuestionType.ORDER: ItemPolicy(ResponseProcessingMode.TEMPLATE, scored=True),
    QuestionType.MATCH: ItemPolicy(ResponseProcessingMode.TEMPLATE, scored=True),
    QuestionType.TEXT_ENTRY: ItemPolicy(ResponseProcessingMode.TEMPLATE, scored=True),
}


@dataclass(slots=True)
class ResponseDeclaration:
    cardinality: Cardinality
    base_type: BaseType
    correct_values: list[str]
    extra_rows: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class OutcomeDeclaration:
    identifier: str
    cardinality: Cardinality
    base_type: BaseType
    default_value: str | None = None


def _indent(rows: Iterable[str], spaces: int) -> list[str]:
    padding = " " * spaces
    return [f"{padding}{row}" if row else row for row in rows]


def block_rows(blocks: Iterable[ContentBlock]) -> list[str]:
    """One rendered fragment per block; multi-line markup stays on its row."""

    return [render_block(block) for block in blocks]


def _root_open(question: QuestionBase) -> list[str]:
    settings = get_settings()
    return [
        "<qti-assessment-item",
        f'  xmlns="{settings.qti_namespace}"',
        f'  xmlns:xsi="{XSI_NAMESPACE}"',
        f'  xsi:schemaLocation="{settings.qti_namespace} {settings.qti_schema_location}"',
        f'  identifier="{escape_attr(question.identifier)}"',
        f'  title="{escape_attr(question.title)}"',
        '  adaptive="false"',
        '  time-dependent="false"',
        f'  xml:lang="{escape_attr(settings.xml_lang)}">',
    ]


def _response_declaration_rows(declaration: ResponseDeclaration) -> list[str]:
    rows = [
        f'<qti-response-declaration identifier="{RESPONSE_IDENTIFIER}" '
        f'cardinality="{declaration.cardinality}" base-type="{declaration.base_type}">'
    ]
    if declaration.correct_values:
        rows.append("  <qti-correct-response>")
        rows.extend(
            f"    <qti-value>{escape_text(value)}</qti-value>"
            for value in declaration.correct_values
        )
        rows.append("  </qti-correct-response>")
    rows.extend(_indent(declaration.extra_rows, 2))
    rows.append("</qti-response-declaration>")
    return rows


def _outcome_rows(outcome: OutcomeDeclaration) -> list[str]:
    opening = (
        f'<qti-outcome-declaration identifier="{outcome.identifier}" '
        f'cardinality="{outcome.cardinality}" base-type="{outcome.base_type}"'
    )
    if outcome.default_value is None:
        return [f"{opening}/>"]
    return [
        f"{opening}>",
        "  <qti-default-value>",
        f"    <qti-value>{escape_text(outcome.default_value)}</qti-value>",
        "  </qti-default-value>",
        "</qti-outcome-declaration>",
    ]


def feedback_block_rows(
    identifier: FeedbackIdentifier,
    blocks: Sequence[ContentBlock],
    wrapper_styles: dict[str, str] | None = None,
) -> list[str]:
    rows = [
        f'<qti-feedback-block outcome-identifier="{FEEDBACK_IDENTIFIER}" '
        f'identifier="{identifier}" show-hide="show">',
        "  <qti-content-body>",
    ]
    content = block_rows(blocks)
    if wrapper_styles is not None:
        rows.append(f"    <div{style_attr(wrapper_styles)}>")
        rows.extend(_indent(content, 6))
        rows.append("    </div>")
    else:
        rows.extend(_indent(content, 4))
    rows.extend(["  </qti-content-body>", "</qti-feedback-block>"])
    return rows


def _set_outcome_rows(identifier: str, base_type: BaseType, value: str) -> list[str]:
    return [
        f'<qti-set-outcome-value identifier="{identifier}">',
        f'  <qti-base-value base-type="{base_type}">{value}</qti-base-value>',
        "</qti-set-outcome-value>",
    ]


def _response_processing_rows(policy: ItemPolicy) -> list[str]:
    if policy.response_processing == ResponseProcessingMode.TEMPLATE:
        template = get_settings().response_template_url
        return [f"<qti-response-processing{attr('template', template)}/>"]

    branches: dict[str, list[str]] = {}
    for branch, score, feedback in (
        ("qti-response-if", "1", FeedbackIdentifier.CORRECT),
        ("qti-response-else", "0", FeedbackIdentifier.INCORRECT),
    ):
        outcome_rows: list[str] = []
        if policy.scored:
            outcome_rows.extend(_set_outcome_rows(SCORE_IDENTIFIER, BaseType.FLOAT, score))
        outcome_rows.extend(
            _set_outcome_rows(FEEDBACK_IDENTIFIER, BaseType.IDENTIFIER, feedback.value)
        )
        branches[branch] = outcome_rows

    return [
        "<qti-response-processing>",
        "  <qti-response-condition>",
        "    <qti-response-if>",
        "      <qti-match>",
        f'        <qti-variable identifier="{RESPONSE_IDENTIFIER}"/>',
        f'        <qti-correct identifier="{RESPONSE_IDENTIFIER}"/>',
        "      </qti-match>",
        *_indent(branches["qti-response-if"], 6),
        "    </qti-response-if>",
        "    <qti-response-else>",
        *_indent(branches["qti-response-else"], 6),
        "    </qti-response-else>",
        "  </qti-response-condition>",
        "</qti-response-processing>",
    ]


def build_assessment_item(
    *,
    question: QuestionBase,
    question_type: QuestionType,
    response: ResponseDeclaration,
    body_rows: Sequence[str],
    extra_outcomes: Sequence[OutcomeDeclaration] = (),
    feedback_wrapper_styles: dict[str, str] | None = None,
) -> str:
    """Assemble one complete ``qti-assessment-item`` document."""

    policy = ITEM_POLICIES[question_type]

    outcomes: list[OutcomeDeclaration] = []
    if policy.scored:
        outcomes.append(
            OutcomeDeclaration(SCORE_IDENTIFIER, Cardinality.SINGLE, BaseType.FLOAT, "0")
        )
    outcomes.append(
        OutcomeDeclaration(FEEDBACK_IDENTIFIER, Cardinality.SINGLE, BaseType.IDENTIFIER)
    )
    outcomes.extend(extra_outcomes)

    rows = [XML_DECLARATION, *_root_open(question), ""]
    rows.extend(_indent(_response_declaration_rows(response), 2))
    for outcome in outcomes:
        rows.append("")
        rows.extend(_indent(_outcome_rows(outcome), 2))

    rows.extend(["", "  <qti-item-body>"])
    rows.extend(_indent(body_rows, 4))
    for identifier, blocks in (
        (FeedbackIdentifier.CORRECT, question.correct_feedback_blocks),
        (FeedbackIdentifier.INCORRECT, question.incorrect_feedback_blocks),
    ):
        rows.extend(_indent(feedback_block_rows(identifier, blocks, feedback_wrapper_styles), 4))
    rows.append("  </qti-item-body>")

    rows.append("")
    rows.extend(_indent(_response_processing_rows(policy), 2))
    rows.extend(["", "</qti-assessment-item>"])
    return "\n".join(rows)


def prompt_rows(question: QuestionBase) -> list[str]:
    return block_rows(question.prompt_blocks)
