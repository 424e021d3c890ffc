"""Order interaction parser."""

from __future__ import annotations

import logging

from qtibuilder.enums import QuestionType
from qtibuilder.parsers.common import (
    build_lookup,
    correct_response_values,
    element_identifier,
    feedback_blocks,
    find_interaction,
    item_metadata,
    load_assessment_item,
    parse_blocks,
    prompt_blocks,
    read_bool,
    read_orientation,
)
from qtibuilder.schemas import OrderOption, OrderQuestion
from qtibuilder.xmltree import iter_descendants

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Order Question"


def parse_order_xml(xml_text: str, *, strict: bool = False) -> OrderQuestion | None:
    """Rebuild an :class:`OrderQuestion` from a QTI 3.0 document.

    Options are emitted in correct-response order and ranked 1..N. When the
    correct response resolves to nothing, the lenient mode ranks the choices
    by document order instead; ``strict=True`` rejects the document.
    Returns ``None`` on any failure, never raises.
    """

    try:
        return _parse_order(xml_text, strict=strict)
    except Exception:
        logger.exception("order XML parsing failed")
        return None


def _parse_order(xml_text: str, *, strict: bool) -> OrderQuestion | None:
    item = load_assessment_item(xml_text, QuestionType.ORDER)
    if item is None:
        return None
    identifier, title = item_metadata(item, "order-question", DEFAULT_TITLE)

    interaction = find_interaction(item, "qti-order-interaction", QuestionType.ORDER)
    if interaction is None:
        return None

    choices = list(iter_descendants(interaction, "qti-simple-choice"))
    lookup = build_lookup(choices, "option")

    options: list[OrderOption] = []
    unresolved: list[str] = []
    for value in correct_response_values(item):
        element = lookup.get(value)
        if element is None:
            unresolved.append(value)
            continue
        if any(option.identifier == value for option in options):
            continue
        options.append(
            OrderOption(
                identifier=value,
                content_blocks=parse_blocks(element),
                correct_order=len(options) + 1,
            )
        )

    if strict and (unresolved or not options):
        logger.warning(
            "strict parse rejected order correct response",
            extra={"identifier": identifier, "unresolved": unresolved},
        )
        return None
    if unresolved:
        logger.warning(
            "ignoring unresolved order values",
            extra={"identifier": identifier, "unresolved": unresolved},
        )

    if not options:
        logger.info("ranking order choices by document order", extra={"identifier": identifier})
        options = [
            OrderOption(
                identifier=element_identifier(element, "option", index),
                content_blocks=parse_blocks(element),
                correct_order=index + 1,
            )
            for index, element in enumerate(choices)
        ]
    elif len(options) < len(lookup):
        logger.warning(
            "choices missing from the correct response were dropped",
            extra={"identifier": identifier, "dropped": len(lookup) - len(options)},
        )

    return OrderQuestion(
        identifier=identifier,
        title=title,
        prompt_blocks=prompt_blocks(item, interaction),
        options=options,
        correct_feedback_blocks=feedback_blocks(item, "CORRECT"),
        incorrect_feedback_blocks=feedback_blocks(item, "INCORRECT"),
        shuffle=read_bool(interaction.get("shuffle")),
        orientation=read_orientation(interaction.get("orientation")),
    )
