"""Match interaction parser."""

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
    read_int,
)
from qtibuilder.schemas import MatchPair, MatchQuestion
from qtibuilder.xmltree import iter_descendants

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Match Question"
DEFAULT_MAX_ASSOCIATIONS = 3


def parse_match_xml(xml_text: str, *, strict: bool = False) -> MatchQuestion | None:
    """Rebuild a :class:`MatchQuestion` from a QTI 3.0 document.

    The first ``qti-simple-match-set`` is the left side, the last one the
    right side. Each ``left right`` correct-response value becomes a pair;
    without usable values the lenient mode pairs both sides by position.
    Returns ``None`` on any failure, never raises.
    """

    try:
        return _parse_match(xml_text, strict=strict)
    except Exception:
        logger.exception("match XML parsing failed")
        return None


def _parse_match(xml_text: str, *, strict: bool) -> MatchQuestion | None:
    item = load_assessment_item(xml_text, QuestionType.MATCH)
    if item is None:
        return None
    identifier, title = item_metadata(item, "match-question", DEFAULT_TITLE)

    interaction = find_interaction(item, "qti-match-interaction", QuestionType.MATCH)
    if interaction is None:
        return None

    match_sets = list(iter_descendants(interaction, "qti-simple-match-set"))
    left_items = list(iter_descendants(match_sets[0], "qti-simple-associable-choice")) if match_sets else []
    right_items = (
        list(iter_descendants(match_sets[-1], "qti-simple-associable-choice"))
        if len(match_sets) > 1
        else []
    )
    left_lookup = build_lookup(left_items, "left")
    right_lookup = build_lookup(right_items, "right")

    pairs: list[MatchPair] = []
    unresolved: list[str] = []
    seen: set[tuple[str, str]] = set()
    for value in correct_response_values(item):
        parts = value.split()
        if len(parts) != 2 or parts[0] not in left_lookup or parts[1] not in right_lookup:
            unresolved.append(value)
            continue
        left_id, right_id = parts
        if (left_id, right_id) in seen:
            continue
        seen.add((left_id, right_id))
        pairs.append(
            MatchPair(
                left_id=left_id,
                left_content_blocks=parse_blocks(left_lookup[left_id]),
                right_id=right_id,
                right_content_blocks=parse_blocks(right_lookup[right_id]),
            )
        )

    if strict and (unresolved or not pairs):
        logger.warning(
            "strict parse rejected match correct response",
            extra={"identifier": identifier, "unresolved": unresolved},
        )
        return None
    if unresolved:
        logger.warning(
            "ignoring unresolved match values",
            extra={"identifier": identifier, "unresolved": unresolved},
        )

    if not pairs:
        logger.info("pairing match sets by position", extra={"identifier": identifier})
        pairs = [
            MatchPair(
                left_id=element_identifier(left, "left", index),
                left_content_blocks=parse_blocks(left),
                right_id=element_identifier(right, "right", index),
                right_content_blocks=parse_blocks(right),
            )
            for index, (left, right) in enumerate(zip(left_items, right_items))
        ]

    return MatchQuestion(
        identifier=identifier,
        title=title,
        prompt_blocks=prompt_blocks(item, interaction),
        pairs=pairs,
        correct_feedback_blocks=feedback_blocks(item, "CORRECT"),
        incorrect_feedback_blocks=feedback_blocks(item, "INCORRECT"),
        max_associations=read_int(interaction.get("max-associations"), DEFAULT_MAX_ASSOCIATIONS),
        shuffle=read_bool(interaction.get("shuffle")),
    )
