"""Helpers shared by the QTI 3.0 item parsers.

Parsers only recognize the dashed QTI 3.0 tag names (``qti-assessment-item``,
``qti-simple-choice`` ...). Legacy camelCase QTI 2.x documents are rejected
here; only type detection knows about them.
"""

from __future__ import annotations

from collections.abc import Iterable
import logging
import time

from qtibuilder.enums import BaseType, BlockType, Orientation, QuestionType
from qtibuilder.rendering.styles import parse_style_attribute
from qtibuilder.schemas import ContentBlock, new_block_id
from qtibuilder.xmltree import (
    Element,
    ParseError,
    find_children,
    find_descendant,
    find_first_child,
    inner_markup,
    iter_descendants,
    local_attrib,
    local_tag,
    node_text,
    parse_xml,
)

logger = logging.getLogger(__name__)

ASSESSMENT_ITEM_TAG = "qti-assessment-item"
CONTENT_BODY_TAG = "qti-content-body"
FEEDBACK_TAGS = ("qti-feedback-block", "qti-modal-feedback")
MEDIA_TAGS = {"video": BlockType.VIDEO, "audio": BlockType.AUDIO}
MEDIA_FLAGS = ("controls", "autoplay", "loop")


def load_assessment_item(xml_text: str, question_type: QuestionType) -> Element | None:
    """Parse ``xml_text`` and return its ``qti-assessment-item`` element."""

    try:
        root = parse_xml(xml_text)
    except ParseError as exc:
        logger.warning(
            "rejected malformed XML", extra={"question_type": str(question_type), "error": str(exc)}
        )
        return None

    if local_tag(root.tag) == ASSESSMENT_ITEM_TAG:
        return root
    item = next(iter_descendants(root, ASSESSMENT_ITEM_TAG), None)
    if item is None:
        logger.warning(
            "no qti-assessment-item element found", extra={"question_type": str(question_type)}
        )
    return item


def item_metadata(item: Element, prefix: str, default_title: str) -> tuple[str, str]:
    identifier = (item.get("identifier") or "").strip()
    title = (item.get("title") or "").strip()
    return (
        identifier or f"{prefix}-{int(time.time() * 1000)}",
        title or default_title,
    )


def read_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() == "true"


def read_int(value: str | None, default: int | None) -> int | None:
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def read_orientation(value: str | None) -> Orientation:
    if (value or "").strip().lower() == Orientation.HORIZONTAL.value:
        return Orientation.HORIZONTAL
    return Orientation.VERTICAL


def find_interaction(item: Element, tag: str, question_type: QuestionType) -> Element | None:
    interaction = find_descendant(item, tag)
    if interaction is None:
        logger.warning(
            "interaction element missing",
            extra={"question_type": str(question_type), "tag": tag},
        )
    return interaction


def correct_response_values(item: Element) -> list[str]:
    """Values of the RESPONSE correct response, in document order."""

    declarations = list(iter_descendants(item, "qti-response-declaration"))
    declaration = next(
        (node for node in declarations if node.get("identifier") == "RESPONSE"),
        declarations[0] if declarations else None,
    )
    if declaration is None:
        return []
    correct = find_first_child(declaration, "qti-correct-response")
    if correct is None:
        return []
    # String answers keep their surrounding whitespace; it is part of the value.
    raw = declaration.get("base-type") == BaseType.STRING
    values = (
        "".join(value.itertext()) if raw else node_text(value)
        for value in find_children(correct, "qti-value")
    )
    return [value for value in values if value.strip()]


def build_lookup(elements: Iterable[Element], fallback_prefix: str) -> dict[str, Element]:
    """identifier -> element, first occurrence wins."""

    lookup: dict[str, Element] = {}
    for index, element in enumerate(elements):
        identifier = element.get("identifier") or f"{fallback_prefix}_{index + 1}"
        lookup.setdefault(identifier, element)
    return lookup


def element_identifier(element: Element, fallback_prefix: str, index: int) -> str:
    return element.get("identifier") or f"{fallback_prefix}_{index + 1}"


def element_to_block(element: Element) -> ContentBlock:
    """Convert one rendered element back into a content block."""

    tag = local_tag(element.tag).lower()
    attributes: dict[str, object] = {
        name: value for name, value in local_attrib(element).items() if name != "style"
    }
    styles = parse_style_attribute(element.get("style"))

    if tag == "img":
        src = str(attributes.pop("src", ""))
        return ContentBlock(
            id=new_block_id(), type=BlockType.IMAGE, content=src, styles=styles, attributes=attributes
        )
    if tag in MEDIA_TAGS:
        src = str(attributes.pop("src", ""))
        for flag in MEDIA_FLAGS:
            if flag in attributes:
                attributes[flag] = True
        return ContentBlock(
            id=new_block_id(), type=MEDIA_TAGS[tag], content=src, styles=styles, attributes=attributes
        )

    body = find_first_child(element, CONTENT_BODY_TAG)
    content = inner_markup(body if body is not None else element)
    return ContentBlock(
        id=new_block_id(), type=BlockType.TEXT, content=content, styles=styles, attributes=attributes
    )


def _has_loose_text(container: Element) -> bool:
    if (container.text or "").strip():
        return True
    return any((child.tail or "").strip() for child in container)


def parse_blocks(container: Element | None, skip_tags: Iterable[str] = ()) -> list[ContentBlock]:
    """One block per child element of ``container``.

    A ``qti-content-body`` wrapper is unwrapped first. Containers holding loose
    text next to their elements become a single text block with the markup
    captured verbatim.
    """

    if container is None:
        return []
    body = find_first_child(container, CONTENT_BODY_TAG)
    if body is not None:
        container = body

    skipped = set(skip_tags)
    children = [child for child in container if local_tag(child.tag) not in skipped]
    if _has_loose_text(container):
        clone = Element(container.tag, container.attrib)
        clone.text = container.text
        clone.extend(children)
        content = inner_markup(clone)
        return [ContentBlock(id=new_block_id(), type=BlockType.TEXT, content=content)]
    return [element_to_block(child) for child in children]


def find_feedback(item: Element, identifier: str) -> Element | None:
    for tag in FEEDBACK_TAGS:
        node = find_descendant(item, tag, identifier=identifier)
        if node is not None:
            return node
    return None


def feedback_blocks(item: Element, identifier: str) -> list[ContentBlock]:
    return parse_blocks(find_feedback(item, identifier))


def _contains(ancestor: Element, target: Element) -> bool:
    return any(node is target for node in ancestor.iter())


def prompt_blocks(item: Element, interaction: Element) -> list[ContentBlock]:
    """Item-body content that precedes the interaction, then its ``qti-prompt``."""

    blocks: list[ContentBlock] = []
    item_body = find_descendant(item, "qti-item-body")
    if item_body is not None:
        for child in item_body:
            if _contains(child, interaction):
                break
            if local_tag(child.tag) in FEEDBACK_TAGS:
                continue
            blocks.append(element_to_block(child))
    blocks.extend(parse_blocks(find_first_child(interaction, "qti-prompt")))
    return blocks
