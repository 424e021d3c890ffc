"""Hottext interaction parser."""

from __future__ import annotations

import logging

from qtibuilder.enums import HottextContentType, QuestionType
from qtibuilder.parsers.common import (
    CONTENT_BODY_TAG,
    correct_response_values,
    element_identifier,
    element_to_block,
    find_feedback,
    find_interaction,
    item_metadata,
    load_assessment_item,
    parse_blocks,
    prompt_blocks,
    read_int,
)
from qtibuilder.rendering.styles import parse_style_attribute
from qtibuilder.schemas import ContentBlock, HottextContent, HottextItem, HottextQuestion
from qtibuilder.xmltree import (
    Element,
    find_first_child,
    inner_markup,
    iter_descendants,
    local_tag,
)

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Hottext Question"
HOTTEXT_TAG = "qti-hottext"


def _parent_of(root: Element, target: Element) -> Element | None:
    for parent in root.iter():
        for child in parent:
            if child is target:
                return parent
    return None


def _hottext_item(element: Element, index: int) -> HottextItem:
    identifier = element_identifier(element, "hottext", index)
    content_el = next(iter(element), None)
    if content_el is None:
        return HottextItem(
            identifier=identifier,
            content=HottextContent(type=HottextContentType.TEXT, value="".join(element.itertext()).strip()),
        )

    styles = parse_style_attribute(content_el.get("style"))
    if local_tag(content_el.tag).lower() == "img":
        content = HottextContent(type=HottextContentType.IMAGE, value=content_el.get("src", ""))
    elif len(content_el):
        content = HottextContent(type=HottextContentType.HTML, value=inner_markup(content_el))
    else:
        content = HottextContent(type=HottextContentType.TEXT, value="".join(content_el.itertext()))
    return HottextItem(identifier=identifier, content=content, styles=styles)


def _is_hottext_row(element: Element) -> bool:
    return local_tag(element.tag) == HOTTEXT_TAG or next(iter_descendants(element, HOTTEXT_TAG), None) is not None


def _content_blocks(container: Element | None, interaction: Element) -> list[ContentBlock]:
    """Container content ahead of the interaction, then the interaction's own body."""

    blocks: list[ContentBlock] = []
    if container is not None:
        for child in container:
            if child is interaction:
                break
            if local_tag(child.tag) == "style":
                continue
            blocks.append(element_to_block(child))
    for child in interaction:
        if local_tag(child.tag) == "qti-prompt" or _is_hottext_row(child):
            continue
        blocks.append(element_to_block(child))
    return blocks


def _feedback(item: Element, identifier: str, global_styles: dict[str, str]) -> list[ContentBlock]:
    node = find_feedback(item, identifier)
    if node is None:
        return []
    body = find_first_child(node, CONTENT_BODY_TAG)
    if body is None:
        body = node
    # Feedback is written inside a div repeating the global styles.
    children = list(body)
    if (
        len(children) == 1
        and local_tag(children[0].tag) == "div"
        and not (body.text or "").strip()
        and not (children[0].tail or "").strip()
        and parse_style_attribute(children[0].get("style")) == global_styles
    ):
        return parse_blocks(children[0])
    return parse_blocks(node)


def parse_hottext_xml(xml_text: str, *, strict: bool = False) -> HottextQuestion | None:
    """Rebuild a :class:`HottextQuestion` from a QTI 3.0 document.

    The element wrapping the interaction supplies the global styles, and its
    ``<style>`` child the custom CSS. Correct values that name no hottext are
    dropped, or reject the document when ``strict`` is set.
    Returns ``None`` on any failure, never raises.
    """

    try:
        return _parse_hottext(xml_text, strict=strict)
    except Exception:
        logger.exception("hottext XML parsing failed")
        return None


def _parse_hottext(xml_text: str, *, strict: bool) -> HottextQuestion | None:
    item = load_assessment_item(xml_text, QuestionType.HOTTEXT)
    if item is None:
        return None
    identifier, title = item_metadata(item, "hottext-question", DEFAULT_TITLE)

    interaction = find_interaction(item, "qti-hottext-interaction", QuestionType.HOTTEXT)
    if interaction is None:
        return None

    parent = _parent_of(item, interaction)
    container = parent if parent is not None and local_tag(parent.tag) == "div" else None
    global_styles = parse_style_attribute(container.get("style")) if container is not None else {}
    style_el = find_first_child(container, "style") if container is not None else None
    custom_css = (style_el.text or "").strip() if style_el is not None else ""

    hottext_items = [
        _hottext_item(element, index)
        for index, element in enumerate(iter_descendants(interaction, HOTTEXT_TAG))
    ]
    known = {hottext.identifier for hottext in hottext_items}
    values = correct_response_values(item)
    unresolved = [value for value in values if value not in known]
    if strict and (unresolved or not values):
        logger.warning(
            "strict parse rejected hottext correct response",
            extra={"identifier": identifier, "unresolved": unresolved},
        )
        return None
    if unresolved:
        logger.warning(
            "ignoring unresolved hottext values",
            extra={"identifier": identifier, "unresolved": unresolved},
        )

    return HottextQuestion(
        identifier=identifier,
        title=title,
        prompt_blocks=prompt_blocks(item, interaction),
        content_blocks=_content_blocks(container, interaction),
        hottext_items=hottext_items,
        correct_answers=list(dict.fromkeys(value for value in values if value in known)),
        max_choices=read_int(interaction.get("max-choices"), 1),
        global_styles=global_styles,
        custom_css=custom_css,
        correct_feedback_blocks=_feedback(item, "CORRECT", global_styles),
        incorrect_feedback_blocks=_feedback(item, "INCORRECT", global_styles),
    )
