"""Content block rendering into inline-styled XML fragments."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import logging

from qtibuilder.enums import BlockType
from qtibuilder.rendering.styles import resolve_attributes, resolve_styles, serialize_styles
from qtibuilder.rendering.xhtml import to_xhtml
from qtibuilder.schemas import ContentBlock
from qtibuilder.xmltree import attr, escape_text, is_well_formed_fragment

logger = logging.getLogger(__name__)

MEDIA_FLAGS = ("controls", "autoplay", "loop")
FALSE_FLAG_VALUES = frozenset({"", "false", "0", "no", "off"})


def is_flag_on(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in FALSE_FLAG_VALUES
    return bool(value)


def style_attr(styles: Mapping[str, object] | None) -> str:
    style = serialize_styles(styles)
    return attr("style", style) if style else ""


def markup_content(markup: str, *, source: str) -> str:
    """Return ``markup`` ready to embed as element content.

    Well-formed fragments go out verbatim, HTML is normalized to XHTML, and
    only markup that stays malformed after normalization is escaped as text.
    """

    if is_well_formed_fragment(markup):
        return markup
    normalized = to_xhtml(markup)
    if is_well_formed_fragment(normalized):
        logger.debug("normalized html content to xhtml", extra={"source": source})
        return normalized
    logger.warning("content is not well-formed XML, writing it as text", extra={"source": source})
    return escape_text(markup)


def _media_flags(attributes: Mapping[str, object]) -> str:
    # XHTML spelling: a flag is either absent or name="name".
    return "".join(attr(flag, flag) for flag in MEDIA_FLAGS if is_flag_on(attributes.get(flag)))


def render_block(block: ContentBlock) -> str:
    styles = resolve_styles(block.type, block.styles)
    attributes = resolve_attributes(block.type, block.attributes)
    style = style_attr(styles)

    if block.type in (BlockType.TEXT, BlockType.HTML):
        return f"<div{style}>{markup_content(block.content, source=block.id)}</div>"
    if block.type == BlockType.IMAGE:
        return (
            f"<img{attr('src', block.content)}{attr('alt', attributes['alt'])}"
            f"{attr('width', attributes['width'])}{attr('height', attributes['height'])}{style}/>"
        )
    if block.type == BlockType.VIDEO:
        return (
            f"<video{attr('src', block.content)}{attr('width', attributes['width'])}"
            f"{attr('height', attributes['height'])}{_media_flags(attributes)}{style}></video>"
        )
    if block.type == BlockType.AUDIO:
        return f"<audio{attr('src', block.content)}{_media_flags(attributes)}{style}></audio>"
    return ""


def render_blocks(blocks: Iterable[ContentBlock], indent: int = 6) -> str:
    """Render blocks in order, one fragment per line."""

    padding = " " * indent
    return "\n".join(f"{padding}{render_block(block)}" for block in blocks)
