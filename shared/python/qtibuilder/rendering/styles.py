"""Inline style serialization and per-block style resolution."""

from __future__ import annotations

from collections.abc import Mapping
import re

from qtibuilder.enums import BlockType

# Values the editor uses to mean "not set".
UNSET_STYLE_VALUES = frozenset({"auto", "transparent"})

CAMEL_BOUNDARY_PATTERN = re.compile(r"([A-Z])")
KEBAB_BOUNDARY_PATTERN = re.compile(r"-([a-z0-9])")

# Styles applied under the declared ones. Text and html blocks get none so that
# their output only reflects what the author set.
DEFAULT_BLOCK_STYLES: dict[BlockType, dict[str, str]] = {
    BlockType.TEXT: {},
    BlockType.HTML: {},
    BlockType.IMAGE: {"maxWidth": "100%"},
    BlockType.VIDEO: {"maxWidth": "100%"},
    BlockType.AUDIO: {},
}

DEFAULT_BLOCK_ATTRIBUTES: dict[BlockType, dict[str, str]] = {
    BlockType.IMAGE: {"alt": "Image", "width": "400", "height": "300"},
    BlockType.VIDEO: {"width": "400", "height": "300"},
}


def camel_to_kebab(name: str) -> str:
    return CAMEL_BOUNDARY_PATTERN.sub(r"-\1", name).lower()


def kebab_to_camel(name: str) -> str:
    if name.startswith("--"):
        return name
    return KEBAB_BOUNDARY_PATTERN.sub(lambda match: match.group(1).upper(), name)


def is_set(value: object) -> bool:
    if value is None:
        return False
    text = str(value).strip()
    return bool(text) and text not in UNSET_STYLE_VALUES


def serialize_styles(styles: Mapping[str, object] | None) -> str:
    """Render a style mapping as one inline ``style`` attribute value.

    Empty, ``auto`` and ``transparent`` values are dropped, keys go from
    camelCase to kebab-case, and entries keep the mapping's order.
    """

    if not styles:
        return ""
    return "; ".join(
        f"{camel_to_kebab(key)}: {str(value).strip()}"
        for key, value in styles.items()
        if is_set(value)
    )


def parse_style_attribute(style: str | None) -> dict[str, str]:
    """Split ``a: b; c: d`` back into a camelCase-keyed mapping."""

    styles: dict[str, str] = {}
    for declaration in (style or "").split(";"):
        key, sep, value = declaration.partition(":")
        key, value = key.strip(), value.strip()
        if sep and key and value:
            styles[kebab_to_camel(key)] = value
    return styles


def resolve_styles(block_type: BlockType, styles: Mapping[str, object] | None) -> dict[str, object]:
    """Merge declared styles over the defaults for ``block_type``."""

    resolved: dict[str, object] = dict(DEFAULT_BLOCK_STYLES.get(block_type, {}))
    for key, value in (styles or {}).items():
        if is_set(value) or key not in resolved:
            resolved[key] = value
    return resolved


def resolve_attributes(block_type: BlockType, attributes: Mapping[str, object] | None) -> dict[str, object]:
    """Merge declared attributes over the defaults for ``block_type``.

    Falsy declared values fall back to the default, as the editor sends empty
    strings for untouched fields.
    """

    resolved: dict[str, object] = dict(DEFAULT_BLOCK_ATTRIBUTES.get(block_type, {}))
    for key, value in (attributes or {}).items():
        if value or key not in resolved:
            resolved[key] = value
    return resolved
