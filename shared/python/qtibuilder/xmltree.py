"""Thin XML interface used by the generators and parsers.

Everything that touches ``xml.etree.ElementTree`` or writes raw XML text goes
through this module: parsing, namespace-agnostic lookups, fragment
serialization and escaping.
"""

from __future__ import annotations

from collections.abc import Iterator
import copy
import re
import xml.etree.ElementTree as ET
from xml.sax.saxutils import escape

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

ParseError = ET.ParseError
Element = ET.Element

_ATTR_ENTITIES = {'"': "&quot;", "\n": "&#10;", "\r": "&#13;", "\t": "&#9;"}
# Code points XML 1.0 rejects even as character references.
_INVALID_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def parse_xml(xml_text: str) -> ET.Element:
    """Parse a document string and return its root element.

    Raises ``ParseError`` for text that is not well-formed.
    """

    # ElementTree refuses str input that carries an encoding declaration.
    return ET.fromstring(xml_text.strip().encode("utf-8"))


def _xml_chars(value: object) -> str:
    return _INVALID_XML_CHARS.sub("", "" if value is None else str(value))


def escape_text(value: object) -> str:
    return escape(_xml_chars(value))


def escape_attr(value: object) -> str:
    return escape(_xml_chars(value), _ATTR_ENTITIES)


def attr(name: str, value: object) -> str:
    """Render ` name="value"` with the value escaped."""

    return f' {name}="{escape_attr(value)}"'


def is_well_formed_fragment(markup: str) -> bool:
    """Whether ``markup`` can be embedded verbatim as element content."""

    if not markup:
        return True
    try:
        ET.fromstring(f"<fragment>{markup}</fragment>")
    except ParseError:
        return False
    return True


def local_tag(tag: str) -> str:
    return tag.split("}", 1)[-1] if "}" in tag else tag


def local_attrib(element: ET.Element) -> dict[str, str]:
    """Element attributes keyed by local name (``xml:lang`` stays prefixed)."""

    attributes: dict[str, str] = {}
    for name, value in element.attrib.items():
        if name.startswith(f"{{{XML_NAMESPACE}}}"):
            attributes[f"xml:{local_tag(name)}"] = value
        else:
            attributes[local_tag(name)] = value
    return attributes


def find_children(element: ET.Element, tag: str) -> list[ET.Element]:
    return [child for child in list(element) if local_tag(child.tag) == tag]


def find_first_child(element: ET.Element, tag: str) -> ET.Element | None:
    for child in list(element):
        if local_tag(child.tag) == tag:
            return child
    return None


def iter_descendants(element: ET.Element, tag: str) -> Iterator[ET.Element]:
    for node in element.iter():
        if node is not element and local_tag(node.tag) == tag:
            yield node


def find_descendant(
    element: ET.Element, tag: str, **attributes: str
) -> ET.Element | None:
    """First descendant with local name ``tag`` whose attributes match."""

    for node in iter_descendants(element, tag):
        if all(node.get(name) == value for name, value in attributes.items()):
            return node
    return None


def node_text(element: ET.Element | None) -> str:
    if element is None:
        return ""
    return "".join(element.itertext()).strip()


def strip_namespaces(element: ET.Element) -> ET.Element:
    """Return a deep copy whose tags and attributes use local names."""

    clone = copy.deepcopy(element)
    for node in clone.iter():
        if isinstance(node.tag, str):
            node.tag = local_tag(node.tag)
        if any("}" in name for name in node.attrib):
            node.attrib = local_attrib(node)
    return clone


def serialize_fragment(element: ET.Element) -> str:
    """Serialize one element (and its tail) without namespace prefixes."""

    return ET.tostring(strip_namespaces(element), encoding="unicode")


def inner_markup(element: ET.Element) -> str:
    """Serialize the content of ``element``: its text plus every child verbatim."""

    parts = [escape_text(element.text or "")]
    parts.extend(serialize_fragment(child) for child in list(element))
    return "".join(parts).strip()
