"""HTML to XHTML normalization for editor markup.

The rich-text editor stores ``innerHTML``: void elements without a closing
slash (``<br>``) and HTML named entities (``&nbsp;``), neither of which an XML
document accepts. :func:`to_xhtml` rewrites such markup so it can be embedded
in an item as elements instead of escaped text.
"""

from __future__ import annotations

from html.parser import HTMLParser

from qtibuilder.xmltree import attr, escape_text

VOID_ELEMENTS = frozenset(
    {"area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "param", "source", "track", "wbr"}
)


class XhtmlWriter(HTMLParser):
    """Re-serialize parsed HTML with closed elements and decoded entities."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []
        self._open: list[str] = []

    @staticmethod
    def _opening(tag: str, attrs: list[tuple[str, str | None]]) -> str:
        # Minimized attributes (``<input disabled>``) get the XHTML spelling.
        rendered = "".join(attr(name, name if value is None else value) for name, value in attrs)
        return f"<{tag}{rendered}"

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in VOID_ELEMENTS:
            self.parts.append(f"{self._opening(tag, attrs)}/>")
            return
        self.parts.append(f"{self._opening(tag, attrs)}>")
        self._open.append(tag)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self.parts.append(f"{self._opening(tag, attrs)}/>")

    def handle_endtag(self, tag: str) -> None:
        # Stray end tags (``</br>``, ``</p>`` with no open ``p``) are dropped.
        if tag not in self._open:
            return
        while self._open:
            current = self._open.pop()
            self.parts.append(f"</{current}>")
            if current == tag:
                break

    def handle_data(self, data: str) -> None:
        self.parts.append(escape_text(data))

    def close(self) -> None:
        super().close()
        while self._open:
            self.parts.append(f"</{self._open.pop()}>")


def to_xhtml(markup: str) -> str:
    writer = XhtmlWriter()
    writer.feed(markup)
    writer.close()
    return "".join(writer.parts)
