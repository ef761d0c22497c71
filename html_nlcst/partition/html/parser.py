"""Provides the HTML parser used by `partition_html()`.

The parser builds the `html_nlcst.documents.hast` tree for an HTML document and, unlike most HTML
parsers, records the exact source span (line, column and offset) of every node it produces:

- An element spans from the `<` of its start tag to the `>` of its end tag. An element closed
  implicitly, like a `<p>` followed by a `<div>`, ends where the content closing it starts. An
  element still open at the end of the document ends there.
- A text node spans its raw source, so `&amp;` covers five characters even though the text value
  holds a single `&`.
- Comments and doctypes are kept; processing instructions and CDATA sections are dropped.

This is a _fragment_ parser. It does not add the `<html>`, `<head>` and `<body>` elements a browser
would imply, so the tree holds exactly what the source holds. A handful of common omitted end tags
are implied: a block-level start tag closes an open `<p>`, and `<li>`, `<dt>`, `<dd>`, `<option>`,
`<tr>`, `<td>` and `<th>` close an open sibling of their kind. An end tag closes every element
opened after its matching start tag; an end tag with no match is ignored. As in browsers, the
self-closing flag of a non-void tag is ignored, so `<div/>` opens a div.

Tokenizing is done by `html.parser.HTMLParser`, the same engine BeautifulSoup's "html.parser"
builder drives. The tree is built here because neither BeautifulSoup nor lxml report the source
span of text nodes or end tags.
"""

from __future__ import annotations

import re
from html.parser import HTMLParser
from typing import FrozenSet, Mapping, Optional, Sequence, Tuple, Union, cast

from html_nlcst.documents.hast import Comment, Doctype, Element, Node, Root, Text
from html_nlcst.documents.location import Location, Point, Position, VirtualFile
from html_nlcst.logger import logger

VOID_ELEMENTS: FrozenSet[str] = frozenset(
    (
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    )
)

# -- start tags that close an open `<p>` --
CLOSES_P_TAGS: FrozenSet[str] = frozenset(
    (
        "address",
        "article",
        "aside",
        "blockquote",
        "details",
        "dialog",
        "div",
        "dl",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hgroup",
        "hr",
        "li",
        "main",
        "menu",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "table",
        "ul",
    )
)

# -- an open `<p>` is not closed from outside these --
P_SCOPE_BOUNDARIES: FrozenSet[str] = frozenset(
    ("button", "caption", "html", "object", "table", "td", "template", "th")
)

# -- start tag -> (open elements it closes, elements that stop the search for one) --
IMPLIED_END_TAGS: Mapping[str, Tuple[FrozenSet[str], FrozenSet[str]]] = {
    "li": (frozenset(("li",)), frozenset(("menu", "ol", "ul"))),
    "dt": (frozenset(("dd", "dt")), frozenset(("dl",))),
    "dd": (frozenset(("dd", "dt")), frozenset(("dl",))),
    "option": (frozenset(("option",)), frozenset(("datalist", "optgroup", "select"))),
    "tr": (frozenset(("tr",)), frozenset(("table", "tbody", "tfoot", "thead"))),
    "td": (frozenset(("td", "th")), frozenset(("table", "tr"))),
    "th": (frozenset(("td", "th")), frozenset(("table", "tr"))),
}


def parse_html(value: Union[str, VirtualFile]) -> Root:
    """Parse the HTML document `value` into a positioned tree.

    When `value` is a `VirtualFile`, markup problems the parser recovers from are also recorded as
    messages on it.
    """
    file = value if isinstance(value, VirtualFile) else None
    builder = _TreeBuilder(str(value), file)
    builder.feed(str(value))
    builder.close()
    return builder.root


class _TreeBuilder(HTMLParser):
    """Builds the tree from `HTMLParser` events, tracking where each node starts and ends.

    `HTMLParser.getpos()` reports where the current event starts. The end of text, comments and
    doctypes is only known when the next event starts, so those nodes wait in `_awaiting_end`.
    """

    def __init__(self, document: str, file: Optional[VirtualFile] = None):
        super().__init__(convert_charrefs=True)
        self._document = document
        self._file = file
        self._location = Location(document)
        # -- `HTMLParser` counts lines at "\n" only --
        self._line_starts = [0, *(match.end() for match in re.finditer("\n", document))]
        self._stack: list[Element] = []
        self._awaiting_end: list[Node] = []
        self._text: Optional[Text] = None
        self.root = Root(children=[], position=self._position(0, len(document)))

    def close(self) -> None:
        super().close()
        end = len(self._document)
        self._end_awaiting(end)
        self._close_elements(0, end)

    # -- HTMLParser handlers --------------------------------------------------

    def handle_starttag(self, tag: str, attrs: Sequence[Tuple[str, Optional[str]]]) -> None:
        start = self._flush()
        self._close_implied(tag, start)
        element = self._element(tag, attrs, start)
        if tag not in VOID_ELEMENTS:
            self._stack.append(element)

    def handle_startendtag(self, tag: str, attrs: Sequence[Tuple[str, Optional[str]]]) -> None:
        # -- `<div/>` opens a div --
        if tag not in VOID_ELEMENTS:
            self.handle_starttag(tag, attrs)
            return

        start = self._flush()
        self._close_implied(tag, start)
        self._element(tag, attrs, start)

    def handle_endtag(self, tag: str) -> None:
        start = self._flush()
        end = self._document.find(">", start)
        end = end + 1 if end != -1 else len(self._document)

        for index in range(len(self._stack) - 1, -1, -1):
            if self._stack[index].tag_name == tag:
                self._close_elements(index + 1, start)
                self._close_elements(index, end)
                return

        self._warn(f"Unexpected end tag `</{tag}>`, ignoring it", start)

    def handle_data(self, data: str) -> None:
        # -- character references and stray `<` arrive as separate events --
        if self._text is not None:
            self._text.value += data
            return

        start = self._flush()
        self._text = Text(data, position=self._position(start, start))
        self._append(self._text)
        self._awaiting_end.append(self._text)

    def handle_comment(self, data: str) -> None:
        start = self._flush()
        comment = Comment(data, position=self._position(start, start))
        self._append(comment)
        self._awaiting_end.append(comment)

    def handle_decl(self, decl: str) -> None:
        start = self._flush()
        if decl.lower().startswith("doctype"):
            doctype = Doctype(position=self._position(start, start))
            self._append(doctype)
            self._awaiting_end.append(doctype)

    def handle_pi(self, data: str) -> None:
        self._flush()

    def unknown_decl(self, data: str) -> None:
        self._flush()

    # -- tree building --------------------------------------------------------

    def _append(self, node: Union[Element, Text, Comment, Doctype]) -> None:
        parent: Union[Root, Element] = self._stack[-1] if self._stack else self.root
        parent.children.append(node)  # type: ignore[arg-type]

    def _close_elements(self, index: int, end: int) -> None:
        """Close the open elements from `index` up, all ending at offset `end`."""
        for element in self._stack[index:]:
            assert element.position is not None
            element.position.end = self._point(end)
        del self._stack[index:]

    def _close_implied(self, tag: str, start: int) -> None:
        """Close the elements whose end tag the start tag `tag` implies."""
        if tag in CLOSES_P_TAGS:
            self._close_open(frozenset(("p",)), P_SCOPE_BOUNDARIES, start)
        if tag in IMPLIED_END_TAGS:
            self._close_open(*IMPLIED_END_TAGS[tag], start)

    def _close_open(self, tag_names: FrozenSet[str], boundaries: FrozenSet[str], end: int) -> None:
        for index in range(len(self._stack) - 1, -1, -1):
            tag_name = self._stack[index].tag_name
            if tag_name in tag_names:
                self._close_elements(index, end)
                return
            if tag_name in boundaries:
                return

    def _element(
        self, tag: str, attrs: Sequence[Tuple[str, Optional[str]]], start: int
    ) -> Element:
        properties: dict[str, str] = {}
        # -- the first of duplicate attributes wins, as in a browser --
        for name, value in attrs:
            properties.setdefault(name, value or "")

        start_tag_text = self.get_starttag_text() or ""
        element = Element(
            tag_name=tag,
            properties=properties,
            children=[],
            position=self._position(start, start + len(start_tag_text)),
        )
        self._append(element)
        return element

    def _end_awaiting(self, end: int) -> None:
        for node in self._awaiting_end:
            assert node.position is not None
            node.position.end = self._point(end)
        self._awaiting_end.clear()
        self._text = None

    def _flush(self) -> int:
        """Offset where the current event starts, ending any nodes waiting on it."""
        line, column = self.getpos()
        offset = self._line_starts[line - 1] + column
        self._end_awaiting(offset)
        return offset

    # -- positions ------------------------------------------------------------

    def _point(self, offset: int) -> Point:
        return cast(Point, self._location.to_point(offset))

    def _position(self, start: int, end: int) -> Position:
        return Position(self._point(start), self._point(end))

    def _warn(self, reason: str, offset: int) -> None:
        point = self._point(offset)
        logger.debug("%s at %d:%d", reason, point.line, point.column)
        if self._file is not None:
            self._file.message(reason, point, source="html-nlcst:parser")
