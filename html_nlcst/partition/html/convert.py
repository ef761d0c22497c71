"""Provides `to_nlcst()`, which turns an HTML tree into a natural-language tree.

PRINCIPLES

- _Paragraphs are found, not made._ A paragraph comes either from an _explicit_ paragraph element
  (`<p>`, `<h1>`..`<h6>`) or from an _implicit_ paragraph: a run of phrasing content inside a
  flow container like `<div>` or `<li>`. This is a slightly simplified version of
  https://html.spec.whatwg.org/multipage/dom.html#paragraphs. For example:

  ```html
  <article>
    An implicit paragraph.
    <h1>An explicit paragraph.</h1>
  </article>
  ```

- _An empty paragraph is not a paragraph._ A run of phrasing content holding only whitespace or
  embedded content (like an `<img>`) does not give rise to a paragraph.

- _Links are transparent._ `<a>`, `<ins>`, `<del>` and `<map>` can hold flow content, but their
  content is treated as if it were written in their parent.

- _Some content is not prose._ `<script>`, `<style>`, `<svg>`, `<math>` and `<del>` are ignored,
  as is any element with `data-nlcst="ignore"`. `<code>`, and any element with
  `data-nlcst="source"`, becomes a single `SourceNode` holding its text.

- _Positions come from text length._ Input positions only anchor where a run of converted text
  starts. Every produced node is positioned from the cumulative length of the text before it, so
  tokens made by the tokenizer and whitespace standing in for `<br>` and `<wbr>` get exact spans.
"""

from __future__ import annotations

from typing import Any, FrozenSet, Optional, Sequence, Union

from html_nlcst.documents.hast import Element, Node, Root, Text, point_start
from html_nlcst.documents.html_utils import embedded, is_element, phrasing, to_string, whitespace
from html_nlcst.documents.location import Location, Position
from html_nlcst.documents.nlcst import (
    ParagraphNode,
    RootNode,
    SentenceContent,
    SourceNode,
    WhiteSpaceNode,
    patch_positions,
)
from html_nlcst.errors import InvalidArgumentError
from html_nlcst.logger import logger
from html_nlcst.nlp.tokenize import make_paragraph

# ------------------------------------------------------------------------------------------------
# ELEMENT CLASSIFIERS
# ------------------------------------------------------------------------------------------------

DATA_NLCST_ATTRIBUTE = "data-nlcst"

IGNORED_TAGS: FrozenSet[str] = frozenset(("script", "style", "svg", "math", "del"))

SOURCE_TAGS: FrozenSet[str] = frozenset(("code",))

EXPLICIT_PARAGRAPH_TAGS: FrozenSet[str] = frozenset(("p", "h1", "h2", "h3", "h4", "h5", "h6"))

FLOW_ACCEPTING_TAGS: FrozenSet[str] = frozenset(
    (
        "address",
        "article",
        "aside",
        "blockquote",
        "body",
        "caption",
        "dd",
        "details",
        "dialog",
        "div",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "header",
        "li",
        "main",
        "nav",
        "section",
        "td",
        "th",
    )
)

# -- see https://html.spec.whatwg.org/multipage/dom.html#paragraphs --
UNWRAPPED_IN_PARAGRAPH_TAGS: FrozenSet[str] = frozenset(("a", "ins", "del", "map"))


def is_ignored(node: Node) -> bool:
    """True when `node` is an element whose content is not natural language at all."""
    return is_element(node, IGNORED_TAGS) or _data_nlcst(node) == "ignore"


def is_source(node: Node) -> bool:
    """True when `node` is an element whose text is source, like code, rather than prose."""
    return is_element(node, SOURCE_TAGS) or _data_nlcst(node) == "source"


def is_explicit_paragraph(node: Node) -> bool:
    return is_element(node, EXPLICIT_PARAGRAPH_TAGS)


def is_flow_accepting(node: Node) -> bool:
    """True when runs of phrasing content in `node` form implicit paragraphs."""
    return is_element(node, FLOW_ACCEPTING_TAGS)


def is_unwrapped_in_paragraph(node: Node) -> bool:
    """True when `node` is transparent for paragraph purposes.

    An ignored element is never unwrapped, so `<del>` is dropped along with its content.
    """
    return is_element(node, UNWRAPPED_IN_PARAGRAPH_TAGS) and not is_ignored(node)


def _data_nlcst(node: Node) -> Optional[str]:
    return node.properties.get(DATA_NLCST_ATTRIBUTE) if isinstance(node, Element) else None


# ------------------------------------------------------------------------------------------------
# CONVERSION
# ------------------------------------------------------------------------------------------------


def to_nlcst(tree: Node, file: Any, parser: Any) -> RootNode:
    """Turn the HTML tree `tree` into a natural-language tree.

    `tree` must have positional info and `file` must be the document `tree` was parsed from, like
    a `VirtualFile`; anything with a `messages` attribute whose `str()` is the document text will
    do. `parser` is the tokenizer, either a class (instantiated here without arguments) or an
    instance. It must provide `tokenize(text)` and the `tokenize_sentence_plugins` and
    `tokenize_paragraph_plugins` lists; `html_nlcst.nlp.tokenize.Parser` is the default.
    """
    if tree is None or not getattr(tree, "type", None):
        raise InvalidArgumentError("node")

    if file is None or not hasattr(file, "messages"):
        raise InvalidArgumentError("file")

    if parser is None:
        raise InvalidArgumentError("parser")

    if point_start(tree) is None:
        raise InvalidArgumentError("position on nodes")

    document = str(file)
    if isinstance(parser, type):
        parser = parser()

    root = _NlcstConverter(document, parser).convert(tree)

    logger.debug(
        "converted document of length %d into %d paragraph(s)", len(document), len(root.children)
    )
    return root


class _NlcstConverter:
    """Converts one HTML tree; constructed per conversion and discarded after.

    The methods call each other recursively: `_find()` walks the tree looking for paragraphs,
    `_implicit()` groups phrasing content into paragraphs, `_add()` emits a paragraph and `_one()`
    turns content into tokens.
    """

    def __init__(self, document: str, parser: Any):
        self._document = document
        self._parser = parser
        self._location = Location(document)
        self._results: list[ParagraphNode] = []

    def convert(self, tree: Node) -> RootNode:
        self._find(tree)

        start = self._location.to_point(0)
        end = self._location.to_point(len(self._document))

        return RootNode(
            children=self._results, position=Position(start, end) if start and end else None
        )

    # -- TREE WALKER ----------------------------------------------------------

    def _find(self, node: Node) -> None:
        """Emit every paragraph in `node`."""
        if isinstance(node, Root):
            self._find_all(node.children)
        elif isinstance(node, Element) and not is_ignored(node):
            if is_explicit_paragraph(node):
                self._add(node)
            elif is_flow_accepting(node):
                self._implicit(self._flatten_all(node.children))
            else:
                # -- dig deeper --
                self._find_all(node.children)

    def _find_all(self, children: Sequence[Node]) -> None:
        for child in children:
            self._find(child)

    # -- PARAGRAPH GROUPER ----------------------------------------------------

    def _flatten_all(self, children: Sequence[Node]) -> list[Node]:
        """`children` with `<a>`, `<ins>`, `<del>` and `<map>` replaced by their own children."""
        flattened: list[Node] = []

        for child in children:
            if is_unwrapped_in_paragraph(child):
                assert isinstance(child, Element)
                flattened.extend(self._flatten_all(child.children))
            else:
                flattened.append(child)

        return flattened

    def _implicit(self, children: Sequence[Node]) -> None:
        """Emit the implicit paragraphs formed by runs of phrasing content in `children`.

        Non-phrasing children are searched for paragraphs of their own. A run only becomes a
        paragraph once it holds a phrasing node that is neither embedded content nor whitespace;
        otherwise its nodes are searched like non-phrasing children.
        """
        # -- index of the first node of the open run, None when no run is open --
        start: Optional[int] = None
        viable = False

        # -- one step past the end flushes a trailing run --
        for index in range(len(children) + 1):
            child = children[index] if index < len(children) else None

            if child is not None and phrasing(child):
                if start is None:
                    start = index
                if not viable and not embedded(child) and not whitespace(child):
                    viable = True
            elif child is not None and start is None:
                self._find(child)
                start = index + 1
            elif start is not None:
                run = list(children[start:index])
                if viable:
                    self._add(run)
                else:
                    self._find_all(run)

                if child is not None:
                    self._find(child)

                viable = False
                start = None

    def _add(self, node: Union[Node, Sequence[Node]]) -> None:
        """Emit one paragraph for `node`, or for a run of nodes, unless it has no content."""
        content = self._all(node) if isinstance(node, Sequence) else self._one(node)

        paragraph = make_paragraph(
            content or [],
            self._parser.tokenize_sentence_plugins,
            self._parser.tokenize_paragraph_plugins,
        )
        if paragraph is not None:
            self._results.append(paragraph)

    # -- CONTENT CONVERTER ----------------------------------------------------

    def _one(self, node: Node) -> Optional[list[SentenceContent]]:
        """Sentence content for `node`, None when it contributes nothing."""
        replacement: Optional[list[SentenceContent]] = None
        change = False

        if isinstance(node, Text):
            replacement = list(self._parser.tokenize(node.value))
            change = True
        elif isinstance(node, Element) and not is_ignored(node):
            if node.tag_name == "wbr":
                replacement = [WhiteSpaceNode(value=" ")]
                change = True
            elif node.tag_name == "br":
                replacement = [WhiteSpaceNode(value="\n")]
                change = True
            elif is_source(node):
                replacement = [SourceNode(value=to_string(node))]
                change = True
            else:
                replacement = self._all(node.children)

        if change and replacement:
            offset = self._location.to_offset(point_start(node))
            patch_positions(replacement, self._location, offset)

        return replacement

    def _all(self, nodes: Sequence[Node]) -> list[SentenceContent]:
        content: list[SentenceContent] = []

        for node in nodes:
            if result := self._one(node):
                content.extend(result)

        return content
