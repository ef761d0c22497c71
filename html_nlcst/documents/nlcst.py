"""The natural-language tree produced by the converter.

Node kinds follow nlcst (natural language concrete syntax tree): a `RootNode` of
`ParagraphNode`s, each of `SentenceNode`s, each of words, punctuation, symbols, whitespace and
source leaves. The tree is *concrete*: concatenating the `value` of every literal in document
order reproduces the text the tree was made from, which is what lets positions be computed from
text length alone.

Tokenizers may introduce node kinds of their own. They should subclass `Parent` or `Literal` so
code walking the tree only needs to know whether a node has children or a value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterable, Optional, Sequence, Union

from html_nlcst.documents.location import Location, Position


@dataclass
class Node:
    """Base class for all natural-language tree nodes."""

    type: ClassVar[str] = ""

    position: Optional[Position] = field(default=None, kw_only=True)
    data: dict[str, Any] = field(default_factory=dict, kw_only=True)


@dataclass
class Parent(Node):
    """A node with ordered children."""

    children: list[Any] = field(default_factory=list)


@dataclass
class Literal(Node):
    """A leaf node holding the exact text it stands for."""

    value: str = ""


# -- parents ---------------------------------------------------------------


@dataclass
class RootNode(Parent):
    type: ClassVar[str] = "RootNode"


@dataclass
class ParagraphNode(Parent):
    type: ClassVar[str] = "ParagraphNode"


@dataclass
class SentenceNode(Parent):
    type: ClassVar[str] = "SentenceNode"


@dataclass
class WordNode(Parent):
    """A word, made of `TextNode` (and possibly `SymbolNode`/`PunctuationNode`) children."""

    type: ClassVar[str] = "WordNode"


# -- literals --------------------------------------------------------------


@dataclass
class TextNode(Literal):
    type: ClassVar[str] = "TextNode"


@dataclass
class SymbolNode(Literal):
    type: ClassVar[str] = "SymbolNode"


@dataclass
class PunctuationNode(Literal):
    type: ClassVar[str] = "PunctuationNode"


@dataclass
class WhiteSpaceNode(Literal):
    type: ClassVar[str] = "WhiteSpaceNode"


@dataclass
class SourceNode(Literal):
    """Verbatim text that is not natural language, like code."""

    type: ClassVar[str] = "SourceNode"


SentenceContent = Union[
    WordNode, SymbolNode, PunctuationNode, WhiteSpaceNode, SourceNode, TextNode
]

NODE_TYPE_TO_CLASS_MAP: dict[str, type[Node]] = {
    cls.type: cls
    for cls in (
        RootNode,
        ParagraphNode,
        SentenceNode,
        WordNode,
        TextNode,
        SymbolNode,
        PunctuationNode,
        WhiteSpaceNode,
        SourceNode,
    )
}


def to_string(value: Union[Node, Iterable[Node]], separator: str = "") -> str:
    """Text of `value`, a node or a sequence of nodes.

    Literal values are concatenated depth-first. `separator` is placed between the items when a
    sequence is given.
    """
    if isinstance(value, Literal):
        return value.value
    if isinstance(value, Parent):
        return "".join(to_string(child) for child in value.children)
    return separator.join(to_string(node) for node in value)


def patch_positions(nodes: Sequence[Node], location: Location, offset: Optional[int]) -> None:
    """Assign a position to each node in `nodes`, and their descendants, from text length alone.

    `offset` is where the run of sibling `nodes` starts in the document `location` indexes. Each
    node ends where its text ends and the next sibling starts there; a node's first child starts
    where the node starts. Any position the nodes already had is replaced. Nothing is patched when
    `offset` is None and a node whose span falls outside the document gets no position.
    """
    if offset is None:
        return

    start = offset
    for node in nodes:
        if isinstance(node, Parent):
            patch_positions(node.children, location, start)

        end = start + len(to_string(node))
        start_point, end_point = location.to_point(start), location.to_point(end)
        node.position = Position(start_point, end_point) if start_point and end_point else None

        start = end
