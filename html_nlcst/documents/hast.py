"""The HTML document tree consumed by the converter.

The shape follows the hast (HTML abstract syntax tree) node kinds: a `Root` holding the top-level
nodes, `Element` nodes with a tag-name, attribute mapping and children, and `Text`, `Comment` and
`Doctype` leaves. Every node may carry a `Position`. The converter only reads these trees.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Union

from typing_extensions import TypeAlias

from html_nlcst.documents.location import Point, Position


@dataclass
class Node:
    """Base class for all HTML tree nodes."""

    type: ClassVar[str] = ""

    position: Optional[Position] = field(default=None, kw_only=True)


@dataclass
class Text(Node):
    type: ClassVar[str] = "text"

    value: str = ""


@dataclass
class Comment(Node):
    type: ClassVar[str] = "comment"

    value: str = ""


@dataclass
class Doctype(Node):
    type: ClassVar[str] = "doctype"


@dataclass
class Element(Node):
    """An HTML element.

    `properties` maps attribute names, as written in HTML (`"data-nlcst"`, `"href"`), to values.
    """

    type: ClassVar[str] = "element"

    tag_name: str = ""
    properties: dict[str, str] = field(default_factory=dict)
    children: list[ElementContent] = field(default_factory=list)


@dataclass
class Root(Node):
    type: ClassVar[str] = "root"

    children: list[RootContent] = field(default_factory=list)


ElementContent: TypeAlias = Union[Element, Text, Comment]
RootContent: TypeAlias = Union[Element, Text, Comment, Doctype]
Parent: TypeAlias = Union[Root, Element]


def point_start(node: Node) -> Optional[Point]:
    """Start point of `node`, None unless it has both a line and a column."""
    position = getattr(node, "position", None)
    return _complete(position.start) if position else None


def point_end(node: Node) -> Optional[Point]:
    """End point of `node`, None unless it has both a line and a column."""
    position = getattr(node, "position", None)
    return _complete(position.end) if position else None


def _complete(point: Optional[Point]) -> Optional[Point]:
    if point is None or point.line is None or point.column is None:
        return None
    return point
