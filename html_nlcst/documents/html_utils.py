"""Content-model predicates and text extraction over the HTML tree.

The names "phrasing" and "embedded" derive from the language of the HTML Standard content
categories (https://html.spec.whatwg.org/multipage/dom.html#kinds-of-content).
"""

from __future__ import annotations

import re
from typing import Collection, FrozenSet

from html_nlcst.documents.hast import Element, Node, Text

EMBEDDED_TAGS: FrozenSet[str] = frozenset(
    (
        "audio",
        "canvas",
        "embed",
        "iframe",
        "img",
        "math",
        "object",
        "picture",
        "svg",
        "video",
    )
)

PHRASING_TAGS: FrozenSet[str] = frozenset(
    (
        "a",
        "abbr",
        # -- `area` is phrasing only inside a `map`, but a `map` is itself phrasing --
        "area",
        "b",
        "bdi",
        "bdo",
        "br",
        "button",
        "cite",
        "code",
        "data",
        "datalist",
        "del",
        "dfn",
        "em",
        "i",
        "input",
        "ins",
        "kbd",
        "keygen",
        "label",
        "map",
        "mark",
        "meter",
        "noscript",
        "output",
        "progress",
        "q",
        "ruby",
        "s",
        "samp",
        "script",
        "select",
        "small",
        "span",
        "strong",
        "sub",
        "sup",
        "template",
        "textarea",
        "time",
        "u",
        "var",
        "wbr",
    )
)

# -- a `<link>` is allowed in the body, and so is phrasing, only for these `rel` values --
BODY_OK_LINK_TYPES: FrozenSet[str] = frozenset(("pingback", "prefetch", "stylesheet"))

# -- "inter-element whitespace" per the HTML Standard, notably not including U+00A0 --
HTML_WHITESPACE_RE = re.compile(r"[ \t\n\f\r]*")


def is_element(node: Node, tag_names: Collection[str] | str | None = None) -> bool:
    """True when `node` is an element, and when `tag_names` is given, one of those tags."""
    if not isinstance(node, Element):
        return False
    if tag_names is None:
        return True
    if isinstance(tag_names, str):
        return node.tag_name == tag_names
    return node.tag_name in tag_names


def embedded(node: Node) -> bool:
    """True when `node` is embedded content, like an image or a video."""
    return is_element(node, EMBEDDED_TAGS)


def phrasing(node: Node) -> bool:
    """True when `node` is phrasing content: text and inline, text-level elements."""
    return (
        isinstance(node, Text)
        or is_element(node, PHRASING_TAGS)
        or embedded(node)
        or _is_body_ok_link(node)
        or (is_element(node, "meta") and "itemprop" in node.properties)  # type: ignore
    )


def whitespace(node: Node) -> bool:
    """True when `node` is a text node holding only inter-element whitespace.

    Elements are never whitespace, whatever their content.
    """
    return isinstance(node, Text) and HTML_WHITESPACE_RE.fullmatch(node.value) is not None


def to_string(node: Node) -> str:
    """The text content of `node`: the values of all descendant text nodes, markup ignored."""
    if isinstance(node, Text):
        return node.value
    children = getattr(node, "children", None)
    if children is None:
        return ""
    return "".join(to_string(child) for child in children)


def _is_body_ok_link(node: Node) -> bool:
    if not is_element(node, "link"):
        return False
    assert isinstance(node, Element)
    if "itemprop" in node.properties:
        return True
    rel_values = node.properties.get("rel", "").lower().split()
    return bool(rel_values) and all(rel in BODY_OK_LINK_TYPES for rel in rel_values)
