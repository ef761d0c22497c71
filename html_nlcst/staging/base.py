from __future__ import annotations

import json
from typing import Any, Optional

from html_nlcst.documents.hast import Comment, Doctype, Element, Node, Root, Text
from html_nlcst.documents.location import Position
from html_nlcst.documents.nlcst import NODE_TYPE_TO_CLASS_MAP, Literal, Parent
from html_nlcst.documents.nlcst import Node as NlcstNode
from html_nlcst.utils import exactly_one

# ================================================================================================
# SERIALIZATION/DESERIALIZATION (SERDE) RELATED FUNCTIONS
# ================================================================================================
# Both trees serialize to the JSON shape shared by the unist family of syntax trees: a `type`,
# then `children` for parents or `value` for literals, and a `position` when the node has one.
# ================================================================================================

# == NATURAL-LANGUAGE TREE =======================


def nlcst_to_dict(node: NlcstNode) -> dict[str, Any]:
    """Convert a natural-language node, and its descendants, to a JSON-compatible dict."""
    node_dict: dict[str, Any] = {"type": node.type}

    if isinstance(node, Parent):
        node_dict["children"] = [nlcst_to_dict(child) for child in node.children]
    elif isinstance(node, Literal):
        node_dict["value"] = node.value

    if node.position is not None:
        node_dict["position"] = node.position.to_dict()
    if node.data:
        node_dict["data"] = dict(node.data)

    return node_dict


def nlcst_from_dict(node_dict: dict[str, Any]) -> NlcstNode:
    """Restore a natural-language node from its dict form."""
    node_type = node_dict.get("type")
    if node_type not in NODE_TYPE_TO_CLASS_MAP:
        raise ValueError(f"Unknown natural-language node type: {node_type!r}")

    NodeCls = NODE_TYPE_TO_CLASS_MAP[node_type]
    position = _position_from_dict(node_dict.get("position"))
    data = dict(node_dict.get("data") or {})

    if issubclass(NodeCls, Parent):
        children = [nlcst_from_dict(child) for child in node_dict.get("children", [])]
        return NodeCls(children=children, position=position, data=data)

    return NodeCls(value=node_dict.get("value", ""), position=position, data=data)  # type: ignore


def nlcst_to_json(
    node: NlcstNode,
    filename: Optional[str] = None,
    indent: int = 2,
    encoding: str = "utf-8",
) -> Optional[str]:
    """Saves a natural-language tree to a JSON file if filename is specified.

    Otherwise, return the tree as a string.
    """
    node_json = json.dumps(nlcst_to_dict(node), ensure_ascii=False, indent=indent)

    if filename is not None:
        with open(filename, "w", encoding=encoding) as f:
            f.write(node_json)
        return None

    return node_json


def nlcst_from_json(text: str = "", filename: str = "", encoding: str = "utf-8") -> NlcstNode:
    """Loads a natural-language tree from a JSON string or file."""
    exactly_one(text=text, filename=filename)

    if filename:
        with open(filename, encoding=encoding) as f:
            node_dict = json.load(f)
    else:
        node_dict = json.loads(text)

    return nlcst_from_dict(node_dict)


# == HTML TREE ===================================


def hast_to_dict(node: Node) -> dict[str, Any]:
    """Convert an HTML node, and its descendants, to a hast-compatible dict."""
    node_dict: dict[str, Any] = {"type": node.type}

    if isinstance(node, Element):
        node_dict["tagName"] = node.tag_name
        node_dict["properties"] = dict(node.properties)
    if isinstance(node, (Text, Comment)):
        node_dict["value"] = node.value
    if isinstance(node, (Root, Element)):
        node_dict["children"] = [hast_to_dict(child) for child in node.children]

    if node.position is not None:
        node_dict["position"] = node.position.to_dict()

    return node_dict


def hast_from_dict(node_dict: dict[str, Any]) -> Node:
    """Build an HTML tree from hast JSON, like the output of other hast-producing parsers.

    Property values are stored as attribute text: a list (like a `className`) is space-joined
    and `True` becomes the empty string, as in markup.
    """
    node_type = node_dict.get("type")
    position = _position_from_dict(node_dict.get("position"))

    if node_type == "root":
        return Root(children=_hast_children(node_dict), position=position)
    if node_type == "element":
        return Element(
            tag_name=node_dict.get("tagName", ""),
            properties={
                name: _property_text(value)
                for name, value in (node_dict.get("properties") or {}).items()
                if value is not None and value is not False
            },
            children=_hast_children(node_dict),  # type: ignore[arg-type]
            position=position,
        )
    if node_type == "text":
        return Text(node_dict.get("value", ""), position=position)
    if node_type == "comment":
        return Comment(node_dict.get("value", ""), position=position)
    if node_type == "doctype":
        return Doctype(position=position)

    raise ValueError(f"Unknown HTML node type: {node_type!r}")


def _hast_children(node_dict: dict[str, Any]) -> list[Any]:
    return [hast_from_dict(child) for child in node_dict.get("children", [])]


def _position_from_dict(position_dict: Optional[dict[str, Any]]) -> Optional[Position]:
    return Position.from_dict(position_dict) if position_dict else None


def _property_text(value: Any) -> str:
    if value is True:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value)
    return str(value)
