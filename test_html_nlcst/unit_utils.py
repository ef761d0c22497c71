"""Utilities that ease unit-testing."""

from __future__ import annotations

import difflib
import pathlib
from typing import Any, Iterator
from unittest.mock import ANY, Mock, call, patch

from pytest import FixtureRequest, LogCaptureFixture, MonkeyPatch  # noqa: PT013

from html_nlcst.documents.location import VirtualFile
from html_nlcst.documents.nlcst import Node, Parent, RootNode
from html_nlcst.nlp.tokenize import Parser
from html_nlcst.partition.html.convert import to_nlcst
from html_nlcst.partition.html.parser import parse_html
from html_nlcst.staging.base import nlcst_from_json, nlcst_to_json

__all__ = (
    "ANY",
    "FixtureRequest",
    "LogCaptureFixture",
    "Mock",
    "MonkeyPatch",
    "call",
    "function_mock",
)


def assert_round_trips_through_JSON(tree: Node) -> None:
    """Raises AssertionError if `tree -> JSON -> tree -> JSON` are not equal."""
    original_json = nlcst_to_json(tree)
    assert original_json is not None

    round_tripped_json = nlcst_to_json(nlcst_from_json(text=original_json))
    assert round_tripped_json is not None

    assert round_tripped_json == original_json, _diff(
        "JSON differs:", round_tripped_json, original_json
    )


def convert_html(html: str, parser: Any = Parser) -> RootNode:
    """Parse `html` and convert it to a natural-language tree."""
    file = VirtualFile(html)
    return to_nlcst(parse_html(file), file, parser)


def iter_nodes(node: Node) -> Iterator[Node]:
    """`node` and all its descendants, in document order."""
    yield node
    if isinstance(node, Parent):
        for child in node.children:
            yield from iter_nodes(child)


def _diff(heading: str, actual: str, expected: str):
    """Diff of actual compared to expected.

    "+" indicates unexpected lines actual, "-" indicates lines missing from actual.
    """
    expected_lines = expected.splitlines(keepends=True)
    actual_lines = actual.splitlines(keepends=True)
    heading = "diff: '+': unexpected lines in actual, '-': lines missing from actual\n"
    return heading + "".join(difflib.Differ().compare(actual_lines, expected_lines))


def example_doc_path(file_name: str) -> str:
    """Resolve the absolute-path to `file_name` in the example-docs directory."""
    example_docs_dir = pathlib.Path(__file__).parent.parent / "example-docs"
    file_path = example_docs_dir / file_name
    return str(file_path.resolve())


def example_doc_text(file_name: str) -> str:
    """Contents of example-doc `file_name` as text (decoded as utf-8)."""
    with open(example_doc_path(file_name), encoding="utf-8") as f:
        return f.read()


# ------------------------------------------------------------------------------------------------
# MOCKING FIXTURES
# ------------------------------------------------------------------------------------------------
# These allow full-featured and type-safe mocks to be created simply by adding a unit-test
# fixture.
# ------------------------------------------------------------------------------------------------


def function_mock(
    request: FixtureRequest, q_function_name: str, autospec: bool = True, **kwargs: Any
) -> Mock:
    """Return mock patching function with qualified name `q_function_name`.

    Patch is reversed after calling test returns.
    """
    _patch = patch(q_function_name, autospec=autospec, **kwargs)
    request.addfinalizer(_patch.stop)
    return _patch.start()
