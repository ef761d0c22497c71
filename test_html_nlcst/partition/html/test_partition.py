# pyright: reportPrivateUsage=false

"""Test suite for `html_nlcst.partition.html.partition` module."""

from __future__ import annotations

import io
import pathlib
from typing import Any

import pytest

from html_nlcst.documents.nlcst import RootNode, to_string
from html_nlcst.nlp.tokenize import Parser
from html_nlcst.partition.html import partition_html
from html_nlcst.partition.html.partition import HtmlPartitionerOptions
from test_html_nlcst.unit_utils import (
    FixtureRequest,
    Mock,
    assert_round_trips_through_JSON,
    example_doc_path,
    example_doc_text,
    function_mock,
)

EXPECTED_IMPLICIT_PARAGRAPHS = [
    "Before the heading.",
    "Heading",
    "After the heading, with emphasis.",
    "Inside a section.",
]


def _paragraph_texts(root: RootNode) -> list[str]:
    return [to_string(paragraph).strip() for paragraph in root.children]


# ================================================================================================
# SOURCE HTML LOADING BEHAVIORS
# ================================================================================================

# -- document-source (filename, file, text, url) -------------------------------------------------


def test_partition_html_accepts_a_file_path():
    root = partition_html(example_doc_path("implicit-paragraphs.html"))

    assert isinstance(root, RootNode)
    assert _paragraph_texts(root) == EXPECTED_IMPLICIT_PARAGRAPHS


def test_partition_html_accepts_a_file_like_object():
    with open(example_doc_path("implicit-paragraphs.html"), "rb") as f:
        root = partition_html(file=f)

    assert _paragraph_texts(root) == EXPECTED_IMPLICIT_PARAGRAPHS


def test_partition_html_accepts_an_html_str():
    root = partition_html(text=example_doc_text("implicit-paragraphs.html"))
    assert _paragraph_texts(root) == EXPECTED_IMPLICIT_PARAGRAPHS


def test_partition_html_accepts_a_url_to_an_HTML_document(requests_get_: Mock):
    requests_get_.return_value = FakeResponse(
        text=example_doc_text("implicit-paragraphs.html"),
        status_code=200,
        headers={"Content-Type": "text/html; charset=utf-8"},
    )

    root = partition_html(url="https://fake.url")

    requests_get_.assert_called_once_with(
        "https://fake.url", headers={}, verify=True, timeout=10.0
    )
    assert _paragraph_texts(root) == EXPECTED_IMPLICIT_PARAGRAPHS


def test_partition_html_raises_when_no_path_or_file_or_text_or_url_is_specified():
    with pytest.raises(ValueError, match="Exactly one of filename, file, text and url must be sp"):
        partition_html()


def test_partition_html_raises_when_more_than_one_source_is_specified():
    with pytest.raises(ValueError, match="Exactly one of filename, file, text and url must be sp"):
        partition_html(example_doc_path("implicit-paragraphs.html"), text="<p>x</p>")


@pytest.mark.parametrize("text", ["", "  \n "])
def test_partition_html_converts_a_blank_document_to_an_empty_tree(text: str):
    root = partition_html(text=text)

    assert root.children == []
    assert root.position is not None
    assert root.position.end.offset == len(text)


# -- encoding for filename and file --------------------------------------------------------------


def test_partition_html_decodes_a_file_with_an_explicit_encoding():
    root = partition_html(example_doc_path("fr-latin1.html"), encoding="latin-1")
    assert _paragraph_texts(root) == ["Un café très crémeux, s'il vous plaît."]


def test_partition_html_decodes_a_utf_16_file(tmp_path: pathlib.Path):
    file_path = tmp_path / "utf-16.html"
    file_path.write_bytes("<p>Grüße aus Köln.</p>".encode("utf-16"))

    root = partition_html(str(file_path))

    assert _paragraph_texts(root) == ["Grüße aus Köln."]


def test_partition_html_decodes_a_file_like_object_with_an_explicit_encoding():
    file = io.BytesIO("<p>Ça va ?</p>".encode("latin-1"))

    root = partition_html(file=file, encoding="iso-8859-1")

    assert _paragraph_texts(root) == ["Ça va ?"]


# -- other arguments -----------------------------------------------------------------------------


def test_partition_html_accepts_a_parser_instance():
    parser = Parser()
    parser.tokenize_paragraph_plugins.append(lambda paragraph: paragraph.data.update(seen=True))

    root = partition_html(text="<p>Hello there.</p>", parser=parser)

    assert root.children[0].data == {"seen": True}


def test_partition_html_positions_nodes_in_the_loaded_document():
    root = partition_html(example_doc_path("implicit-paragraphs.html"))
    document = example_doc_text("implicit-paragraphs.html")

    heading = root.children[1]
    start, end = heading.position.start.offset, heading.position.end.offset
    assert document[start:end] == "Heading"


def test_partition_html_output_round_trips_through_JSON():
    assert_round_trips_through_JSON(partition_html(example_doc_path("article.html")))


# -- URL fetching --------------------------------------------------------------------------------


def test_partition_html_from_url_raises_on_failure_response_status_code(requests_get_: Mock):
    requests_get_.return_value = FakeResponse(
        text=example_doc_text("implicit-paragraphs.html"),
        status_code=500,
        headers={"Content-Type": "text/html"},
    )

    with pytest.raises(ValueError, match="Error status code on GET of provided URL: 500"):
        partition_html(url="https://fake.url")


def test_partition_html_from_url_raises_on_response_of_wrong_content_type(requests_get_: Mock):
    requests_get_.return_value = FakeResponse(
        text=example_doc_text("implicit-paragraphs.html"),
        status_code=200,
        headers={"Content-Type": "application/json"},
    )

    with pytest.raises(ValueError, match="Expected content type text/html. Got application/json"):
        partition_html(url="https://fake.url")


def test_partition_from_url_includes_provided_headers_in_request(requests_get_: Mock):
    requests_get_.return_value = FakeResponse(
        text="<p>x</p>", status_code=200, headers={"Content-Type": "text/html"}
    )

    partition_html(url="https://example.com", headers={"User-Agent": "test"}, ssl_verify=False)

    requests_get_.assert_called_once_with(
        "https://example.com", headers={"User-Agent": "test"}, verify=False, timeout=10.0
    )


def test_partition_from_url_reads_defaults_from_the_environment(
    requests_get_: Mock, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.setenv("HTTP_SSL_VERIFY", "false")
    monkeypatch.setenv("HTTP_TIMEOUT", "3")
    requests_get_.return_value = FakeResponse(
        text="<p>x</p>", status_code=200, headers={"Content-Type": "text/html"}
    )

    partition_html(url="https://example.com")

    requests_get_.assert_called_once_with(
        "https://example.com", headers={}, verify=False, timeout=3.0
    )


# ================================================================================================
# ISOLATED UNIT TESTS
# ================================================================================================


class DescribeHtmlPartitionerOptions:
    """Unit-test suite for `html_nlcst.partition.html.partition.HtmlPartitionerOptions`."""

    def it_loads_the_html_text_from_a_file_path(self, opts_args: dict[str, Any]):
        opts_args["file_path"] = example_doc_path("implicit-paragraphs.html")
        opts = HtmlPartitionerOptions(**opts_args)

        assert opts.html_text == example_doc_text("implicit-paragraphs.html")
        assert opts.source_path == opts_args["file_path"]

    def it_loads_the_html_text_from_a_str(self, opts_args: dict[str, Any]):
        opts_args["text"] = "<p>x</p>"
        opts = HtmlPartitionerOptions(**opts_args)

        assert opts.html_text == "<p>x</p>"
        assert opts.source_path is None

    def it_provides_a_virtual_file_named_for_its_source(self, opts_args: dict[str, Any]):
        opts_args["file_path"] = example_doc_path("implicit-paragraphs.html")
        opts = HtmlPartitionerOptions(**opts_args)

        virtual_file = opts.virtual_file

        assert str(virtual_file) == example_doc_text("implicit-paragraphs.html")
        assert virtual_file.path == opts_args["file_path"]
        assert virtual_file.messages == []

    def it_names_a_fetched_document_for_its_url(
        self, opts_args: dict[str, Any], requests_get_: Mock
    ):
        requests_get_.return_value = FakeResponse(
            text="<p>x</p>", status_code=200, headers={"Content-Type": "text/html"}
        )
        opts_args["url"] = "https://example.com/page.html"
        opts = HtmlPartitionerOptions(**opts_args)

        assert opts.virtual_file.path == "https://example.com/page.html"
        assert str(opts.virtual_file) == "<p>x</p>"

    def it_fetches_only_once(self, opts_args: dict[str, Any], requests_get_: Mock):
        requests_get_.return_value = FakeResponse(
            text="<p>x</p>", status_code=200, headers={"Content-Type": "text/html"}
        )
        opts_args["url"] = "https://example.com"
        opts = HtmlPartitionerOptions(**opts_args)

        assert opts.html_text == "<p>x</p>"
        assert str(opts.virtual_file) == "<p>x</p>"
        requests_get_.assert_called_once()


# ================================================================================================
# MODULE-LEVEL FIXTURES
# ================================================================================================


class FakeResponse:
    def __init__(self, text: str, status_code: int, headers: dict[str, str] = {}):
        self.text = text
        self.status_code = status_code
        self.ok = status_code < 300
        self.headers = headers


@pytest.fixture
def opts_args() -> dict[str, Any]:
    """All default arguments for `HtmlPartitionerOptions`.

    Individual argument values can be changed to suit each test. Makes construction of opts more
    compact for testing purposes.
    """
    return {
        "file": None,
        "file_path": None,
        "text": None,
        "encoding": None,
        "url": None,
        "headers": {},
        "ssl_verify": True,
    }


@pytest.fixture
def requests_get_(request: FixtureRequest):
    return function_mock(request, "html_nlcst.partition.html.partition.requests.get")
