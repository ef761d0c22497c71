"""Test suite for `html_nlcst.nlp.tokenize` module."""

from typing import List

import pytest

from html_nlcst.documents.location import Point, Position
from html_nlcst.documents.nlcst import (
    ParagraphNode,
    PunctuationNode,
    RootNode,
    SentenceNode,
    SymbolNode,
    TextNode,
    WhiteSpaceNode,
    WordNode,
    to_string,
)
from html_nlcst.nlp import tokenize
from html_nlcst.nlp.patterns import TERMINAL_MARKER_RE
from test_html_nlcst.unit_utils import Mock


def mock_word_tokenize(text: str) -> List[str]:
    return text.split(" ")


@pytest.fixture()
def clear_token_cache():
    tokenize.word_tokenize.cache_clear()
    yield
    tokenize.word_tokenize.cache_clear()


def _word(value: str) -> WordNode:
    return WordNode(children=[TextNode(value=value)])


# -- word_tokenize() -----------------------------------------------------------------------------


def test_word_tokenize_caches(monkeypatch, clear_token_cache):
    monkeypatch.setattr(tokenize, "_word_tokenize", mock_word_tokenize)
    assert tokenize.word_tokenize.cache_info().currsize == 0
    tokenize.word_tokenize("Greetings! I am from outer space.")
    assert tokenize.word_tokenize.cache_info().currsize == 1


def test_word_tokenize_splits_words_punctuation_and_whitespace():
    assert tokenize.word_tokenize("Hello, world!") == ("Hello", ",", " ", "world", "!")


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("don't", ("don't",)),
        ("Wait... what?!", ("Wait", "...", " ", "what", "?!")),
        ("a\n\n  b", ("a", "\n\n  ", "b")),
        ("snake_case", ("snake", "_", "case")),
        ("€5", ("€", "5")),
    ],
)
def test_word_tokenize_edge_cases(text: str, expected: tuple):
    assert tokenize.word_tokenize(text) == expected


@pytest.mark.parametrize(
    "text",
    [
        "Hello, world!",
        "  leading and trailing  ",
        "Über naïve café — “quoted” ‽",
        "tabs\tand\r\nnewlines\r",
        "日本語のテキスト。",
    ],
)
def test_word_tokenize_is_lossless(text: str):
    assert "".join(tokenize.word_tokenize(text)) == text


# -- split_node() --------------------------------------------------------------------------------


class DescribeSplitNode:
    """Unit-test suite for `html_nlcst.nlp.tokenize.split_node()`."""

    def it_splits_after_each_matching_child(self):
        sentence = SentenceNode(
            children=[
                _word("One"),
                PunctuationNode(value="."),
                WhiteSpaceNode(value=" "),
                _word("Two"),
                PunctuationNode(value="?!"),
            ]
        )

        sentences = tokenize.split_node(sentence, PunctuationNode, TERMINAL_MARKER_RE)

        assert [to_string(s) for s in sentences] == ["One.", " Two?!"]
        assert all(isinstance(s, SentenceNode) for s in sentences)

    def it_keeps_a_trailing_group_without_a_match(self):
        sentence = SentenceNode(children=[_word("One"), PunctuationNode(value="."), _word("Two")])

        sentences = tokenize.split_node(sentence, PunctuationNode, TERMINAL_MARKER_RE)

        assert [to_string(s) for s in sentences] == ["One.", "Two"]

    def it_only_splits_at_the_given_child_type(self):
        sentence = SentenceNode(children=[_word("a"), SymbolNode(value="."), _word("b")])

        sentences = tokenize.split_node(sentence, PunctuationNode, TERMINAL_MARKER_RE)

        assert len(sentences) == 1

    def it_does_not_split_at_non_terminal_punctuation(self):
        sentence = SentenceNode(children=[_word("a"), PunctuationNode(value=","), _word("b")])

        assert len(tokenize.split_node(sentence, PunctuationNode, TERMINAL_MARKER_RE)) == 1

    @pytest.mark.parametrize("value", [".\n", "!\r\n", ". ", "a."])
    def it_does_not_split_at_punctuation_only_partly_made_of_terminal_markers(self, value: str):
        sentence = SentenceNode(children=[PunctuationNode(value=value), PunctuationNode(value="x")])

        assert len(tokenize.split_node(sentence, PunctuationNode, TERMINAL_MARKER_RE)) == 1

    def it_positions_each_part_from_its_first_and_last_child(self):
        children = [_word("A"), PunctuationNode(value="."), _word("B")]
        for offset, child in enumerate(children):
            start, end = Point(1, offset + 1, offset), Point(1, offset + 2, offset + 1)
            child.position = Position(start, end)

        sentences = tokenize.split_node(
            SentenceNode(children=children), PunctuationNode, TERMINAL_MARKER_RE
        )

        assert sentences[0].position == Position(Point(1, 1, 0), Point(1, 3, 2))
        assert sentences[1].position == Position(Point(1, 3, 2), Point(1, 4, 3))

    def it_produces_nothing_for_a_node_without_children(self):
        assert tokenize.split_node(SentenceNode(), PunctuationNode, TERMINAL_MARKER_RE) == []


# -- make_paragraph() ----------------------------------------------------------------------------


class DescribeMakeParagraph:
    """Unit-test suite for `html_nlcst.nlp.tokenize.make_paragraph()`."""

    def it_produces_nothing_for_empty_content(self):
        assert tokenize.make_paragraph([]) is None

    def it_calls_the_sentence_and_paragraph_plugins(self):
        sentence_plugin, paragraph_plugin = Mock(), Mock()

        paragraph = tokenize.make_paragraph([_word("Hi")], [sentence_plugin], [paragraph_plugin])

        sentence_plugin.assert_called_once()
        assert isinstance(sentence_plugin.call_args.args[0], SentenceNode)
        paragraph_plugin.assert_called_once_with(paragraph)

    def it_gives_the_paragraph_a_copy_of_the_sentence_position(self):
        word = _word("Hi")
        word.position = Position(Point(1, 1, 0), Point(1, 3, 2))
        sentences: list[SentenceNode] = []

        paragraph = tokenize.make_paragraph([word], [sentences.append])

        assert paragraph is not None
        assert paragraph.position == sentences[0].position
        assert paragraph.position.start is not sentences[0].position.start

    def it_leaves_the_paragraph_unpositioned_when_its_content_has_no_position(self):
        paragraph = tokenize.make_paragraph([_word("Hi")])

        assert paragraph is not None
        assert paragraph.position is None
        assert paragraph.children[0].position is None


# -- plugins -------------------------------------------------------------------------------------


def test_merge_inner_word_symbol_joins_hyphenated_words():
    sentence = SentenceNode(
        children=[
            _word("well"),
            PunctuationNode(value="-"),
            _word("known"),
            WhiteSpaceNode(value=" "),
        ]
    )

    tokenize.merge_inner_word_symbol(sentence)

    assert len(sentence.children) == 2
    word = sentence.children[0]
    assert isinstance(word, WordNode)
    assert [type(child) for child in word.children] == [TextNode, PunctuationNode, TextNode]
    assert to_string(word) == "well-known"


def test_merge_inner_word_symbol_leaves_other_symbols_alone():
    sentence = SentenceNode(children=[_word("a"), PunctuationNode(value=","), _word("b")])

    tokenize.merge_inner_word_symbol(sentence)

    assert len(sentence.children) == 3


def test_make_white_space_siblings_moves_edge_whitespace_out_of_sentences():
    paragraph = ParagraphNode(
        children=[
            SentenceNode(
                children=[WhiteSpaceNode(value=" "), _word("a"), PunctuationNode(value=".")]
            ),
            SentenceNode(children=[WhiteSpaceNode(value="\n")]),
        ]
    )

    tokenize.make_white_space_siblings(paragraph)

    assert [type(child) for child in paragraph.children] == [
        WhiteSpaceNode,
        SentenceNode,
        WhiteSpaceNode,
    ]
    assert to_string(paragraph) == " a.\n"


# -- Parser --------------------------------------------------------------------------------------


class DescribeParser:
    """Unit-test suite for `html_nlcst.nlp.tokenize.Parser` objects."""

    def it_has_default_plugins(self):
        parser = tokenize.Parser()

        assert parser.tokenize_sentence_plugins == [tokenize.merge_inner_word_symbol]
        assert parser.tokenize_paragraph_plugins == [tokenize.make_white_space_siblings]

    def it_does_not_share_plugin_lists_between_instances(self):
        parser = tokenize.Parser()
        parser.tokenize_sentence_plugins.append(Mock())

        assert len(tokenize.Parser().tokenize_sentence_plugins) == 1

    def it_tokenizes_text_into_unpositioned_sentence_content(self):
        nodes = tokenize.Parser().tokenize("Hi, you $5.")

        assert [type(node) for node in nodes] == [
            WordNode,
            PunctuationNode,
            WhiteSpaceNode,
            WordNode,
            WhiteSpaceNode,
            SymbolNode,
            WordNode,
            PunctuationNode,
        ]
        assert all(node.position is None for node in nodes)
        assert to_string(nodes) == "Hi, you $5."

    @pytest.mark.parametrize("value", ["", None])
    def it_tokenizes_nothing_to_nothing(self, value):
        assert tokenize.Parser().tokenize(value) == []

    def it_tokenizes_a_paragraph(self):
        paragraph = tokenize.Parser().tokenize_paragraph("One. Two")

        assert isinstance(paragraph, ParagraphNode)
        assert [type(child) for child in paragraph.children] == [
            SentenceNode,
            WhiteSpaceNode,
            SentenceNode,
        ]
        assert paragraph.position == Position(Point(1, 1, 0), Point(1, 9, 8))

    def it_parses_text_into_paragraphs_at_blank_lines(self):
        root = tokenize.Parser().parse("One.\n\nTwo.")

        assert isinstance(root, RootNode)
        assert [type(child) for child in root.children] == [
            ParagraphNode,
            WhiteSpaceNode,
            ParagraphNode,
        ]
        assert root.children[1].position == Position(Point(1, 5, 4), Point(3, 1, 6))
        assert root.children[2].position == Position(Point(3, 1, 6), Point(3, 5, 10))
        assert root.position == Position(Point(1, 1, 0), Point(3, 5, 10))
        assert to_string(root) == "One.\n\nTwo."

    def it_parses_the_empty_string_to_an_empty_root(self):
        root = tokenize.Parser().parse("")

        assert root.children == []
        assert root.position == Position(Point(1, 1, 0), Point(1, 1, 0))
