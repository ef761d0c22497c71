from __future__ import annotations

import dataclasses
import re
import unicodedata
from functools import lru_cache
from itertools import chain
from typing import Callable, Final, List, Optional, Sequence, Tuple, TypeVar

from nltk.tokenize import RegexpTokenizer

from html_nlcst.config import env_config
from html_nlcst.documents.location import Location, Position
from html_nlcst.documents.nlcst import (
    Parent,
    ParagraphNode,
    PunctuationNode,
    RootNode,
    SentenceContent,
    SentenceNode,
    SymbolNode,
    TextNode,
    WhiteSpaceNode,
    WordNode,
    patch_positions,
    to_string,
)
from html_nlcst.nlp.patterns import (
    PARAGRAPH_SEPARATOR_RE,
    TERMINAL_MARKER_RE,
    TOKEN_PATTERN,
    WHITESPACE_RE,
    WORD_RE,
)

CACHE_MAX_SIZE: Final[int] = env_config.TOKENIZE_CACHE_MAX_SIZE

# -- symbols that join the words on either side into one word, like "well-known" or "and/or" --
INNER_WORD_SYMBOLS: Final[frozenset[str]] = frozenset(("-", "/", "&", "_", "'", "’", "@"))

SentencePlugin = Callable[[SentenceNode], None]
ParagraphPlugin = Callable[[ParagraphNode], None]

_ParentT = TypeVar("_ParentT", bound=Parent)

_word_tokenize = RegexpTokenizer(TOKEN_PATTERN).tokenize


@lru_cache(maxsize=CACHE_MAX_SIZE)
def word_tokenize(text: str) -> Tuple[str, ...]:
    """A wrapper around the NLTK regular-expression tokenizer with LRU caching enabled.

    The tokens concatenate back to `text`; whitespace runs are tokens too.
    """
    return tuple(_word_tokenize(text))


def split_node(
    node: _ParentT, child_type: type, expression: re.Pattern[str]
) -> List[_ParentT]:
    """Split `node` into nodes of the same type after each child fully matching `expression`.

    A child ends a group when it is a `child_type` whose whole text matches `expression`. The last
    child always ends a group, so at least one node is produced when `node` has children. Each
    produced node spans from its first child's start to its last child's end.
    """
    result: List[_ParentT] = []
    start = 0

    for index, child in enumerate(node.children):
        if index != len(node.children) - 1 and not (
            isinstance(child, child_type) and expression.fullmatch(to_string(child))
        ):
            continue

        first = node.children[start]
        position = (
            Position(start=first.position.start, end=child.position.end)
            if first.position and child.position
            else None
        )
        result.append(type(node)(children=node.children[start : index + 1], position=position))
        start = index + 1

    return result


def make_paragraph(
    children: Sequence[SentenceContent],
    sentence_plugins: Sequence[SentencePlugin] = (),
    paragraph_plugins: Sequence[ParagraphPlugin] = (),
) -> Optional[ParagraphNode]:
    """Assemble already-positioned sentence content into a paragraph of one or more sentences.

    `children` first becomes one sentence which each of `sentence_plugins` receives. That sentence
    is then split at terminal punctuation and the resulting sentences form the paragraph that each
    of `paragraph_plugins` receives. Produces None when `children` is empty.
    """
    if not children:
        return None

    first, last = children[0], children[-1]
    start = first.position.start if first.position else None
    end = last.position.end if last.position else None

    sentence = SentenceNode(
        children=list(children), position=Position(start, end) if start and end else None
    )
    for sentence_plugin in sentence_plugins:
        sentence_plugin(sentence)

    paragraph = ParagraphNode(
        children=split_node(sentence, PunctuationNode, TERMINAL_MARKER_RE),
        position=(
            Position(dataclasses.replace(start), dataclasses.replace(end))
            if start and end
            else None
        ),
    )
    for paragraph_plugin in paragraph_plugins:
        paragraph_plugin(paragraph)

    return paragraph


# ------------------------------------------------------------------------------------------------
# PLUGINS
# ------------------------------------------------------------------------------------------------


def merge_inner_word_symbol(sentence: SentenceNode) -> None:
    """Join words separated by an inner-word symbol, like "well-known", into one word.

    The symbol becomes a child of the merged word, between the children of the two words.
    """
    children: list[SentenceContent] = []

    for child in sentence.children:
        if (
            isinstance(child, WordNode)
            and len(children) > 1
            and _is_inner_word_symbol(children[-1])
            and isinstance(children[-2], WordNode)
        ):
            symbol = children.pop()
            word = children[-1]
            word.children.extend([symbol, *child.children])
            if word.position and child.position:
                word.position = Position(start=word.position.start, end=child.position.end)
            continue

        children.append(child)

    sentence.children[:] = children


def make_white_space_siblings(paragraph: ParagraphNode) -> None:
    """Move whitespace at the start or end of each sentence out, between the sentences."""
    children: list[object] = []

    for child in paragraph.children:
        if not isinstance(child, SentenceNode):
            children.append(child)
            continue

        head: list[WhiteSpaceNode] = []
        while child.children and isinstance(child.children[0], WhiteSpaceNode):
            head.append(child.children.pop(0))
        tail: list[WhiteSpaceNode] = []
        while child.children and isinstance(child.children[-1], WhiteSpaceNode):
            tail.insert(0, child.children.pop())

        children.extend(head)
        if child.children:
            first, last = child.children[0], child.children[-1]
            if (head or tail) and first.position and last.position:
                child.position = Position(start=first.position.start, end=last.position.end)
            children.append(child)
        children.extend(tail)

    paragraph.children[:] = children


def _is_inner_word_symbol(node: object) -> bool:
    return isinstance(node, (SymbolNode, PunctuationNode)) and node.value in INNER_WORD_SYMBOLS


# ------------------------------------------------------------------------------------------------
# PARSER
# ------------------------------------------------------------------------------------------------


class Parser:
    """Default natural-language tokenizer, suited to English and other Latin-script languages.

    Turns text into words, punctuation, symbols and whitespace. Sentences end at terminal
    punctuation and paragraphs at blank lines. Callers can add their own sentence and paragraph
    plugins; each is called with the assembled node and may change it in place.
    """

    def __init__(self):
        self.tokenize_sentence_plugins: list[SentencePlugin] = [merge_inner_word_symbol]
        self.tokenize_paragraph_plugins: list[ParagraphPlugin] = [make_white_space_siblings]

    def tokenize(self, value: Optional[str]) -> list[SentenceContent]:
        """Sentence content for `value`, without positions."""
        if not value:
            return []
        return [_token_to_node(token) for token in word_tokenize(value)]

    def tokenize_paragraph(self, value: Optional[str]) -> ParagraphNode:
        """One paragraph for `value`, positioned as if `value` were the whole document."""
        value = value or ""
        return self._paragraph(value, Location(value), 0) or ParagraphNode(children=[])

    def parse(self, value: Optional[str]) -> RootNode:
        """A full tree for `value`, which is split into paragraphs at blank lines."""
        value = value or ""
        location = Location(value)
        children: list[object] = []
        start = 0

        for separator in chain(PARAGRAPH_SEPARATOR_RE.finditer(value), [None]):
            end = separator.start() if separator else len(value)
            if paragraph := self._paragraph(value[start:end], location, start):
                children.append(paragraph)
            if separator:
                white_space = WhiteSpaceNode(value=separator.group())
                patch_positions([white_space], location, separator.start())
                children.append(white_space)
                start = separator.end()

        start_point, end_point = location.to_point(0), location.to_point(len(value))
        return RootNode(
            children=children,
            position=Position(start_point, end_point) if start_point and end_point else None,
        )

    def _paragraph(self, text: str, location: Location, offset: int) -> Optional[ParagraphNode]:
        children = self.tokenize(text)
        patch_positions(children, location, offset)
        return make_paragraph(
            children, self.tokenize_sentence_plugins, self.tokenize_paragraph_plugins
        )


def _token_to_node(token: str) -> SentenceContent:
    if WHITESPACE_RE.match(token):
        return WhiteSpaceNode(value=token)
    if WORD_RE.match(token):
        return WordNode(children=[TextNode(value=token)])
    if TERMINAL_MARKER_RE.fullmatch(token) or unicodedata.category(token).startswith("P"):
        return PunctuationNode(value=token)
    return SymbolNode(value=token)
