import re
from typing import Final

# NOTE - sentence-final punctuation: full stop, exclamation and question marks, horizontal
# ellipsis (U+2026) and interrobang (U+203D), alone or in any combination like "?!" or "...".
TERMINAL_MARKER_PATTERN: Final[str] = r"[!.?…‽]+"
TERMINAL_MARKER_RE = re.compile(TERMINAL_MARKER_PATTERN)

# NOTE - tokens recognized by the default tokenizer, tried in order. Together the alternatives
# match every character so the tokens of a text always concatenate back to that text.
# - a word is a run of letters and digits, optionally joined by inner apostrophes ("don't")
# - whitespace runs are a single token
# - runs of terminal markers are a single token so "..." or "?!" can end a sentence
# - any other character is a token on its own
WORD_PATTERN: Final[str] = r"[^\W_]+(?:['’][^\W_]+)*"
WHITESPACE_PATTERN: Final[str] = r"\s+"
TOKEN_PATTERN: Final[str] = (
    f"{WORD_PATTERN}|{WHITESPACE_PATTERN}|{TERMINAL_MARKER_PATTERN}|[\\W_]"
)

WORD_RE = re.compile(f"^{WORD_PATTERN}$")
WHITESPACE_RE = re.compile(f"^{WHITESPACE_PATTERN}$")

# Helps split text into paragraphs. A blank line, possibly holding other whitespace, separates
# two paragraphs.
PARAGRAPH_SEPARATOR_PATTERN: Final[str] = (
    r"[ \t\f\v]*(?:\r\n|\r|\n)(?:\s*(?:\r\n|\r|\n))+[ \t\f\v]*"
)
PARAGRAPH_SEPARATOR_RE = re.compile(PARAGRAPH_SEPARATOR_PATTERN)
