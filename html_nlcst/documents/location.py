"""Source positions and the document they point into.

A `Point` is one place in a document: a 1-based `line` and `column` and an optional 0-based
`offset`. A `Position` is the span between two points. `Location` converts between offsets and
line/column points for a given document text; `VirtualFile` is that document text together with
the diagnostics collected while processing it.
"""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass, field
from typing import Any, NamedTuple, Optional, Union

from html_nlcst.utils import lazyproperty

LINE_ENDING_RE = re.compile(r"\r\n|\r|\n")


@dataclass
class Point:
    """One place in a source document."""

    line: Optional[int]
    column: Optional[int]
    offset: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        point: dict[str, Any] = {"line": self.line, "column": self.column}
        if self.offset is not None:
            point["offset"] = self.offset
        return point

    @classmethod
    def from_dict(cls, input_dict: dict[str, Any]) -> Point:
        return cls(
            line=input_dict.get("line"),
            column=input_dict.get("column"),
            offset=input_dict.get("offset"),
        )


@dataclass
class Position:
    """The span of a node in a source document, `end` being exclusive."""

    start: Point
    end: Point

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}

    @classmethod
    def from_dict(cls, input_dict: dict[str, Any]) -> Position:
        return cls(
            start=Point.from_dict(input_dict.get("start") or {}),
            end=Point.from_dict(input_dict.get("end") or {}),
        )


class Location:
    """Offset <-> line/column conversion over one document.

    `\\r\\n`, `\\r` and `\\n` all end a line. A conversion that falls outside the document
    produces `None` rather than raising.
    """

    def __init__(self, value: str):
        self._value = value

    def to_point(self, offset: Optional[int]) -> Optional[Point]:
        """Line/column point for `offset`, None when it lies outside `0..len(document)`."""
        if not isinstance(offset, int) or offset < 0 or offset > len(self._value):
            return None

        line_ends = self._line_ends
        index = bisect.bisect_right(line_ends, offset)
        line_start = line_ends[index - 1] if index > 0 else 0

        return Point(line=index + 1, column=offset - line_start + 1, offset=offset)

    def to_offset(self, point: Optional[Point]) -> Optional[int]:
        """Offset of line/column `point`, None when the point is not inside the document."""
        if point is None or not isinstance(point.line, int) or not isinstance(point.column, int):
            return None

        line_ends = self._line_ends
        if point.line < 1 or point.line > len(line_ends):
            return None

        line_start = line_ends[point.line - 2] if point.line > 1 else 0
        offset = line_start + point.column - 1

        return offset if line_start <= offset < line_ends[point.line - 1] else None

    @lazyproperty
    def _line_ends(self) -> list[int]:
        """Offset just past the line-ending of each line.

        The last line has no line-ending; its entry is one past the end of the document so a
        point at the very end of the document still falls on it.
        """
        line_ends = [match.end() for match in LINE_ENDING_RE.finditer(self._value)]
        line_ends.append(len(self._value) + 1)
        return line_ends


class FileMessage(NamedTuple):
    """A diagnostic attached to a `VirtualFile`."""

    reason: str
    place: Optional[Point]
    source: str


@dataclass
class VirtualFile:
    """The full text of one document, its path if it has one, and messages about it.

    `str(file)` is the document text.
    """

    value: Union[str, bytes] = ""
    path: Optional[str] = None
    messages: list[FileMessage] = field(default_factory=list)

    def __post_init__(self):
        if isinstance(self.value, bytes):
            self.value = self.value.decode("utf-8")

    def __str__(self) -> str:
        return str(self.value)

    def message(
        self, reason: str, place: Optional[Point] = None, source: str = "html-nlcst"
    ) -> FileMessage:
        """Record a diagnostic about this file and return it."""
        file_message = FileMessage(reason, place, source)
        self.messages.append(file_message)
        return file_message
