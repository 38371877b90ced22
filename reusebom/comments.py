"""Comment block extraction backed by Pygments lexers."""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from pygments.lexer import Lexer
from pygments.lexers import get_lexer_for_filename
from pygments.token import Comment
from pygments.util import ClassNotFound

DEFAULT_MAX_LINES = 50

# Token types lexers file under Comment that never hold header text.
_SKIPPED_COMMENT_TYPES = (Comment.Preproc, Comment.PreprocFile, Comment.Hashbang)

_LEADING_DELIMITER = re.compile(r"^\s*(?:/\*+|\*+|//+|#+|<!--|--+|;+|%+)\s?")
_TRAILING_DELIMITER = re.compile(r"\s*(?:\*+/|-->)\s*$")

# Lexers that match a file name but never emit comment tokens; HTML comments
# in Markdown come through as plain text.
_COMMENTLESS_ALIASES = frozenset({"text", "markdown"})


class CommentFormat(str, Enum):
    SINGLE_LINE = "single-line"
    MULTI_LINE = "multi-line"


@dataclass(frozen=True)
class CommentLine:
    """One physical line of a comment, delimiters removed."""

    line: int
    start: int
    end: int
    value: str


@dataclass
class CommentBlock:
    """A run of comment lines that belong together."""

    format: CommentFormat
    lines: List[CommentLine] = field(default_factory=list)

    @property
    def contents(self) -> List[str]:
        return [line.value for line in self.lines]

    @classmethod
    def from_text(cls, text: str) -> "CommentBlock":
        """Treat every line of ``text`` as part of a single comment block."""
        lines = [
            CommentLine(line=number, start=0, end=len(value), value=value)
            for number, value in enumerate(text.splitlines())
        ]
        return cls(format=CommentFormat.MULTI_LINE, lines=lines)


def _lexer_for(path: Path | str) -> Optional[Lexer]:
    try:
        lexer = get_lexer_for_filename(Path(path).name)
    except ClassNotFound:
        return None
    if _COMMENTLESS_ALIASES.intersection(lexer.aliases):
        return None
    return lexer


def is_supported(path: Path | str) -> bool:
    """Return True when a lexer exists for the file name."""
    return _lexer_for(path) is not None


def read_text(path: Path | str) -> str:
    """Read a file as UTF-8, replacing undecodable bytes."""
    return Path(path).read_bytes().decode("utf-8", errors="replace")


def extract_comments(
    path: Path | str, *, max_lines: int = DEFAULT_MAX_LINES
) -> Iterator[CommentBlock]:
    """Yield the comment blocks found in the first ``max_lines`` lines of ``path``.

    Files without a matching lexer produce nothing; callers decide how to fall
    back via :func:`is_supported`.
    """
    lexer = _lexer_for(path)
    if lexer is None:
        return
    text = read_text(path)
    line_starts = _line_starts(text)

    pending: Optional[CommentBlock] = None
    for span in _comment_spans(lexer, text):
        if span is None:
            if pending is not None:
                yield pending
                pending = None
            continue

        offset, value, multiline = span
        lines = _split_lines(offset, value, line_starts)
        if not lines:
            continue
        if lines[0].line >= max_lines:
            break

        if multiline:
            if pending is not None:
                yield pending
                pending = None
            yield CommentBlock(format=CommentFormat.MULTI_LINE, lines=lines)
            continue

        if pending is not None and lines[0].line == pending.lines[-1].line + 1:
            pending.lines.extend(lines)
        else:
            if pending is not None:
                yield pending
            pending = CommentBlock(format=CommentFormat.SINGLE_LINE, lines=lines)

    if pending is not None:
        yield pending


def _is_comment(token_type) -> bool:  # type: ignore[no-untyped-def]
    if token_type not in Comment:
        return False
    return not any(token_type in skipped for skipped in _SKIPPED_COMMENT_TYPES)


def _comment_spans(
    lexer: Lexer, text: str
) -> Iterator[Optional[Tuple[int, str, bool]]]:
    """Yield ``(offset, text, multiline)`` per comment, ``None`` where code intervenes.

    Lexers with nested comment states emit one multi-line comment as several
    adjoining tokens; those are merged back together.
    """
    current: Optional[List] = None
    for index, token_type, value in lexer.get_tokens_unprocessed(text):
        if _is_comment(token_type):
            multiline = token_type in Comment.Multiline
            if (
                current is not None
                and multiline
                and current[2]
                and current[0] + len(current[1]) == index
            ):
                current[1] += value
                continue
            if current is not None:
                yield current[0], current[1], current[2]
            current = [index, value, multiline]
            continue

        if current is not None:
            yield current[0], current[1], current[2]
            current = None
        if value.strip():
            yield None

    if current is not None:
        yield current[0], current[1], current[2]


def _line_starts(text: str) -> List[int]:
    starts = [0]
    for match in re.finditer("\n", text):
        starts.append(match.end())
    return starts


def _split_lines(offset: int, value: str, line_starts: Sequence[int]) -> List[CommentLine]:
    lines: List[CommentLine] = []
    cursor = offset
    for raw in value.rstrip("\r\n").split("\n"):
        number = bisect_right(line_starts, cursor) - 1
        column = cursor - line_starts[number]
        next_cursor = cursor + len(raw) + 1
        raw = raw.rstrip("\r")
        cleaned = _LEADING_DELIMITER.sub("", _TRAILING_DELIMITER.sub("", raw), count=1)
        lines.append(
            CommentLine(line=number, start=column, end=column + len(raw), value=cleaned.strip())
        )
        cursor = next_cursor
    return lines


__all__ = [
    "CommentBlock",
    "CommentFormat",
    "CommentLine",
    "DEFAULT_MAX_LINES",
    "extract_comments",
    "is_supported",
    "read_text",
]
