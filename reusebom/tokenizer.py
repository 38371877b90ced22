"""Recognition of SPDX/REUSE tags inside comment text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Optional, Pattern, Tuple, Union

from .comments import CommentBlock


class TagKind(str, Enum):
    """Metadata fields recognised in file headers, in matching order."""

    COPYRIGHT = "copyright"
    LICENSE = "license"
    ATTRIBUTION_TEXT = "attributionText"
    COMMENT = "comment"
    CONTRIBUTOR = "contributor"
    LICENSE_COMMENTS = "licenseComments"
    LICENSE_CONCLUDED = "licenseConcluded"
    LICENSE_INFO_IN_FILE = "licenseInfoInFile"
    NOTICE = "notice"
    TYPE = "type"
    IGNORE = "ignore"


_TAG_SPELLINGS: Tuple[Tuple[TagKind, str], ...] = (
    (TagKind.COPYRIGHT, "SPDX-FileCopyrightText:"),
    (TagKind.LICENSE, "SPDX-License-Identifier:"),
    (TagKind.ATTRIBUTION_TEXT, "SPDX-FileAttributionText:"),
    (TagKind.COMMENT, "SPDX-FileComment:"),
    (TagKind.CONTRIBUTOR, "SPDX-FileContributor:"),
    (TagKind.LICENSE_COMMENTS, "SPDX-LicenseComments:"),
    (TagKind.LICENSE_CONCLUDED, "SPDX-LicenseConcluded:"),
    (TagKind.LICENSE_INFO_IN_FILE, "SPDX-LicenseInfoInFile:"),
    (TagKind.NOTICE, "SPDX-FileNotice:"),
    (TagKind.TYPE, "SPDX-FileType:"),
)

_TAG_PATTERNS: Tuple[Tuple[TagKind, Pattern[str]], ...] = tuple(
    (kind, re.compile(re.escape(spelling), re.IGNORECASE)) for kind, spelling in _TAG_SPELLINGS
)

_IGNORE_MARKER = re.compile(r"REUSE-Ignore(?:Start|End)", re.IGNORECASE)


@dataclass(frozen=True)
class Token:
    kind: TagKind
    payload: str


def tokenize(line: str) -> Optional[Token]:
    """Return the first tag found on ``line``, or None for ordinary prose.

    The payload is whatever follows the matched tag's delimiter, trimmed. An
    ignore marker hides every tag that starts after it on the same line.
    """
    marker = _IGNORE_MARKER.search(line)
    end = len(line) if marker is None else marker.start()
    for kind, pattern in _TAG_PATTERNS:
        match = pattern.search(line, 0, end)
        if match is not None:
            return Token(kind=kind, payload=line[match.end():].strip())
    if marker is not None:
        return Token(kind=TagKind.IGNORE, payload="")
    return None


def extract_tokens(block: Union[CommentBlock, Iterable[str]]) -> Iterator[Token]:
    """Lazily tokenize every line of a comment block, in line order."""
    lines = block.contents if isinstance(block, CommentBlock) else block
    for line in lines:
        token = tokenize(line)
        if token is not None:
            yield token


__all__ = ["TagKind", "Token", "extract_tokens", "tokenize"]
