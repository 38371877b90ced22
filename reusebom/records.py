"""Per-file SPDX record and the field updates applied while merging sources."""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .logging import get_logger
from .models import FILE_TYPES, NOASSERTION, SPDX_ID_PREFIX, Checksum
from .tokenizer import TagKind, Token

logger = get_logger("records")

_CHECKSUM_ALGORITHM = "SHA1"


def normalize_path(path: Path | str) -> str:
    """Render ``path`` as a ``./``-prefixed relative POSIX path."""
    text = os.fspath(path)
    if os.path.isabs(text):
        text = os.path.relpath(text)
    text = text.replace(os.sep, "/")
    return text if text.startswith("./") else f"./{text}"


def spdx_id_for(path: Path | str) -> str:
    """Identifier derived from the path exactly as the caller spelled it.

    Only a ``str`` keeps its spelling: ``Path`` collapses ``./`` and repeated
    separators on construction, so a ``Path`` is hashed in that collapsed form.
    """
    spelling = path if isinstance(path, str) else str(path)
    digest = hashlib.sha1(spelling.encode("utf-8")).hexdigest()
    return f"{SPDX_ID_PREFIX}{digest}"


@dataclass
class FileRecord:
    """SPDX file element, built once per path and mutated by the resolver."""

    spdx_id: str
    file_name: str
    checksums: List[Checksum] = field(default_factory=list)
    copyright_text: str = NOASSERTION
    license_concluded: str = NOASSERTION
    license_info_in_files: List[str] = field(default_factory=lambda: [NOASSERTION])
    file_contributors: List[str] = field(default_factory=list)
    attribution_texts: List[str] = field(default_factory=list)
    file_types: List[str] = field(default_factory=list)
    comment: Optional[str] = None
    license_comments: Optional[str] = None
    notice_text: Optional[str] = None

    @classmethod
    def from_path(cls, path: Path | str) -> "FileRecord":
        """Snapshot ``path``: identifier, normalized name and content checksum.

        Raises ``OSError`` when the file cannot be read.
        """
        contents = Path(path).read_bytes()
        return cls(
            spdx_id=spdx_id_for(path),
            file_name=normalize_path(path),
            checksums=[
                Checksum(
                    algorithm=_CHECKSUM_ALGORITHM,
                    checksum_value=hashlib.sha1(contents).hexdigest(),
                )
            ],
        )

    def set_copyright(self, value: str) -> None:
        self.copyright_text = value

    def set_license_concluded(self, value: str) -> None:
        self.license_concluded = value

    def add_license(self, value: str) -> None:
        if NOASSERTION in self.license_info_in_files:
            self.license_info_in_files = [value]
        else:
            self.license_info_in_files.append(value)

    def replace_licenses(self, value: str) -> None:
        self.license_info_in_files = [value]

    def add_contributor(self, value: str) -> None:
        self.file_contributors.append(value)

    def add_attribution_text(self, value: str) -> None:
        self.attribution_texts.append(value)

    def add_file_type(self, value: str) -> None:
        if value.upper() not in FILE_TYPES:
            logger.warning("Unknown SPDX file type %r for %s", value, self.file_name)
        self.file_types.append(value)

    def set_comment(self, value: str) -> None:
        self.comment = value

    def set_license_comments(self, value: str) -> None:
        self.license_comments = value

    def set_notice(self, value: str) -> None:
        self.notice_text = value

    def apply(self, token: Token) -> None:
        """Fold one extracted token into the record."""
        update = _UPDATES.get(token.kind)
        if update is None:
            return
        logger.debug("%s: %s = %r", self.file_name, token.kind.value, token.payload)
        update(self, token.payload)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "SPDXID": self.spdx_id,
            "checksums": [checksum.to_dict() for checksum in self.checksums],
            "fileName": self.file_name,
            "copyrightText": self.copyright_text,
            "licenseConcluded": self.license_concluded,
            "licenseInfoInFiles": list(self.license_info_in_files),
        }
        if self.comment is not None:
            payload["comment"] = self.comment
        if self.notice_text is not None:
            payload["noticeText"] = self.notice_text
        if self.license_comments is not None:
            payload["licenseComments"] = self.license_comments
        payload["fileContributors"] = list(self.file_contributors)
        payload["attributionTexts"] = list(self.attribution_texts)
        payload["fileTypes"] = list(self.file_types)
        return payload


# TagKind.IGNORE has no entry: the line is a directive, not data.
_UPDATES: Dict[TagKind, Callable[[FileRecord, str], None]] = {
    TagKind.COPYRIGHT: FileRecord.set_copyright,
    TagKind.LICENSE: FileRecord.add_license,
    TagKind.LICENSE_INFO_IN_FILE: FileRecord.add_license,
    TagKind.LICENSE_CONCLUDED: FileRecord.set_license_concluded,
    TagKind.CONTRIBUTOR: FileRecord.add_contributor,
    TagKind.ATTRIBUTION_TEXT: FileRecord.add_attribution_text,
    TagKind.TYPE: FileRecord.add_file_type,
    TagKind.COMMENT: FileRecord.set_comment,
    TagKind.LICENSE_COMMENTS: FileRecord.set_license_comments,
    TagKind.NOTICE: FileRecord.set_notice,
}


__all__ = ["FileRecord", "normalize_path", "spdx_id_for"]
