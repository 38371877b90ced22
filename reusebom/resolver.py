"""Merge package configuration, sidecar files and header comments into records."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from . import comments
from .dep5 import DEFAULT_PACKAGE_CONFIG_PATH, PackageConfig, Stanza, load_package_config
from .logging import get_logger
from .records import FileRecord
from .tokenizer import extract_tokens

logger = get_logger("resolver")

SIDECAR_SUFFIX = ".license"

_UNLOADED = object()


def sidecar_path(path: Path | str) -> Path:
    return Path(f"{path}{SIDECAR_SUFFIX}")


class SourceResolver:
    """Builds one :class:`FileRecord` per path from up to three sources.

    Sources are applied in a fixed order and every later write to a
    single-valued field replaces the earlier one, so header comments win over
    a ``<file>.license`` sidecar, which wins over the package configuration.
    List fields accumulate across all sources in the same order.
    """

    def __init__(
        self,
        package_config_path: Path | str | None = DEFAULT_PACKAGE_CONFIG_PATH,
        *,
        max_lines: int = comments.DEFAULT_MAX_LINES,
    ) -> None:
        self.package_config_path = Path(package_config_path) if package_config_path else None
        self.max_lines = max_lines
        self._package_config: object = _UNLOADED

    @property
    def package_config(self) -> Optional[PackageConfig]:
        if self._package_config is _UNLOADED:
            if self.package_config_path is None:
                self._package_config = None
            else:
                self._package_config = load_package_config(self.package_config_path)
        return self._package_config  # type: ignore[return-value]

    def resolve(self, path: Path | str) -> FileRecord:
        """Return the merged record for ``path``; ``OSError`` if it is unreadable."""
        record = FileRecord.from_path(path)
        self._apply_package_config(record)
        self._apply_sidecar(record, path)
        self._apply_embedded(record, path)
        return record

    def _apply_package_config(self, record: FileRecord) -> None:
        config = self.package_config
        if config is None:
            return
        _apply_stanza(record, config.header)
        stanza = config.stanza_for(record.file_name)
        if stanza is not None:
            logger.debug("%s: matched package configuration stanza", record.file_name)
            _apply_stanza(record, stanza)

    def _apply_sidecar(self, record: FileRecord, path: Path | str) -> None:
        sidecar = sidecar_path(path)
        if not sidecar.is_file():
            return
        logger.debug("%s: reading sidecar %s", record.file_name, sidecar)
        block = comments.CommentBlock.from_text(comments.read_text(sidecar))
        for token in extract_tokens(block):
            record.apply(token)

    def _apply_embedded(self, record: FileRecord, path: Path | str) -> None:
        if not comments.is_supported(path):
            logger.debug("%s: unrecognised syntax, scanning as plain text", record.file_name)
            block = comments.CommentBlock.from_text(comments.read_text(path))
            for token in extract_tokens(block):
                record.apply(token)
            return

        for block in comments.extract_comments(path, max_lines=self.max_lines):
            for token in extract_tokens(block):
                record.apply(token)


def _apply_stanza(record: FileRecord, stanza: Stanza) -> None:
    if stanza.copyright is not None:
        record.set_copyright(stanza.copyright)
    if stanza.license is not None:
        record.replace_licenses(stanza.license)


__all__ = ["SIDECAR_SUFFIX", "SourceResolver", "sidecar_path"]
