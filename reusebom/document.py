"""Software bill of materials assembled from resolved file records."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .logging import get_logger
from .models import DOCUMENT_SPDX_ID, Relationship
from .records import FileRecord
from .resolver import SIDECAR_SUFFIX, SourceResolver

logger = get_logger("document")


def _timestamp(moment: datetime) -> str:
    return moment.astimezone(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")


class SoftwareBillOfMaterials:
    """SPDX document listing every added file and a DESCRIBES edge to each."""

    def __init__(
        self,
        name: str,
        tool: str,
        *,
        resolver: Optional[SourceResolver] = None,
        created: Optional[datetime] = None,
    ) -> None:
        self.name = name
        self.tool = tool
        self.created = _timestamp(created or datetime.now(UTC))
        self.files: List[FileRecord] = []
        self.relationships: List[Relationship] = []
        self._resolver = resolver or SourceResolver()

    def add_file(self, path: Path | str) -> Optional[FileRecord]:
        """Resolve ``path`` and append it; sidecar files themselves are skipped."""
        if str(path).endswith(SIDECAR_SUFFIX):
            logger.debug("Skipping sidecar file %s", path)
            return None
        record = self._resolver.resolve(path)
        self.files.append(record)
        self.relationships.append(
            Relationship(spdx_element_id=DOCUMENT_SPDX_ID, related_spdx_element=record.spdx_id)
        )
        return record

    def add_files(self, paths: Iterable[Path | str]) -> None:
        for path in paths:
            self.add_file(path)

    def to_dict(self) -> Dict[str, Any]:
        """SPDX JSON shape of the document.

        ``creationInfo.created`` is an ISO-8601 UTC timestamp truncated to whole
        seconds (``2023-01-01T00:00:00Z``); milliseconds are not emitted.
        """
        return {
            "name": self.name,
            "creationInfo": {
                "created": self.created,
                "creators": [f"Tool: {self.tool}"],
            },
            "files": [record.to_dict() for record in self.files],
            "relationships": [relationship.to_dict() for relationship in self.relationships],
        }

    def to_json(self, *, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


__all__ = ["SoftwareBillOfMaterials"]
