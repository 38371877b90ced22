"""Value types and constants shared across reusebom components."""

from dataclasses import dataclass
from typing import Dict

NOASSERTION = "NOASSERTION"

DOCUMENT_SPDX_ID = "SPDXRef-DOCUMENT"

SPDX_ID_PREFIX = "SPDXRef-"

FILE_TYPES = (
    "SOURCE",
    "BINARY",
    "ARCHIVE",
    "APPLICATION",
    "AUDIO",
    "IMAGE",
    "TEXT",
    "VIDEO",
    "DOCUMENTATION",
    "SPDX",
    "OTHER",
)


@dataclass(frozen=True)
class Checksum:
    """Digest of a file's contents at the time its record was built."""

    algorithm: str
    checksum_value: str

    def to_dict(self) -> Dict[str, str]:
        return {"algorithm": self.algorithm, "checksumValue": self.checksum_value}


@dataclass(frozen=True)
class Relationship:
    """Edge between two SPDX elements of a document."""

    spdx_element_id: str
    related_spdx_element: str
    relationship_type: str = "DESCRIBES"

    def to_dict(self) -> Dict[str, str]:
        return {
            "spdxElementId": self.spdx_element_id,
            "relationshipType": self.relationship_type,
            "relatedSpdxElement": self.related_spdx_element,
        }
