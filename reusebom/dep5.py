"""Package-level copyright configuration (Debian DEP5 ``copyright`` format)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from debian import copyright as debian_copyright

from .logging import get_logger

logger = get_logger("dep5")

DEFAULT_PACKAGE_CONFIG_PATH = Path(".reuse/dep5")


class PackageConfigError(RuntimeError):
    """Raised when a package configuration file exists but cannot be parsed."""


@dataclass(frozen=True)
class Stanza:
    """Copyright and license declared for a set of paths (or globally)."""

    copyright: Optional[str] = None
    license: Optional[str] = None


class PackageConfig:
    """Header defaults plus per-path ``Files:`` stanzas of a DEP5 file."""

    def __init__(self, parsed: debian_copyright.Copyright, source: Path) -> None:
        self._parsed = parsed
        self.source = source
        header = parsed.header
        self.header = Stanza(
            copyright=_clean_copyright(header.copyright),
            license=_license_synopsis(header.license),
        )

    def stanza_for(self, normalized_path: str) -> Optional[Stanza]:
        """Return the last ``Files:`` stanza whose globs match the path."""
        lookup = normalized_path[2:] if normalized_path.startswith("./") else normalized_path
        paragraph = self._parsed.find_files_paragraph(lookup)
        if paragraph is None:
            return None
        return Stanza(
            copyright=_clean_copyright(paragraph.copyright),
            license=_license_synopsis(paragraph.license),
        )


def load_package_config(path: Path | str) -> Optional[PackageConfig]:
    """Parse the DEP5 file at ``path``; a missing file yields ``None``."""
    config_path = Path(path)
    if not config_path.is_file():
        logger.debug("No package configuration at %s", config_path)
        return None

    with config_path.open(encoding="utf-8") as handle:
        try:
            parsed = debian_copyright.Copyright(handle)
        except (debian_copyright.Error, ValueError) as exc:
            raise PackageConfigError(f"Failed to parse {config_path}: {exc}") from exc

    logger.debug("Loaded package configuration from %s", config_path)
    return PackageConfig(parsed, config_path)


def _clean_copyright(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    lines = [line.strip() for line in value.splitlines() if line.strip()]
    return "\n".join(lines) or None


def _license_synopsis(value: Optional[debian_copyright.License]) -> Optional[str]:
    if value is None:
        return None
    synopsis = value.synopsis.strip()
    return synopsis or None


__all__ = [
    "DEFAULT_PACKAGE_CONFIG_PATH",
    "PackageConfig",
    "PackageConfigError",
    "Stanza",
    "load_package_config",
]
