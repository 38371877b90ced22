"""Expansion of directories into the file paths a document should describe."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Iterator, List, NamedTuple, Optional, Pattern, Sequence

from .resolver import SIDECAR_SUFFIX

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".reuse",
    "LICENSES",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
}

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}


class _IgnorePattern(NamedTuple):
    regex: Pattern[str]
    negate: bool
    directory_only: bool


def _glob_to_regex(glob: str) -> str:
    parts: List[str] = []
    index = 0
    while index < len(glob):
        if glob.startswith("**/", index):
            parts.append("(?:.*/)?")
            index += 3
        elif glob.startswith("**", index):
            parts.append(".*")
            index += 2
        elif glob[index] == "*":
            parts.append("[^/]*")
            index += 1
        elif glob[index] == "?":
            parts.append("[^/]")
            index += 1
        else:
            parts.append(re.escape(glob[index]))
            index += 1
    return "".join(parts)


def _compile_pattern(line: str) -> Optional[_IgnorePattern]:
    """Compile one gitignore-style line; blank lines and comments yield None.

    Patterns containing a slash are anchored at the scan root, the others
    match the last component of a path.
    """
    text = line.strip()
    if not text or text.startswith("#"):
        return None
    negate = text.startswith("!")
    if negate:
        text = text[1:]
    directory_only = text.endswith("/")
    text = text.rstrip("/")
    if not text:
        return None
    prefix = "^" if "/" in text else "(?:^|/)"
    regex = re.compile(f"{prefix}{_glob_to_regex(text.lstrip('/'))}$")
    return _IgnorePattern(regex=regex, negate=negate, directory_only=directory_only)


def _load_patterns(root: Path, exclude_paths: Sequence[str]) -> List[_IgnorePattern]:
    lines: List[str] = []
    gitignore = root / ".gitignore"
    if gitignore.is_file():
        lines.extend(gitignore.read_text(encoding="utf-8").splitlines())
    lines.extend(exclude_paths)
    return [pattern for pattern in map(_compile_pattern, lines) if pattern is not None]


def _is_ignored(rel_path: str, is_dir: bool, patterns: Sequence[_IgnorePattern]) -> bool:
    # The last matching pattern decides, so "!" lines can re-include paths.
    ignored = False
    for pattern in patterns:
        if pattern.directory_only and not is_dir:
            continue
        if pattern.regex.search(rel_path):
            ignored = not pattern.negate
    return ignored


def iter_files(root: Path | str, exclude_paths: Sequence[str] = ()) -> Iterator[str]:
    """Yield root-relative POSIX paths of describable files, sorted per directory.

    ``*.license`` sidecars are never yielded: they annotate other files.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        raise NotADirectoryError(f"Not a directory: {root}")

    patterns = _load_patterns(root_path, exclude_paths)

    for dirpath, dirnames, filenames in os.walk(root_path):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root_path).as_posix() if current_dir != root_path else ""

        kept_dirs = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _is_ignored(rel_path, True, patterns):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for filename in sorted(filenames):
            if filename in _EXCLUDED_FILES or filename.endswith(SIDECAR_SUFFIX):
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _is_ignored(rel_path, False, patterns):
                continue
            yield rel_path


__all__ = ["iter_files"]
