"""Gitignore-style filtering for curriculum scans."""

import fnmatch
from pathlib import Path
from typing import Iterable, Optional, Set

from loguru import logger

# Tooling and build directories that never hold lessons
DEFAULT_IGNORE_PATTERNS = {
    ".git",
    ".github",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".DS_Store",
    "Thumbs.db",
    ".idea",
    ".vscode",
    ".bsp",
    ".metals",
    ".bloop",
    "target",
    "build",
    "dist",
    "_site",
    ".cache",
    ".obsidian",
}


def load_ignore_patterns(base_path: Path, extra: Optional[Iterable[str]] = None) -> Set[str]:
    """Collect ignore patterns: built-in defaults, the root .gitignore and configured extras."""
    patterns = set(DEFAULT_IGNORE_PATTERNS)
    patterns.update(extra or ())

    gitignore_file = base_path / ".gitignore"
    if not gitignore_file.exists():
        return patterns

    try:
        lines = gitignore_file.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeError) as e:
        logger.warning(f"Could not read {gitignore_file}, using default patterns: {e}")
        return patterns

    # negations are not supported; a re-included file stays ignored
    patterns.update(
        stripped
        for stripped in (line.strip() for line in lines)
        if stripped and not stripped.startswith(("#", "!"))
    )
    return patterns


def matches_pattern(pattern: str, relative_path: Path) -> bool:
    """Match one gitignore-style pattern against a root-relative path."""
    posix = relative_path.as_posix()
    parts = relative_path.parts

    if pattern.startswith("/"):
        anchored = pattern[1:]
        if anchored.endswith("/"):
            return bool(parts) and parts[0] == anchored[:-1]
        return fnmatch.fnmatch(posix, anchored)

    if pattern.endswith("/"):
        # directory patterns never match the file itself
        return pattern[:-1] in parts[:-1]

    return (
        pattern in parts
        or fnmatch.fnmatch(posix, pattern)
        or fnmatch.fnmatch(relative_path.name, pattern)
    )


def should_ignore_path(file_path: Path, base_path: Path, ignore_patterns: Set[str]) -> bool:
    """True when file_path, taken relative to base_path, matches any pattern.

    Paths outside base_path are never ignored.
    """
    try:
        relative_path = file_path.relative_to(base_path)
    except ValueError:
        return False
    return any(matches_pattern(pattern, relative_path) for pattern in ignore_patterns)
