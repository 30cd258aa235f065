"""Service for resolving lesson links to files and headings."""

import posixpath
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from loguru import logger

from curriculum_lint.markdown import Curriculum, Lesson, Link, LinkKind

DIRECTORY_INDEXES = ("README.md", "index.md")


class LinkStatus(str, Enum):
    OK = "ok"
    MISSING_FILE = "missing_file"
    MISSING_ANCHOR = "missing_anchor"
    OUTSIDE_ROOT = "outside_root"
    EXTERNAL = "external"


@dataclass
class Resolution:
    status: LinkStatus
    # posix path relative to the root, when the file part resolved
    target: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in (LinkStatus.OK, LinkStatus.EXTERNAL)


class LinkResolver:
    """Resolves links found in a lesson against the curriculum.

    Relative links resolve from the source lesson's directory, root-absolute
    links from the curriculum root. Wiki links resolve by path, then by file
    stem, then by title.
    """

    def __init__(self, curriculum: Curriculum):
        self.curriculum = curriculum
        self._directories = curriculum.directories
        self._by_stem: Dict[str, List[str]] = {}
        self._by_title: Dict[str, List[str]] = {}
        for path, lesson in curriculum.lessons.items():
            self._by_stem.setdefault(Path(path).stem.lower(), []).append(path)
            self._by_title.setdefault(lesson.title.strip().lower(), []).append(path)

    def resolve(self, source: Lesson, link: Link) -> Resolution:
        """Resolve a link from source.

        Args:
            source: Lesson the link appears in
            link: The link

        Returns:
            Resolution with status and resolved target path
        """
        if link.kind == LinkKind.EXTERNAL:
            return Resolution(LinkStatus.EXTERNAL)

        if link.kind == LinkKind.ANCHOR:
            return self._check_fragment(source.path, link.fragment)

        if link.kind == LinkKind.WIKILINK:
            target = self.resolve_wikilink(link.path)
            if target is None:
                logger.debug(f"No match for wiki link [[{link.target}]] in {source.path}")
                return Resolution(LinkStatus.MISSING_FILE)
            return self._check_fragment(target, link.fragment)

        path = link.path
        if not path:
            # [text](?query) or an empty image source
            if link.fragment is not None:
                return self._check_fragment(source.path, link.fragment)
            return Resolution(LinkStatus.MISSING_FILE)

        target = self.normalize(source.directory, path)
        if target is None:
            return Resolution(LinkStatus.OUTSIDE_ROOT)

        resolved = self.find_file(target)
        if resolved is None:
            return Resolution(LinkStatus.MISSING_FILE, target)
        return self._check_fragment(resolved, link.fragment)

    @staticmethod
    def normalize(source_dir: str, path: str) -> Optional[str]:
        """Join a link path to the source directory and normalize it.

        Returns None when the result escapes the root.
        """
        if path.startswith("/"):
            joined = path.lstrip("/")
        else:
            joined = posixpath.join(source_dir, path) if source_dir else path

        normalized = posixpath.normpath(joined) if joined else "."
        if normalized == ".." or normalized.startswith("../"):
            return None
        return normalized

    def find_file(self, target: str) -> Optional[str]:
        """Find the lesson, asset or directory index a normalized path names."""
        if target in self.curriculum.lessons or target in self.curriculum.assets:
            return target

        if target == "." or target in self._directories:
            for name in DIRECTORY_INDEXES:
                candidate = name if target == "." else f"{target}/{name}"
                if candidate in self.curriculum.lessons:
                    return candidate
            # A bare directory with files is still a valid link target
            return target if target != "." else None

        # Extension-less links to lessons
        for suffix in (".md", ".markdown"):
            if f"{target}{suffix}" in self.curriculum.lessons:
                return f"{target}{suffix}"
        return None

    def resolve_wikilink(self, text: str) -> Optional[str]:
        """Resolve wiki link text to a lesson path."""
        clean_text = text.strip()
        if not clean_text:
            return None

        exact = self.find_file(posixpath.normpath(clean_text.lstrip("/")))
        if exact is not None and exact in self.curriculum.lessons:
            return exact

        for index in (self._by_stem, self._by_title):
            matches = index.get(clean_text.lower())
            if matches:
                if len(matches) > 1:
                    logger.warning(f"Ambiguous wiki link [[{text}]]: {', '.join(sorted(matches))}")
                return sorted(matches)[0]
        return None

    def _check_fragment(self, target: str, fragment: Optional[str]) -> Resolution:
        if not fragment:
            return Resolution(LinkStatus.OK, target)

        lesson = self.curriculum.get(target)
        if lesson is None:
            # Fragments into assets or directories cannot be verified
            return Resolution(LinkStatus.OK, target)

        if fragment.lower() in lesson.anchors:
            return Resolution(LinkStatus.OK, target)
        return Resolution(LinkStatus.MISSING_ANCHOR, target)
