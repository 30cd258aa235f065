"""Schemas for parsed lesson files."""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Set
from urllib.parse import unquote

from pydantic import BaseModel, Field

EXTERNAL_PREFIXES = ("http://", "https://", "ftp://", "mailto:", "tel:", "//")


class LinkKind(str, Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"
    ANCHOR = "anchor"
    WIKILINK = "wikilink"


def classify_target(target: str) -> LinkKind:
    """Classify a raw markdown link target."""
    lowered = target.strip().lower()
    if lowered.startswith(EXTERNAL_PREFIXES):
        return LinkKind.EXTERNAL
    if lowered.startswith("#"):
        return LinkKind.ANCHOR
    return LinkKind.INTERNAL


class Link(BaseModel):
    """A link found in lesson prose."""

    target: str
    text: str = ""
    line: int
    kind: LinkKind

    @property
    def path(self) -> str:
        """Target without fragment, URL-decoded. Empty for pure anchors."""
        if self.kind == LinkKind.WIKILINK:
            return self.target.split("#", 1)[0].strip()
        path = self.target.split("#", 1)[0].split("?", 1)[0]
        return unquote(path)

    @property
    def fragment(self) -> Optional[str]:
        if "#" not in self.target:
            return None
        return unquote(self.target.split("#", 1)[1])


class CodeBlock(BaseModel):
    """A fenced snippet."""

    language: Optional[str] = None
    info: str = ""
    content: str
    line: int
    closed: bool = True


class Heading(BaseModel):
    level: int
    text: str
    anchor: str
    line: int


class LessonFrontmatter(BaseModel):
    """Optional YAML header of a lesson."""

    title: Optional[str] = None
    order: Optional[int] = None
    tags: List[str] = Field(default_factory=list)
    leaf: bool = False
    prerequisites: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class Lesson(BaseModel):
    """A parsed lesson document."""

    path: str
    title: str
    frontmatter: LessonFrontmatter = Field(default_factory=LessonFrontmatter)
    headings: List[Heading] = Field(default_factory=list)
    links: List[Link] = Field(default_factory=list)
    code_blocks: List[CodeBlock] = Field(default_factory=list)
    prerequisites: List[Link] = Field(default_factory=list)
    checksum: str = ""

    @property
    def anchors(self) -> Set[str]:
        return {h.anchor for h in self.headings}

    @property
    def directory(self) -> str:
        """Posix directory of the lesson relative to the root, '' at the root."""
        parent = Path(self.path).parent.as_posix()
        return "" if parent == "." else parent


class Curriculum(BaseModel):
    """All lessons and assets below a root directory."""

    root: Path
    index: Optional[str] = None
    lessons: Dict[str, Lesson] = Field(default_factory=dict)
    assets: Set[str] = Field(default_factory=set)
    errors: Dict[str, str] = Field(default_factory=dict)

    @property
    def directories(self) -> Set[str]:
        """Every directory that holds a lesson or an asset."""
        dirs: Set[str] = set()
        for path in list(self.lessons) + list(self.assets):
            for parent in Path(path).parents:
                posix = parent.as_posix()
                if posix != ".":
                    dirs.add(posix)
        return dirs

    def get(self, path: str) -> Optional[Lesson]:
        return self.lessons.get(path)
