"""Parser for lesson markdown files.

Uses python-frontmatter for the optional YAML header and markdown-it to walk
the body, collecting headings, links and fenced snippets with their source lines.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import frontmatter
import yaml
from loguru import logger
from markdown_it import MarkdownIt
from markdown_it.token import Token
from pydantic import TypeAdapter, ValidationError

from curriculum_lint.markdown.schemas import (
    CodeBlock,
    Heading,
    Lesson,
    LessonFrontmatter,
    Link,
    LinkKind,
    classify_target,
)
from curriculum_lint.utils import heading_anchor, parse_tags
from curriculum_lint.utils.file_utils import FileError, ParseError, compute_checksum, read_text

md = MarkdownIt("commonmark").enable("table")

WIKILINK_PATTERN = re.compile(r"\[\[([^\[\]]+)\]\]")
PREREQUISITES_HEADING = "prerequisites"
FRONTMATTER_BOUNDARY = "---"
BOOL_ADAPTER = TypeAdapter(bool)


def split_frontmatter(content: str) -> Tuple[Dict[str, Any], str]:
    """Split the YAML header from the body.

    The returned body keeps one blank line per header line, so token line
    numbers still match the file on disk. Malformed YAML is logged and the
    whole file is treated as body.
    """
    lines = content.split("\n")
    if not lines or lines[0].lstrip("\ufeff").strip() != FRONTMATTER_BOUNDARY:
        return {}, content

    end = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == FRONTMATTER_BOUNDARY:
            end = i
            break
    if end is None:
        return {}, content

    try:
        post = frontmatter.loads("\n".join(lines[: end + 1]))
    except yaml.YAMLError as e:
        logger.warning(f"Failed to parse YAML frontmatter: {e}. Treating file as plain markdown.")
        return {}, content

    body = "\n" * (end + 1) + "\n".join(lines[end + 1 :])
    return dict(post.metadata), body


def parse_frontmatter_fields(metadata: Dict[str, Any]) -> LessonFrontmatter:
    """Pick recognised keys out of raw frontmatter."""
    extra = dict(metadata)

    title = extra.pop("title", None)
    title = str(title).strip() if title not in (None, "", "None") else None

    order = extra.pop("order", None)
    if order is not None:
        try:
            order = int(order)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring non-integer lesson order: {order!r}")
            order = None

    leaf = extra.pop("leaf", None) or False
    try:
        # "false", "no" and "0" are false, as pydantic reads them
        leaf = BOOL_ADAPTER.validate_python(leaf)
    except ValidationError:
        logger.warning(f"Ignoring non-boolean leaf flag: {leaf!r}")
        leaf = False

    prerequisites = extra.pop("prerequisites", None) or []
    if isinstance(prerequisites, str):
        prerequisites = [prerequisites]

    return LessonFrontmatter(
        title=title,
        order=order,
        tags=parse_tags(extra.pop("tags", None)),
        leaf=leaf,
        prerequisites=[str(p) for p in prerequisites],
        metadata=extra,
    )


def _content_lines(content: str) -> int:
    if not content:
        return 0
    return content.count("\n") + (0 if content.endswith("\n") else 1)


def _code_block(token: Token) -> CodeBlock:
    start, end = token.map
    # markdown-it maps a closed fence over its opening line, content and closing line;
    # an unclosed one stops after the content
    closed = end - start - 2 == _content_lines(token.content)
    info = token.info.strip()
    language = info.split()[0].lower() if info else None
    # Pandoc-style attributes: ```{.python}
    if language and language.startswith("{"):
        language = language.strip("{}").lstrip(".") or None
    return CodeBlock(
        language=language,
        info=info,
        content=token.content,
        line=start + 1,
        closed=closed,
    )


def _inline_text(token: Token) -> str:
    """Rendered text of an inline token, without markup."""
    parts = []
    for child in token.children or []:
        if child.type in ("text", "code_inline"):
            parts.append(child.content)
        elif child.type in ("softbreak", "hardbreak"):
            parts.append(" ")
        elif child.type == "image":
            parts.append(child.content)
    return "".join(parts).strip()


def _inline_links(token: Token) -> List[Link]:
    """Collect links, images and wiki links from an inline token."""
    links: List[Link] = []
    line = token.map[0] + 1 if token.map else 1

    open_link: Optional[Dict[str, Any]] = None
    text_run: List[str] = []
    text_line = line

    def flush_text() -> None:
        text = "".join(text_run)
        for match in WIKILINK_PATTERN.finditer(text):
            inner = match.group(1)
            target, _, alias = inner.partition("|")
            links.append(
                Link(
                    target=target.strip(),
                    text=(alias or target).strip(),
                    line=text_line + text[: match.start()].count("\n"),
                    kind=LinkKind.WIKILINK,
                )
            )
        text_run.clear()

    for child in token.children or []:
        if child.type in ("text", "softbreak", "hardbreak") and not text_run:
            text_line = line

        if child.type == "text":
            text_run.append(child.content)
        elif child.type in ("softbreak", "hardbreak"):
            text_run.append("\n")
            line += 1
            continue
        else:
            flush_text()

        if child.type == "link_open":
            href = str(child.attrGet("href") or "")
            open_link = {"target": href, "line": line, "text": []}
        elif child.type == "link_close" and open_link is not None:
            target = open_link["target"]
            links.append(
                Link(
                    target=target,
                    text="".join(open_link["text"]).strip(),
                    line=open_link["line"],
                    kind=classify_target(target),
                )
            )
            open_link = None
        elif child.type == "image":
            src = str(child.attrGet("src") or "")
            links.append(Link(target=src, text=child.content, line=line, kind=classify_target(src)))
        elif open_link is not None and child.type in ("text", "code_inline"):
            open_link["text"].append(child.content)

    flush_text()
    return links


def parse_lesson_content(path: str, content: str) -> Lesson:
    """Parse lesson markdown into a Lesson."""
    metadata, body = split_frontmatter(content)
    lesson_frontmatter = parse_frontmatter_fields(metadata)

    headings: List[Heading] = []
    links: List[Link] = []
    code_blocks: List[CodeBlock] = []
    prerequisites: List[Link] = []
    anchor_counts: Dict[str, int] = {}
    first_h1: Optional[str] = None

    # level of the open Prerequisites section, if any
    prerequisites_level: Optional[int] = None

    tokens = md.parse(body)
    for i, token in enumerate(tokens):
        if token.type == "heading_open":
            level = int(token.tag[1])
            text = _inline_text(tokens[i + 1])

            anchor = heading_anchor(text)
            count = anchor_counts.get(anchor, 0)
            anchor_counts[anchor] = count + 1
            if count:
                anchor = f"{anchor}-{count}"

            headings.append(
                Heading(level=level, text=text, anchor=anchor, line=token.map[0] + 1)
            )
            if level == 1 and first_h1 is None:
                first_h1 = text

            if prerequisites_level is not None and level <= prerequisites_level:
                prerequisites_level = None
            if text.strip().rstrip(":").lower() == PREREQUISITES_HEADING:
                prerequisites_level = level

        elif token.type == "fence":
            code_blocks.append(_code_block(token))

        elif token.type == "inline":
            # Heading text is inline too; links in headings still count
            found = _inline_links(token)
            links.extend(found)
            if prerequisites_level is not None and tokens[i - 1].type != "heading_open":
                prerequisites.extend(
                    link for link in found if link.kind in (LinkKind.INTERNAL, LinkKind.WIKILINK)
                )

    for target in lesson_frontmatter.prerequisites:
        prerequisites.append(Link(target=target, text=target, line=1, kind=classify_target(target)))

    title = lesson_frontmatter.title or first_h1 or Path(path).stem

    return Lesson(
        path=path,
        title=title,
        frontmatter=lesson_frontmatter,
        headings=headings,
        links=links,
        code_blocks=code_blocks,
        prerequisites=prerequisites,
        checksum=compute_checksum(content),
    )


class LessonParser:
    """Parser for lesson files below a curriculum root."""

    def __init__(self, base_path: Path):
        """Initialize parser with base path for relative lesson paths."""
        self.base_path = base_path.resolve()

    def relative_path(self, path: Path) -> str:
        """Posix path below the base path, keeping symlinked names as they appear.

        Raises:
            FileError: If the path is not below the base path
        """
        for candidate in (path, path.resolve()):
            if candidate.is_relative_to(self.base_path):
                return candidate.relative_to(self.base_path).as_posix()
        raise FileError(f"{path} is outside {self.base_path}")

    async def parse_file(self, path: Path | str, encoding: str = "utf-8") -> Lesson:
        """
        Parse a lesson file.

        Args:
            path: Absolute path, or path relative to the base path
            encoding: File encoding to try first

        Returns:
            Parsed Lesson

        Raises:
            FileError: If file cannot be read
            ParseError: If content cannot be decoded or parsed
        """
        absolute_path = Path(path)
        if not absolute_path.is_absolute():
            absolute_path = self.base_path / absolute_path

        content = read_text(absolute_path, encoding=encoding)
        return await self.parse_file_content(absolute_path, content)

    async def parse_file_content(self, absolute_path: Path, content: str) -> Lesson:
        rel_path = self.relative_path(absolute_path)
        try:
            return parse_lesson_content(rel_path, content)
        except Exception as e:
            logger.error(f"Failed to parse {rel_path}: {e}")
            raise ParseError(f"Failed to parse {rel_path}: {str(e)}") from e
