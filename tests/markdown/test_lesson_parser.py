"""Tests for the lesson parser."""

from pathlib import Path
from textwrap import dedent

import pytest

from curriculum_lint.markdown import LessonParser, LinkKind, parse_lesson_content
from curriculum_lint.markdown.lesson_parser import split_frontmatter
from curriculum_lint.utils.file_utils import FileError, ParseError


def parse(content: str, path: str = "lesson.md"):
    return parse_lesson_content(path, dedent(content).lstrip("\n"))


def test_title_from_frontmatter():
    lesson = parse(
        """
        ---
        title: Pattern Matching
        ---

        # Matching on case classes
        """
    )
    assert lesson.title == "Pattern Matching"
    assert lesson.frontmatter.title == "Pattern Matching"


def test_title_from_first_h1():
    lesson = parse(
        """
        Some intro.

        # Implicit Conversions

        # Another top heading
        """
    )
    assert lesson.title == "Implicit Conversions"


def test_title_falls_back_to_stem():
    lesson = parse("Just prose, no headings.\n", path="monads/for-comprehensions.md")
    assert lesson.title == "for-comprehensions"
    assert lesson.directory == "monads"


def test_frontmatter_fields():
    lesson = parse(
        """
        ---
        order: "3"
        tags: futures, async
        leaf: true
        prerequisites: closures.md
        difficulty: intermediate
        ---

        # Futures
        """
    )
    fm = lesson.frontmatter
    assert fm.order == 3
    assert fm.tags == ["futures", "async"]
    assert fm.leaf is True
    assert fm.prerequisites == ["closures.md"]
    assert fm.metadata == {"difficulty": "intermediate"}


def test_non_integer_order_is_ignored():
    lesson = parse(
        """
        ---
        order: first
        ---
        # Lesson
        """
    )
    assert lesson.frontmatter.order is None


def test_malformed_frontmatter_treated_as_markdown():
    lesson = parse(
        """
        ---
        title: [unclosed
        ---

        # Real Title
        """
    )
    assert lesson.frontmatter.title is None
    assert lesson.title == "Real Title"


def test_split_frontmatter_keeps_line_numbers():
    content = "---\ntitle: X\n---\nbody line\n"
    metadata, body = split_frontmatter(content)
    assert metadata == {"title": "X"}
    assert body.split("\n")[3] == "body line"
    assert body.count("\n") == content.count("\n")


def test_no_frontmatter_returns_content_unchanged():
    metadata, body = split_frontmatter("# Title\n---\n")
    assert metadata == {}
    assert body == "# Title\n---\n"


def test_headings_and_anchors():
    lesson = parse(
        """
        # Typeclasses

        ## What's a `Show`?

        ## Setup

        ### Setup
        """
    )
    assert [(h.level, h.text) for h in lesson.headings] == [
        (1, "Typeclasses"),
        (2, "What's a Show?"),
        (2, "Setup"),
        (3, "Setup"),
    ]
    assert [h.anchor for h in lesson.headings] == [
        "typeclasses",
        "whats-a-show",
        "setup",
        "setup-1",
    ]
    assert lesson.headings[1].line == 3
    assert lesson.anchors == {"typeclasses", "whats-a-show", "setup", "setup-1"}


def test_links_are_classified_with_lines():
    lesson = parse(
        """
        # Links

        Read [the next lesson](next.md) and
        [the docs](https://docs.scala-lang.org/tour/).
        Jump to [setup](#setup) or write to [us](mailto:team@example.com).

        ![diagram](img/flow.png)
        """
    )
    found = [(link.target, link.kind, link.line) for link in lesson.links]
    assert found == [
        ("next.md", LinkKind.INTERNAL, 3),
        ("https://docs.scala-lang.org/tour/", LinkKind.EXTERNAL, 4),
        ("#setup", LinkKind.ANCHOR, 5),
        ("mailto:team@example.com", LinkKind.EXTERNAL, 5),
        ("img/flow.png", LinkKind.INTERNAL, 7),
    ]
    assert lesson.links[0].text == "the next lesson"
    assert lesson.links[4].text == "diagram"


def test_link_lines_account_for_frontmatter():
    lesson = parse(
        """
        ---
        title: Offsets
        tags: [a]
        ---

        # Offsets

        See [other](other.md).
        """
    )
    assert lesson.links[0].line == 8


def test_reference_style_links():
    lesson = parse(
        """
        # References

        See [the basics][basics].

        [basics]: ../basics/README.md
        """
    )
    assert [link.target for link in lesson.links] == ["../basics/README.md"]


def test_links_in_code_are_ignored():
    lesson = parse(
        """
        # Code

        Inline `[not](a-link.md)` here.

        ```markdown
        [also not](a-link.md)
        ```
        """
    )
    assert lesson.links == []


def test_wikilinks():
    lesson = parse(
        """
        # Wiki

        Compare with [[Closures|the closures lesson]] and
        [[typeclasses#instances]].
        """
    )
    assert [(link.target, link.text, link.line) for link in lesson.links] == [
        ("Closures", "the closures lesson", 3),
        ("typeclasses#instances", "typeclasses#instances", 4),
    ]
    assert all(link.kind == LinkKind.WIKILINK for link in lesson.links)
    assert lesson.links[1].path == "typeclasses"
    assert lesson.links[1].fragment == "instances"


def test_link_path_is_url_decoded():
    lesson = parse("[notes](my%20notes.md#part-two)\n")
    link = lesson.links[0]
    assert link.path == "my notes.md"
    assert link.fragment == "part-two"


def test_code_blocks():
    lesson = parse(
        """
        # Snippets

        ```scala
        val x = 1
        ```

        ~~~ python title="demo"
        print("hi")
        ~~~

        ```
        no language
        ```
        """
    )
    blocks = lesson.code_blocks
    assert [(b.language, b.line, b.closed) for b in blocks] == [
        ("scala", 3, True),
        ("python", 7, True),
        (None, 11, True),
    ]
    assert blocks[0].content == "val x = 1\n"
    assert blocks[1].info == 'python title="demo"'


def test_unclosed_code_block():
    lesson = parse(
        """
        # Broken

        ```scala
        def f = 1

        ## This heading is swallowed
        """
    )
    assert len(lesson.code_blocks) == 1
    assert lesson.code_blocks[0].closed is False
    assert [h.text for h in lesson.headings] == ["Broken"]


def test_code_block_in_blockquote_is_closed():
    lesson = parse(
        """
        > ```json
        > {"a": 1}
        > ```
        """
    )
    assert lesson.code_blocks[0].closed is True
    assert lesson.code_blocks[0].language == "json"


def test_prerequisites_section():
    lesson = parse(
        """
        # Monads

        ## Prerequisites

        - [Functors](functors.md)
        - [[Closures]]
        - [Scala book](https://docs.scala-lang.org)

        ### Optional

        - [Typeclasses](typeclasses.md)

        ## Next steps

        - [Effects](effects.md)
        """
    )
    assert [link.target for link in lesson.prerequisites] == [
        "functors.md",
        "Closures",
        "typeclasses.md",
    ]
    assert len(lesson.links) == 5


def test_frontmatter_prerequisites_are_added():
    lesson = parse(
        """
        ---
        prerequisites:
          - ../basics/closures.md
        ---
        # Futures
        """
    )
    assert [link.target for link in lesson.prerequisites] == ["../basics/closures.md"]
    assert lesson.prerequisites[0].kind == LinkKind.INTERNAL


def test_checksum_changes_with_content():
    assert parse("# A\n").checksum != parse("# B\n").checksum
    assert len(parse("# A\n").checksum) == 64


@pytest.mark.asyncio
async def test_parse_file_relative_path(tmp_path: Path):
    (tmp_path / "basics").mkdir()
    (tmp_path / "basics" / "intro.md").write_text("# Intro\n", encoding="utf-8")

    parser = LessonParser(tmp_path)
    lesson = await parser.parse_file("basics/intro.md")
    assert lesson.path == "basics/intro.md"
    assert lesson.title == "Intro"


@pytest.mark.asyncio
async def test_parse_file_utf16_fallback(tmp_path: Path):
    path = tmp_path / "unicode.md"
    path.write_text("# Über Closures\n", encoding="utf-16")

    lesson = await LessonParser(tmp_path).parse_file(path)
    assert lesson.title == "Über Closures"


@pytest.mark.asyncio
async def test_parse_file_not_found(tmp_path: Path):
    with pytest.raises(FileError):
        await LessonParser(tmp_path).parse_file(tmp_path / "missing.md")


@pytest.mark.asyncio
async def test_parse_file_undecodable(tmp_path: Path):
    path = tmp_path / "bad.md"
    path.write_bytes(b"\xff\xfe\x00")

    with pytest.raises(ParseError):
        await LessonParser(tmp_path).parse_file(path)


def test_relative_path_outside_base(tmp_path: Path):
    parser = LessonParser(tmp_path / "course")
    with pytest.raises(FileError, match="is outside"):
        parser.relative_path(tmp_path / "elsewhere.md")


@pytest.mark.parametrize(
    "value,expected",
    [
        ("true", True),
        ('"false"', False),
        ("no", False),
        ("'0'", False),
        ("yes", True),
        ("maybe", False),
    ],
)
def test_leaf_flag_coercion(value, expected):
    lesson = parse(f"---\nleaf: {value}\n---\n# Lesson\n")
    assert lesson.frontmatter.leaf is expected


def test_indented_fence_characters_do_not_close_a_fence():
    lesson = parse(
        """
        # Broken

        ```
        code
            ```
        """
    )
    assert lesson.code_blocks[0].closed is False
    assert lesson.code_blocks[0].content == "code\n    ```\n"


def test_fence_closed_without_trailing_newline():
    lesson = parse_lesson_content("lesson.md", "```scala\nval x = 1\n```")
    assert lesson.code_blocks[0].closed is True

    lesson = parse_lesson_content("lesson.md", "```scala\nval x = 1")
    assert lesson.code_blocks[0].closed is False
