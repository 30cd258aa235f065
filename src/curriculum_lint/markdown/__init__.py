"""Base package for lesson markdown parsing."""

from curriculum_lint.markdown.lesson_parser import LessonParser, parse_lesson_content
from curriculum_lint.markdown.schemas import (
    CodeBlock,
    Curriculum,
    Heading,
    Lesson,
    LessonFrontmatter,
    Link,
    LinkKind,
)
from curriculum_lint.utils.file_utils import ParseError

__all__ = [
    "CodeBlock",
    "Curriculum",
    "Heading",
    "Lesson",
    "LessonFrontmatter",
    "LessonParser",
    "Link",
    "LinkKind",
    "ParseError",
    "parse_lesson_content",
]
