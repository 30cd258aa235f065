"""Common test fixtures."""

from pathlib import Path
from textwrap import dedent
from typing import Callable

import pytest

from curriculum_lint.config import CurriculumConfig
from curriculum_lint.markdown import Curriculum, parse_lesson_content


def write_file(root: Path, rel_path: str, content: str) -> Path:
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dedent(content).lstrip("\n"), encoding="utf-8")
    return path


@pytest.fixture
def write_lesson(tmp_path) -> Callable[[str, str], Path]:
    """Write a lesson below tmp_path, dedenting its content."""

    def _write(rel_path: str, content: str) -> Path:
        return write_file(tmp_path, rel_path, content)

    return _write


@pytest.fixture
def curriculum_root(tmp_path) -> Path:
    """A small, clean curriculum."""
    write_file(
        tmp_path,
        "README.md",
        """
        # Scala Bootcamp

        Start with [Basics](basics/README.md), then read
        [Closures](basics/closures.md).

        - [Typeclasses](advanced/typeclasses.md)
        - [Scala docs](https://docs.scala-lang.org)
        """,
    )
    write_file(
        tmp_path,
        "basics/README.md",
        """
        # Basics

        See [capturing variables](closures.md#capturing-variables).
        """,
    )
    write_file(
        tmp_path,
        "basics/closures.md",
        """
        ---
        title: Closures
        order: 1
        tags: [functions, scope]
        ---

        # Closures in Scala

        ## Capturing Variables

        ```scala
        val add = (x: Int) => x + 1
        ```

        ```text
        res0: Int = 2
        ```
        """,
    )
    write_file(
        tmp_path,
        "advanced/typeclasses.md",
        """
        # Typeclasses

        ## Prerequisites

        - [Closures](../basics/closures.md)

        ## Defining a typeclass

        ![diagram](diagram.png)

        ```scala
        trait Show[A] { def show(a: A): String }
        ```
        """,
    )
    (tmp_path / "advanced" / "diagram.png").write_bytes(b"\x89PNG\r\n")
    return tmp_path


@pytest.fixture
def config(curriculum_root) -> CurriculumConfig:
    return CurriculumConfig(root=curriculum_root)


def make_curriculum(lessons: dict, assets=(), index: str = "README.md") -> Curriculum:
    """Build a Curriculum in memory from {path: markdown}."""
    return Curriculum(
        root=Path("/curriculum"),
        index=index if index in lessons else None,
        lessons={
            path: parse_lesson_content(path, dedent(content).lstrip("\n"))
            for path, content in lessons.items()
        },
        assets=set(assets),
    )


@pytest.fixture
def curriculum_factory() -> Callable[..., Curriculum]:
    return make_curriculum
