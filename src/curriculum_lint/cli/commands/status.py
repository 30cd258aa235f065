"""Status command for curriculum-lint."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from curriculum_lint.cli.app import app
from curriculum_lint.cli.commands.command_utils import console, get_config, get_curriculum
from curriculum_lint.markdown import Curriculum, LinkKind


def build_status_table(curriculum: Curriculum) -> Table:
    """Table of lessons with their link, snippet and prerequisite counts."""
    table = Table(title=f"Curriculum: {curriculum.root.name}")
    table.add_column("Lesson", style="cyan")
    table.add_column("Title")
    table.add_column("Links", justify="right")
    table.add_column("Ext", justify="right")
    table.add_column("Code", justify="right")
    table.add_column("Prereq", justify="right")

    totals = [0, 0, 0, 0]
    for path, lesson in sorted(curriculum.lessons.items()):
        external = sum(1 for link in lesson.links if link.kind == LinkKind.EXTERNAL)
        counts = [
            len(lesson.links) - external,
            external,
            len(lesson.code_blocks),
            len(lesson.prerequisites),
        ]
        totals = [a + b for a, b in zip(totals, counts)]
        marker = " [green](index)[/green]" if path == curriculum.index else ""
        table.add_row(escape(path) + marker, escape(lesson.title), *(str(c) for c in counts))

    table.add_section()
    table.add_row(
        f"[bold]{len(curriculum.lessons)} lessons[/bold]", "", *(f"[bold]{t}[/bold]" for t in totals)
    )
    return table


@app.command()
def status(
    root: Optional[Path] = typer.Argument(
        None, help="Curriculum root directory (defaults to the current directory)"
    ),
):
    """Show the lessons of a curriculum and what they contain."""
    config = get_config(root)
    curriculum = get_curriculum(config)

    console.print(build_status_table(curriculum))
    if curriculum.errors:
        console.print(f"[red]{len(curriculum.errors)} files could not be parsed[/red]")
    if curriculum.index is None:
        console.print("[yellow]No index lesson found[/yellow]")
