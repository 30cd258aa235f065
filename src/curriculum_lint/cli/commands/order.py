"""Reading order command for curriculum-lint."""

from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.markup import escape

from curriculum_lint.cli.app import app
from curriculum_lint.cli.commands.command_utils import console, get_config, get_curriculum
from curriculum_lint.services import PrerequisiteCycleError, reading_order


@app.command()
def order(
    root: Optional[Path] = typer.Argument(
        None, help="Curriculum root directory (defaults to the current directory)"
    ),
):
    """Print a reading order where prerequisites come first."""
    config = get_config(root)
    curriculum = get_curriculum(config)

    try:
        ordered = reading_order(curriculum)
    except PrerequisiteCycleError as e:
        logger.error(str(e))
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    for number, path in enumerate(ordered, start=1):
        lesson = curriculum.lessons[path]
        console.print(f"{number:>3}. {escape(lesson.title)} [dim]({escape(path)})[/dim]", highlight=False)
