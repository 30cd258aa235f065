"""Shared helpers for CLI commands."""

import asyncio
from pathlib import Path
from typing import Any, Optional

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from curriculum_lint.config import CurriculumConfig, load_config
from curriculum_lint.markdown import Curriculum
from curriculum_lint.services import CurriculumError, load_curriculum

console = Console()

# Exit code for configuration and usage failures; 1 means issues were found
EXIT_USAGE = 2


def get_config(root: Optional[Path], **overrides: Any) -> CurriculumConfig:
    """Build configuration, turning invalid settings into a clean exit."""
    try:
        return load_config(root, **overrides)
    except (ValidationError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_USAGE)


def get_curriculum(config: CurriculumConfig) -> Curriculum:
    try:
        return asyncio.run(load_curriculum(config))
    except CurriculumError as e:
        logger.error(f"Error loading curriculum: {e}")
        console.print(f"[red]Error loading curriculum:[/red] {escape(str(e))}")
        raise typer.Exit(EXIT_USAGE)
