"""Check command for curriculum-lint."""

import asyncio
from pathlib import Path
from typing import Dict, List, Optional

import typer
from loguru import logger
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text
from rich.tree import Tree

from curriculum_lint.checks import run_checks, select_checks
from curriculum_lint.cli.app import app
from curriculum_lint.cli.commands.command_utils import (
    EXIT_USAGE,
    console,
    get_config,
    get_curriculum,
)
from curriculum_lint.report import CheckReport, Issue, Severity


def group_issues_by_directory(report: CheckReport) -> Dict[str, Dict[str, List[Issue]]]:
    """Group issues by directory, then by file."""
    grouped: Dict[str, Dict[str, List[Issue]]] = {}
    for path, issues in report.by_path().items():
        parent = Path(path).parent.as_posix()
        dir_name = "" if parent == "." else parent
        grouped.setdefault(dir_name, {})[Path(path).name] = issues
    return grouped


def display_report(report: CheckReport, verbose: bool = False) -> None:
    """Display issues using Rich, grouped by directory and file."""
    tree = Tree(f"Curriculum ({report.lessons_checked} lessons)")

    if not report.issues:
        tree.add("[green]No issues found[/green]")
        console.print(Panel(tree, expand=False))
        return

    for dir_name, files in sorted(group_issues_by_directory(report).items()):
        count = sum(len(issues) for issues in files.values())
        if dir_name:
            branch = tree.add(f"[bold blue]{dir_name}/[/bold blue] ([yellow]{count} issues[/yellow])")
        else:
            branch = tree

        for file_name, issues in sorted(files.items()):
            file_branch = branch.add(f"[yellow]{escape(file_name)}[/yellow]")
            for issue in issues:
                style = "red" if issue.severity == Severity.ERROR else "yellow"
                file_branch.add(
                    Text.assemble(
                        (f"{issue.line:>4}  ", "dim"),
                        (issue.rule, style),
                        "  ",
                        issue.message,
                    )
                )

    console.print(Panel(tree, expand=False))

    summary = Text.assemble(
        ("Errors: ", "bold"),
        (str(len(report.errors)), "red" if report.errors else "green"),
        ("  Warnings: ", "bold"),
        (str(len(report.warnings)), "yellow" if report.warnings else "green"),
    )
    console.print(summary)
    if verbose:
        console.print(f"[dim]Checks run: {', '.join(report.rules)}[/dim]")


@app.command()
def check(
    root: Optional[Path] = typer.Argument(
        None, help="Curriculum root directory (defaults to the current directory)"
    ),
    rule: Optional[List[str]] = typer.Option(
        None, "--rule", "-r", help="Run only this check (repeatable)"
    ),
    external: Optional[bool] = typer.Option(
        None, "--external/--no-external", help="Check external URLs over the network"
    ),
    strict: Optional[bool] = typer.Option(None, "--strict/--no-strict", help="Fail on warnings too"),
    require_language: Optional[bool] = typer.Option(
        None, "--require-language/--no-require-language", help="Report code fences without a language"
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show more detail"),
):
    """Check links, snippets, orphans and prerequisites of a curriculum."""
    config = get_config(
        root, external=external, strict=strict, require_language=require_language
    )

    try:
        names = select_checks(config, rule)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(EXIT_USAGE)

    curriculum = get_curriculum(config)
    report = asyncio.run(run_checks(curriculum, config, names))
    logger.debug(f"Report summary: {report.summary()}")

    if json_output:
        typer.echo(report.model_dump_json(indent=2))
    else:
        display_report(report, verbose)

    raise typer.Exit(report.exit_code)
