from typing import Optional

import typer

from curriculum_lint.utils import setup_logging


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:  # pragma: no cover
        import curriculum_lint

        typer.echo(f"curriculum-lint version: {curriculum_lint.__version__}")
        raise typer.Exit()


app = typer.Typer(name="curriculum-lint", no_args_is_help=True)


@app.callback()
def app_callback(
    log_level: str = typer.Option(
        "WARNING",
        "--log-level",
        "-l",
        help="Log level for messages on stderr",
        envvar="CURRICULUM_LOG_LEVEL",
    ),
    log_file: Optional[str] = typer.Option(
        None,
        "--log-file",
        help="Also write a debug log to this path, relative to the home directory",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """curriculum-lint - content integrity checks for markdown curricula."""
    setup_logging(level=log_level, log_file=log_file)
