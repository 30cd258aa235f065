"""Main CLI entry point for curriculum-lint."""  # pragma: no cover

from curriculum_lint.cli.app import app  # pragma: no cover

# Register commands
from curriculum_lint.cli.commands import check, order, status  # pragma: no cover

__all__ = ["app", "check", "order", "status"]  # pragma: no cover

if __name__ == "__main__":  # pragma: no cover
    app()
