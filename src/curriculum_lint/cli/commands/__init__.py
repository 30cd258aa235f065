"""CLI commands for curriculum-lint."""

from . import check, order, status

__all__ = ["check", "order", "status"]
