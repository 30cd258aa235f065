"""curriculum-lint - content integrity checks for markdown curricula."""

__version__ = "0.3.0"
