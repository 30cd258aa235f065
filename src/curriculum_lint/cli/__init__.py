"""Command line interface for curriculum-lint."""
