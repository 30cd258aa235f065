"""Utility functions for curriculum-lint."""

import re
import sys
import unicodedata
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logging(level: str = "WARNING", log_file: Optional[str] = None) -> None:
    """Configure loguru sinks.

    Args:
        level: Minimum level for the stderr sink
        log_file: Optional path, relative to the home directory, for a debug log
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), colorize=True)

    if log_file:
        log_path = Path.home() / log_file
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(str(log_path), level="DEBUG", rotation="10 MB", retention="10 days")


def heading_anchor(text: str) -> str:
    """
    Turn heading text into a GitHub-style anchor:
    - Drop inline markup characters and punctuation
    - Convert to lowercase
    - Replace spaces with hyphens
    """
    text = unicodedata.normalize("NFKC", text).strip().lower()
    # Keep word characters, spaces and hyphens
    text = re.sub(r"[^\w\- ]", "", text)
    return text.replace(" ", "-")


def parse_tags(tags) -> list[str]:
    """Parse tags from a list or a comma separated string."""
    if tags is None:
        return []
    if isinstance(tags, (list, tuple)):
        return [str(t).strip() for t in tags if str(t).strip()]
    return [t.strip() for t in str(tags).split(",") if t.strip()]
