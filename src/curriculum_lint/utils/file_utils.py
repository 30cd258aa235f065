"""Utilities for file operations."""

import codecs
import hashlib
from pathlib import Path

from loguru import logger

UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)


class FileError(Exception):
    """Base exception for file operations."""

    pass


class ParseError(FileError):
    """Raised when parsing file content fails."""

    pass


def compute_checksum(content: str) -> str:
    """
    Compute SHA-256 checksum of content.

    Args:
        content: Text content to hash

    Returns:
        SHA-256 hex digest

    Raises:
        FileError: If checksum computation fails
    """
    try:
        return hashlib.sha256(content.encode()).hexdigest()
    except Exception as e:
        logger.error(f"Failed to compute checksum: {e}")
        raise FileError(f"Failed to compute checksum: {e}")


def read_text(path: Path, encoding: str = "utf-8") -> str:
    """
    Read a text file, retrying as UTF-16 when UTF-8 decoding fails and the
    file starts with a UTF-16 byte order mark.

    Args:
        path: File to read
        encoding: Encoding to try first

    Returns:
        File content

    Raises:
        FileError: If the file does not exist or cannot be read
        ParseError: If the content cannot be decoded
    """
    if not path.exists():
        raise FileError(f"File does not exist: {path}")

    try:
        raw = path.read_bytes()
    except OSError as e:
        logger.error(f"Failed to read {path}: {e}")
        raise FileError(f"Failed to read {path}: {e}") from e

    try:
        content = raw.decode(encoding)
    except UnicodeError as e:
        if not raw.startswith(UTF16_BOMS):
            raise ParseError(f"Failed to decode {path}: {str(e)}") from e
        try:
            content = raw.decode("utf-16")
        except UnicodeError as utf16_error:
            raise ParseError(f"Failed to decode {path}: {utf16_error}") from utf16_error

    # match the universal newlines of text mode reads
    return content.replace("\r\n", "\n").replace("\r", "\n")


def is_markdown(path: Path | str) -> bool:
    """Check if a path names a markdown file."""
    return Path(path).suffix.lower() in (".md", ".markdown")
