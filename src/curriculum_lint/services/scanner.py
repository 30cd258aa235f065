"""Service for discovering and parsing the lessons of a curriculum."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set

from loguru import logger

from curriculum_lint.config import CurriculumConfig
from curriculum_lint.ignore_utils import load_ignore_patterns, should_ignore_path
from curriculum_lint.markdown import Curriculum, LessonParser
from curriculum_lint.services.exceptions import IndexNotFoundError
from curriculum_lint.utils.file_utils import FileError, is_markdown


@dataclass
class ScanResult:
    """Result of scanning a directory."""

    # relative posix paths
    lessons: List[str] = field(default_factory=list)
    assets: Set[str] = field(default_factory=set)
    ignored: int = 0


class CurriculumScanner:
    """
    Service for loading a curriculum directory.
    Files that fail to parse are recorded and skipped, never fatal.
    """

    def __init__(self, config: CurriculumConfig, parser: Optional[LessonParser] = None):
        self.config = config
        self.parser = parser or LessonParser(config.root)

    async def scan_directory(self, directory: Path) -> ScanResult:
        """
        Scan directory for lessons and other files.

        Args:
            directory: Directory to scan

        Returns:
            ScanResult with lesson and asset paths relative to directory
        """
        logger.debug(f"Scanning directory: {directory}")
        result = ScanResult()

        if not directory.exists():
            logger.debug(f"Directory does not exist: {directory}")
            return result

        ignore_patterns = load_ignore_patterns(directory, self.config.ignore)

        for path in sorted(directory.rglob("*")):
            if not path.is_file():
                continue
            if should_ignore_path(path, directory, ignore_patterns):
                result.ignored += 1
                continue

            rel_path = path.relative_to(directory).as_posix()
            if is_markdown(path):
                result.lessons.append(rel_path)
            else:
                result.assets.add(rel_path)

        logger.debug(
            f"Found {len(result.lessons)} lessons, {len(result.assets)} assets, "
            f"ignored {result.ignored} files"
        )
        return result

    async def load(self) -> Curriculum:
        """Scan the configured root and parse every lesson."""
        root = self.config.root
        index = self.config.index_path()
        if self.config.index and index is None:
            raise IndexNotFoundError(f"Configured index not found: {self.config.index}")

        scan_result = await self.scan_directory(root)

        curriculum = Curriculum(
            root=root,
            index=index,
            assets=scan_result.assets,
        )

        for rel_path in scan_result.lessons:
            try:
                curriculum.lessons[rel_path] = await self.parser.parse_file(root / rel_path)
            except FileError as e:
                # ParseError is a FileError
                curriculum.errors[rel_path] = str(e)
                logger.error(f"Failed to load {rel_path}: {e}")

        if curriculum.errors:
            logger.warning(f"Skipped {len(curriculum.errors)} files due to errors")
        logger.info(f"Loaded {len(curriculum.lessons)} lessons from {root}")
        return curriculum


async def load_curriculum(config: CurriculumConfig) -> Curriculum:
    """Load the curriculum described by config."""
    return await CurriculumScanner(config).load()
