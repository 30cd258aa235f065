"""Services for loading and analysing a curriculum."""

from curriculum_lint.services.exceptions import (
    CurriculumError,
    IndexNotFoundError,
    PrerequisiteCycleError,
)
from curriculum_lint.services.link_resolver import LinkResolver, LinkStatus, Resolution
from curriculum_lint.services.reading_order import find_cycles, prerequisite_graph, reading_order
from curriculum_lint.services.scanner import CurriculumScanner, ScanResult, load_curriculum

__all__ = [
    "CurriculumError",
    "CurriculumScanner",
    "IndexNotFoundError",
    "LinkResolver",
    "LinkStatus",
    "PrerequisiteCycleError",
    "Resolution",
    "ScanResult",
    "find_cycles",
    "load_curriculum",
    "prerequisite_graph",
    "reading_order",
]
