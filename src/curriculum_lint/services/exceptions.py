from typing import List


class CurriculumError(Exception):
    """Raised when a curriculum cannot be checked at all"""

    pass


class IndexNotFoundError(CurriculumError):
    """Raised when the curriculum has no index lesson"""

    pass


class PrerequisiteCycleError(CurriculumError):
    """Raised when lesson prerequisites form a cycle"""

    def __init__(self, cycle: List[str]):
        self.cycle = cycle
        super().__init__(f"Prerequisite cycle: {' -> '.join(cycle)}")
