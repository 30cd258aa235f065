"""Base class for curriculum checks."""

from abc import ABC, abstractmethod
from typing import ClassVar, List, Tuple

from curriculum_lint.config import CurriculumConfig
from curriculum_lint.markdown import Curriculum
from curriculum_lint.report import Issue, Severity


class Check(ABC):
    """A content integrity check over a whole curriculum."""

    # Name used to select the check on the command line
    name: ClassVar[str]
    # Rules the check can report
    rules: ClassVar[Tuple[str, ...]]

    def __init__(self, config: CurriculumConfig):
        self.config = config

    @abstractmethod
    async def run(self, curriculum: Curriculum) -> List[Issue]:
        """Run the check and return the issues found."""
        pass

    def issue(
        self,
        rule: str,
        path: str,
        line: int,
        message: str,
        severity: Severity = Severity.ERROR,
    ) -> Issue:
        return Issue(rule=rule, severity=severity, path=path, line=line, message=message)
