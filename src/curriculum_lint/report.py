"""Issues and check reports."""

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, Field


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Issue(BaseModel):
    """A content problem found in a lesson."""

    rule: str
    severity: Severity = Severity.ERROR
    path: str
    line: int = 1
    message: str

    def location(self) -> str:
        return f"{self.path}:{self.line}"


class CheckReport(BaseModel):
    """Result of running checks over a curriculum."""

    issues: List[Issue] = Field(default_factory=list)
    lessons_checked: int = 0
    rules: List[str] = Field(default_factory=list)
    strict: bool = False

    @property
    def errors(self) -> List[Issue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[Issue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def exit_code(self) -> int:
        if self.errors or (self.strict and self.warnings):
            return 1
        return 0

    def by_path(self) -> Dict[str, List[Issue]]:
        grouped: Dict[str, List[Issue]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.path, []).append(issue)
        return grouped

    def summary(self) -> Dict[str, int]:
        return {
            "lessons": self.lessons_checked,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
        }
