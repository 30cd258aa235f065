"""Report files that could not be read or parsed."""

from typing import List

from curriculum_lint.checks.base import Check
from curriculum_lint.markdown import Curriculum
from curriculum_lint.report import Issue


class ParseCheck(Check):
    name = "parse"
    rules = ("parse-error",)

    async def run(self, curriculum: Curriculum) -> List[Issue]:
        return [
            self.issue("parse-error", path, 1, error)
            for path, error in sorted(curriculum.errors.items())
        ]
