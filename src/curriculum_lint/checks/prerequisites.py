"""Check that prerequisites resolve and do not form cycles."""

from typing import List

from curriculum_lint.checks.base import Check
from curriculum_lint.markdown import Curriculum
from curriculum_lint.report import Issue
from curriculum_lint.services.link_resolver import LinkResolver
from curriculum_lint.services.reading_order import find_cycles


class PrerequisiteCheck(Check):
    name = "prerequisites"
    rules = ("broken-prerequisite", "prerequisite-cycle")

    async def run(self, curriculum: Curriculum) -> List[Issue]:
        resolver = LinkResolver(curriculum)
        issues: List[Issue] = []

        for path, lesson in sorted(curriculum.lessons.items()):
            for link in lesson.prerequisites:
                target = resolver.resolve(lesson, link).target
                if target not in curriculum.lessons:
                    issues.append(
                        self.issue(
                            "broken-prerequisite",
                            path,
                            link.line,
                            f"Prerequisite is not a lesson: {link.target}",
                        )
                    )

        for cycle in find_cycles(curriculum):
            start = curriculum.lessons[cycle[0]]
            line = next(
                (
                    link.line
                    for link in start.prerequisites
                    if resolver.resolve(start, link).target == cycle[1]
                ),
                1,
            )
            issues.append(
                self.issue(
                    "prerequisite-cycle",
                    cycle[0],
                    line,
                    f"Prerequisite cycle: {' -> '.join(cycle)}",
                )
            )
        return issues
