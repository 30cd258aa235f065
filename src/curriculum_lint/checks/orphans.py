"""Check that every lesson is reachable from the index."""

import fnmatch
from collections import deque
from typing import List, Set

from curriculum_lint.checks.base import Check
from curriculum_lint.markdown import Curriculum, LinkKind
from curriculum_lint.report import Issue
from curriculum_lint.services.link_resolver import LinkResolver


def reachable_lessons(curriculum: Curriculum, start: str) -> Set[str]:
    """Lessons reachable from start by following links and prerequisites."""
    resolver = LinkResolver(curriculum)
    seen = {start}
    queue = deque([start])

    while queue:
        lesson = curriculum.lessons[queue.popleft()]
        for link in lesson.links + lesson.prerequisites:
            if link.kind == LinkKind.EXTERNAL:
                continue
            target = resolver.resolve(lesson, link).target
            if target in curriculum.lessons and target not in seen:
                seen.add(target)
                queue.append(target)
    return seen


class OrphanCheck(Check):
    name = "orphans"
    rules = ("orphan", "missing-index")

    def is_leaf(self, curriculum: Curriculum, path: str) -> bool:
        if curriculum.lessons[path].frontmatter.leaf:
            return True
        return any(fnmatch.fnmatch(path, pattern) for pattern in self.config.leaves)

    async def run(self, curriculum: Curriculum) -> List[Issue]:
        if curriculum.index is None or curriculum.index not in curriculum.lessons:
            expected = self.config.index or "README.md"
            return [
                self.issue(
                    "missing-index",
                    expected,
                    1,
                    "No index lesson found; cannot check for orphaned lessons",
                )
            ]

        reachable = reachable_lessons(curriculum, curriculum.index)
        return [
            self.issue(
                "orphan",
                path,
                1,
                f"Lesson is not reachable from {curriculum.index}",
            )
            for path in sorted(curriculum.lessons)
            if path not in reachable and not self.is_leaf(curriculum, path)
        ]
