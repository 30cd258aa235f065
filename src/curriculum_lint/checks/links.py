"""Check that internal links resolve to existing files and headings."""

from typing import List

from curriculum_lint.checks.base import Check
from curriculum_lint.markdown import Curriculum, LinkKind
from curriculum_lint.report import Issue
from curriculum_lint.services.link_resolver import LinkResolver, LinkStatus


class LinkCheck(Check):
    name = "links"
    rules = ("broken-link", "broken-anchor", "link-outside-root")

    async def run(self, curriculum: Curriculum) -> List[Issue]:
        resolver = LinkResolver(curriculum)
        issues: List[Issue] = []

        for path, lesson in sorted(curriculum.lessons.items()):
            for link in lesson.links:
                if link.kind == LinkKind.EXTERNAL:
                    continue

                resolution = resolver.resolve(lesson, link)
                if resolution.status == LinkStatus.MISSING_FILE:
                    shown = f"[[{link.target}]]" if link.kind == LinkKind.WIKILINK else link.target
                    issues.append(
                        self.issue("broken-link", path, link.line, f"Link target not found: {shown}")
                    )
                elif resolution.status == LinkStatus.MISSING_ANCHOR:
                    issues.append(
                        self.issue(
                            "broken-anchor",
                            path,
                            link.line,
                            f"No heading '#{link.fragment}' in {resolution.target}",
                        )
                    )
                elif resolution.status == LinkStatus.OUTSIDE_ROOT:
                    issues.append(
                        self.issue(
                            "link-outside-root",
                            path,
                            link.line,
                            f"Link leaves the curriculum root: {link.target}",
                        )
                    )
        return issues
