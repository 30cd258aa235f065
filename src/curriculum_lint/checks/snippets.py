"""Check that fenced snippets are well formed for their declared language."""

from typing import List

from curriculum_lint.checks.base import Check
from curriculum_lint.markdown import Curriculum
from curriculum_lint.markdown.snippet_syntax import check_snippet
from curriculum_lint.report import Issue, Severity


class SnippetCheck(Check):
    name = "snippets"
    rules = ("unclosed-fence", "snippet-syntax", "missing-language")

    async def run(self, curriculum: Curriculum) -> List[Issue]:
        issues: List[Issue] = []

        for path, lesson in sorted(curriculum.lessons.items()):
            for block in lesson.code_blocks:
                if not block.closed:
                    issues.append(
                        self.issue(
                            "unclosed-fence",
                            path,
                            block.line,
                            "Code fence is never closed; the rest of the file renders as code",
                        )
                    )
                    # Content of an unclosed fence is the rest of the file
                    continue

                if block.language is None:
                    if self.config.require_language:
                        issues.append(
                            self.issue(
                                "missing-language",
                                path,
                                block.line,
                                "Code fence declares no language",
                                severity=Severity.WARNING,
                            )
                        )
                    continue

                for problem in check_snippet(block):
                    # problem lines are relative to the first line after the fence
                    issues.append(
                        self.issue(
                            "snippet-syntax",
                            path,
                            block.line + problem.line,
                            f"{block.language}: {problem.message}",
                        )
                    )
        return issues
