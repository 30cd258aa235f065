"""Check external URLs over the network. Opt-in."""

from typing import Dict, List, Optional, Tuple

import httpx

from curriculum_lint.checks.base import Check
from curriculum_lint.config import CurriculumConfig
from curriculum_lint.markdown import Curriculum, LinkKind
from curriculum_lint.report import Issue, Severity
from curriculum_lint.services.external_links import check_urls


def request_url(target: str) -> Optional[str]:
    """URL to request for a link target, None for non-HTTP schemes."""
    url = target.strip().split("#", 1)[0]
    if url.startswith("//"):
        return f"https:{url}"
    if url.lower().startswith(("http://", "https://")):
        return url
    return None


class ExternalLinkCheck(Check):
    name = "external"
    rules = ("dead-url",)

    def __init__(
        self, config: CurriculumConfig, transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        super().__init__(config)
        self.transport = transport

    async def run(self, curriculum: Curriculum) -> List[Issue]:
        occurrences: Dict[str, List[Tuple[str, int]]] = {}
        for path, lesson in sorted(curriculum.lessons.items()):
            for link in lesson.links:
                if link.kind != LinkKind.EXTERNAL:
                    continue
                url = request_url(link.target)
                if url is not None:
                    occurrences.setdefault(url, []).append((path, link.line))

        statuses = await check_urls(
            occurrences,
            timeout=self.config.timeout,
            concurrency=self.config.concurrency,
            transport=self.transport,
        )

        issues: List[Issue] = []
        for url, status in statuses.items():
            if status.ok:
                continue
            for path, line in occurrences[url]:
                issues.append(
                    self.issue(
                        "dead-url",
                        path,
                        line,
                        f"{url} ({status.describe()})",
                        severity=Severity.WARNING,
                    )
                )
        return issues
