"""Content integrity checks."""

from typing import Dict, Iterable, List, Optional, Type

from loguru import logger

from curriculum_lint.checks.base import Check
from curriculum_lint.checks.external import ExternalLinkCheck
from curriculum_lint.checks.links import LinkCheck
from curriculum_lint.checks.orphans import OrphanCheck
from curriculum_lint.checks.parse import ParseCheck
from curriculum_lint.checks.prerequisites import PrerequisiteCheck
from curriculum_lint.checks.snippets import SnippetCheck
from curriculum_lint.config import CurriculumConfig
from curriculum_lint.markdown import Curriculum
from curriculum_lint.report import CheckReport

ALL_CHECKS: Dict[str, Type[Check]] = {
    check.name: check
    for check in (
        ParseCheck,
        LinkCheck,
        SnippetCheck,
        OrphanCheck,
        PrerequisiteCheck,
        ExternalLinkCheck,
    )
}

# Checks that need the network run only when asked for
OPT_IN_CHECKS = {ExternalLinkCheck.name}


def select_checks(config: CurriculumConfig, names: Optional[Iterable[str]] = None) -> List[str]:
    """Pick the check names to run.

    Raises:
        ValueError: If a name is not a known check
    """
    if names:
        selected = list(dict.fromkeys(names))
        unknown = [n for n in selected if n not in ALL_CHECKS]
        if unknown:
            raise ValueError(
                f"Unknown check(s): {', '.join(unknown)}. Known: {', '.join(ALL_CHECKS)}"
            )
    else:
        selected = [
            n for n in ALL_CHECKS if n not in OPT_IN_CHECKS or config.external
        ]
    return [n for n in selected if n not in config.disabled_rules]


async def run_checks(
    curriculum: Curriculum,
    config: CurriculumConfig,
    names: Optional[Iterable[str]] = None,
    checks: Optional[List[Check]] = None,
) -> CheckReport:
    """Run checks over a curriculum and collect their issues.

    Args:
        curriculum: Loaded curriculum
        config: Configuration
        names: Check names to run, defaults to every check not opted out
        checks: Pre-built check instances, used instead of names

    Returns:
        CheckReport with issues sorted by path, line and rule
    """
    if checks is None:
        checks = [ALL_CHECKS[name](config) for name in select_checks(config, names)]

    report = CheckReport(
        lessons_checked=len(curriculum.lessons),
        rules=[check.name for check in checks],
        strict=config.strict,
    )
    for check in checks:
        logger.debug(f"Running check: {check.name}")
        issues = await check.run(curriculum)
        report.issues.extend(i for i in issues if i.rule not in config.disabled_rules)

    report.issues.sort(key=lambda i: (i.path, i.line, i.rule))
    logger.info(
        f"Checked {report.lessons_checked} lessons: "
        f"{len(report.errors)} errors, {len(report.warnings)} warnings"
    )
    return report


__all__ = [
    "ALL_CHECKS",
    "Check",
    "ExternalLinkCheck",
    "LinkCheck",
    "OrphanCheck",
    "ParseCheck",
    "PrerequisiteCheck",
    "SnippetCheck",
    "run_checks",
    "select_checks",
]
