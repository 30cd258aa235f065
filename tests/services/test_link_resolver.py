"""Tests for link resolution."""

import pytest

from curriculum_lint.markdown import Link, LinkKind
from curriculum_lint.services import LinkResolver, LinkStatus


@pytest.fixture
def resolver(curriculum_factory):
    curriculum = curriculum_factory(
        {
            "README.md": "# Bootcamp\n",
            "basics/README.md": "# Basics\n",
            "basics/closures.md": "# Closures\n\n## Capturing Variables\n",
            "basics/my notes.md": "# Notes\n",
            "advanced/typeclasses.md": "---\ntitle: Type Classes\n---\n# Typeclasses\n",
            "advanced/monads.md": "# Monads\n\n## Laws\n",
        },
        assets={"advanced/diagram.png", "code/Main.scala"},
    )
    return LinkResolver(curriculum)


def link(target: str, kind: LinkKind = LinkKind.INTERNAL) -> Link:
    return Link(target=target, line=1, kind=kind)


def lesson(resolver: LinkResolver, path: str):
    return resolver.curriculum.lessons[path]


@pytest.mark.parametrize(
    "source,target,expected_status,expected_target",
    [
        ("basics/README.md", "closures.md", LinkStatus.OK, "basics/closures.md"),
        ("basics/README.md", "./closures.md", LinkStatus.OK, "basics/closures.md"),
        ("advanced/monads.md", "../basics/closures.md", LinkStatus.OK, "basics/closures.md"),
        ("advanced/monads.md", "/basics/closures.md", LinkStatus.OK, "basics/closures.md"),
        ("advanced/monads.md", "diagram.png", LinkStatus.OK, "advanced/diagram.png"),
        ("README.md", "code/Main.scala#L10", LinkStatus.OK, "code/Main.scala"),
        ("README.md", "basics/", LinkStatus.OK, "basics/README.md"),
        ("README.md", "basics", LinkStatus.OK, "basics/README.md"),
        ("README.md", "code", LinkStatus.OK, "code"),
        ("advanced/monads.md", "typeclasses", LinkStatus.OK, "advanced/typeclasses.md"),
        ("basics/README.md", "my%20notes.md", LinkStatus.OK, "basics/my notes.md"),
        ("basics/README.md", "closures.md#capturing-variables", LinkStatus.OK, "basics/closures.md"),
        ("basics/README.md", "closures.md#missing", LinkStatus.MISSING_ANCHOR, "basics/closures.md"),
        ("basics/README.md", "functors.md", LinkStatus.MISSING_FILE, "basics/functors.md"),
        ("README.md", "../outside.md", LinkStatus.OUTSIDE_ROOT, None),
        ("basics/README.md", "../../outside.md", LinkStatus.OUTSIDE_ROOT, None),
    ],
)
def test_resolve_internal(resolver, source, target, expected_status, expected_target):
    resolution = resolver.resolve(lesson(resolver, source), link(target))
    assert resolution.status == expected_status
    assert resolution.target == expected_target


def test_resolve_anchor_in_same_lesson(resolver):
    source = lesson(resolver, "advanced/monads.md")
    assert resolver.resolve(source, link("#laws", LinkKind.ANCHOR)).ok
    assert (
        resolver.resolve(source, link("#nope", LinkKind.ANCHOR)).status
        == LinkStatus.MISSING_ANCHOR
    )


def test_anchor_match_is_case_insensitive(resolver):
    source = lesson(resolver, "advanced/monads.md")
    assert resolver.resolve(source, link("#Laws", LinkKind.ANCHOR)).ok


def test_external_links_are_not_resolved(resolver):
    source = lesson(resolver, "README.md")
    resolution = resolver.resolve(source, link("https://example.com", LinkKind.EXTERNAL))
    assert resolution.status == LinkStatus.EXTERNAL
    assert resolution.ok


def test_empty_target_is_missing(resolver):
    source = lesson(resolver, "README.md")
    assert resolver.resolve(source, link("")).status == LinkStatus.MISSING_FILE


@pytest.mark.parametrize(
    "text,expected",
    [
        ("basics/closures.md", "basics/closures.md"),
        ("basics/closures", "basics/closures.md"),
        ("closures", "basics/closures.md"),
        ("Closures", "basics/closures.md"),
        ("Type Classes", "advanced/typeclasses.md"),
        ("type classes", "advanced/typeclasses.md"),
        ("Functors", None),
        ("", None),
    ],
)
def test_resolve_wikilink(resolver, text, expected):
    assert resolver.resolve_wikilink(text) == expected


def test_wikilink_with_fragment(resolver):
    source = lesson(resolver, "README.md")
    ok = resolver.resolve(source, link("monads#laws", LinkKind.WIKILINK))
    assert ok.status == LinkStatus.OK
    assert ok.target == "advanced/monads.md"

    missing = resolver.resolve(source, link("Functors", LinkKind.WIKILINK))
    assert missing.status == LinkStatus.MISSING_FILE


def test_ambiguous_wikilink_picks_first_path(curriculum_factory):
    curriculum = curriculum_factory({"a/intro.md": "# A\n", "b/intro.md": "# B\n"})
    assert LinkResolver(curriculum).resolve_wikilink("intro") == "a/intro.md"


@pytest.mark.parametrize(
    "source_dir,path,expected",
    [
        ("", "a.md", "a.md"),
        ("x", "../a.md", "a.md"),
        ("x/y", "../../a.md", "a.md"),
        ("x", "../../a.md", None),
        ("x", "/a.md", "a.md"),
        ("x", "./b/../c.md", "x/c.md"),
    ],
)
def test_normalize(source_dir, path, expected):
    assert LinkResolver.normalize(source_dir, path) == expected
