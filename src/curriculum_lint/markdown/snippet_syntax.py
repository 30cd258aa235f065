"""Syntax checks for fenced snippets, keyed by declared language.

Snippets are never executed. Languages with a parser on hand are parsed;
brace languages get a delimiter balance scan that understands their
string and comment syntax.
"""

import ast
import json
import tomllib
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Optional

import yaml

from curriculum_lint.markdown.schemas import CodeBlock

# Console transcripts and prose blocks
OUTPUT_LANGUAGES = frozenset(
    {"text", "txt", "plaintext", "plain", "console", "output", "shell-session", "none", "log"}
)

PYTHON_LANGUAGES = frozenset({"python", "py", "python3", "pycon"})


@dataclass(frozen=True)
class CommentSyntax:
    line: FrozenSet[str]
    block: Optional[tuple] = None
    nested_blocks: bool = False
    # how a single quote opens a literal: "string" up to the next quote on the line,
    # "char" only in the 'x' or '\n' shape (lifetimes, primes), "none" never
    single_quotes: str = "string"
    primes: bool = False
    backtick_strings: bool = False
    triple_quotes: bool = False


C_STYLE = CommentSyntax(line=frozenset({"//"}), block=("/*", "*/"))

HASKELL = CommentSyntax(
    line=frozenset({"--"}),
    block=("{-", "-}"),
    nested_blocks=True,
    single_quotes="char",
    primes=True,
)

BRACE_LANGUAGES: Dict[str, CommentSyntax] = {
    "scala": CommentSyntax(
        line=frozenset({"//"}), block=("/*", "*/"), nested_blocks=True, triple_quotes=True
    ),
    "sbt": CommentSyntax(
        line=frozenset({"//"}), block=("/*", "*/"), nested_blocks=True, triple_quotes=True
    ),
    "java": CommentSyntax(line=frozenset({"//"}), block=("/*", "*/"), triple_quotes=True),
    "kotlin": CommentSyntax(
        line=frozenset({"//"}), block=("/*", "*/"), nested_blocks=True, triple_quotes=True
    ),
    "c": C_STYLE,
    "cpp": C_STYLE,
    "c++": C_STYLE,
    "csharp": C_STYLE,
    "cs": C_STYLE,
    "go": CommentSyntax(line=frozenset({"//"}), block=("/*", "*/"), backtick_strings=True),
    "rust": CommentSyntax(
        line=frozenset({"//"}), block=("/*", "*/"), nested_blocks=True, single_quotes="char"
    ),
    "swift": CommentSyntax(
        line=frozenset({"//"}), block=("/*", "*/"), nested_blocks=True, single_quotes="none"
    ),
    "javascript": CommentSyntax(
        line=frozenset({"//"}), block=("/*", "*/"), backtick_strings=True
    ),
    "js": CommentSyntax(line=frozenset({"//"}), block=("/*", "*/"), backtick_strings=True),
    "typescript": CommentSyntax(
        line=frozenset({"//"}), block=("/*", "*/"), backtick_strings=True
    ),
    "ts": CommentSyntax(line=frozenset({"//"}), block=("/*", "*/"), backtick_strings=True),
    "groovy": C_STYLE,
    "dart": C_STYLE,
    "php": CommentSyntax(line=frozenset({"//", "#"}), block=("/*", "*/")),
    "haskell": HASKELL,
    "hs": HASKELL,
    "ruby": CommentSyntax(line=frozenset({"#"})),
    "clojure": CommentSyntax(line=frozenset({";"}), single_quotes="none"),
    "lisp": CommentSyntax(line=frozenset({";"}), single_quotes="none"),
}

PAIRS = {")": "(", "]": "[", "}": "{"}


@dataclass
class SnippetProblem:
    """A syntax problem, with a line relative to the snippet body (1-based)."""

    message: str
    line: int = 1


def _pycon_source(content: str) -> str:
    """Reduce a REPL transcript to its source lines.

    Output lines become blank lines so error line numbers still match the transcript.
    """
    source = []
    for line in content.splitlines():
        if line.startswith((">>> ", "... ")) or line in (">>>", "..."):
            source.append(line[4:])
        else:
            source.append("")
    return "\n".join(source)


def check_python(content: str) -> List[SnippetProblem]:
    if any(line.startswith(">>>") for line in content.splitlines()):
        content = _pycon_source(content)
    try:
        ast.parse(content)
    except SyntaxError as e:
        return [SnippetProblem(f"Python syntax error: {e.msg}", e.lineno or 1)]
    return []


def check_json(content: str) -> List[SnippetProblem]:
    try:
        json.loads(content)
    except json.JSONDecodeError as e:
        return [SnippetProblem(f"Invalid JSON: {e.msg}", e.lineno)]
    return []


def check_yaml(content: str) -> List[SnippetProblem]:
    try:
        list(yaml.safe_load_all(content))
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = mark.line + 1 if mark is not None else 1
        problem = getattr(e, "problem", None) or str(e)
        return [SnippetProblem(f"Invalid YAML: {problem}", line)]
    return []


def check_toml(content: str) -> List[SnippetProblem]:
    try:
        tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        return [SnippetProblem(f"Invalid TOML: {e}", getattr(e, "lineno", 1) or 1)]
    return []


def _char_literal_length(content: str, i: int, syntax: CommentSyntax) -> int:
    """Characters to skip for a single quote at i when quotes only delimit char literals.

    Anything that is not a char literal (a lifetime, a type variable tick,
    a prime on an identifier) skips just the quote.
    """
    if syntax.single_quotes == "none":
        return 1
    if syntax.primes and i > 0 and (content[i - 1].isalnum() or content[i - 1] in "_'"):
        return 1

    nxt = content[i + 1 : i + 2]
    if nxt == "\\":
        # escapes such as '\n', '\'', '\u{1F600}' or '\x41'
        end = content.find("'", i + 3)
        if end != -1 and "\n" not in content[i:end] and end - i <= 12:
            return end - i + 1
        return 1
    if nxt and nxt != "\n" and content[i + 2 : i + 3] == "'":
        return 3
    return 1


def check_balance(content: str, syntax: CommentSyntax) -> List[SnippetProblem]:
    """Check that (), [] and {} pair up outside strings and comments."""
    stack: List[tuple] = []
    line = 1
    i = 0
    n = len(content)
    block_open, block_close = syntax.block or (None, None)

    while i < n:
        ch = content[i]

        if ch == "\n":
            line += 1
            i += 1
            continue

        # Line comments
        if any(content.startswith(marker, i) for marker in syntax.line):
            end = content.find("\n", i)
            i = n if end == -1 else end
            continue

        # Block comments
        if block_open and content.startswith(block_open, i):
            depth = 1
            start_line = line
            i += len(block_open)
            while i < n and depth:
                if syntax.nested_blocks and content.startswith(block_open, i):
                    depth += 1
                    i += len(block_open)
                elif content.startswith(block_close, i):
                    depth -= 1
                    i += len(block_close)
                else:
                    if content[i] == "\n":
                        line += 1
                    i += 1
            if depth:
                return [SnippetProblem("Unterminated block comment", start_line)]
            continue

        # Multi-line strings
        if syntax.triple_quotes and content.startswith('"""', i):
            end = content.find('"""', i + 3)
            if end == -1:
                return [SnippetProblem("Unterminated string literal", line)]
            line += content.count("\n", i, end)
            i = end + 3
            continue

        if ch == "`" and syntax.backtick_strings:
            end = content.find("`", i + 1)
            if end == -1:
                return [SnippetProblem("Unterminated template string", line)]
            line += content.count("\n", i, end)
            i = end + 1
            continue

        if ch == "'" and syntax.single_quotes != "string":
            i += _char_literal_length(content, i, syntax)
            continue

        if ch == '"' or ch == "'":
            j = i + 1
            while j < n and content[j] != ch and content[j] != "\n":
                j += 2 if content[j] == "\\" else 1
            if j >= n or content[j] == "\n":
                if ch == "'":
                    # Scala symbols and type-level ticks, not a literal
                    i += 1
                    continue
                return [SnippetProblem("Unterminated string literal", line)]
            i = j + 1
            continue

        if ch in "([{":
            stack.append((ch, line))
        elif ch in PAIRS:
            if not stack:
                return [SnippetProblem(f"Unmatched '{ch}'", line)]
            opener, opened_at = stack.pop()
            if opener != PAIRS[ch]:
                return [
                    SnippetProblem(f"Mismatched '{ch}' closes '{opener}' opened on line {opened_at}", line)
                ]
        i += 1

    if stack:
        opener, opened_at = stack[-1]
        return [SnippetProblem(f"Unclosed '{opener}'", opened_at)]
    return []


PARSERS: Dict[str, Callable[[str], List[SnippetProblem]]] = {
    **{name: check_python for name in PYTHON_LANGUAGES},
    "json": check_json,
    "yaml": check_yaml,
    "yml": check_yaml,
    "toml": check_toml,
}


def is_checked_language(language: Optional[str]) -> bool:
    return language is not None and (language in PARSERS or language in BRACE_LANGUAGES)


def check_snippet(block: CodeBlock) -> List[SnippetProblem]:
    """Check a snippet's syntax for its declared language.

    Output blocks, undeclared and unknown languages are not checked.
    """
    language = block.language
    if language is None or language in OUTPUT_LANGUAGES:
        return []

    parser = PARSERS.get(language)
    if parser is not None:
        return parser(block.content)

    syntax = BRACE_LANGUAGES.get(language)
    if syntax is not None:
        return check_balance(block.content, syntax)

    return []
