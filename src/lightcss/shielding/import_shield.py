"""
Save and restore `@import` statements around a stylesheet compiler.

Each import that should be shielded is replaced by a placeholder rule such as
`css-light0{display:block}`. A rule with a body survives compilers that strip
comments, and the index in its selector maps it back to the original text.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from loguru import logger

from lightcss.shielding.ignore_rules import IgnoreMatcher, should_ignore

# `@import './foo.less';` with either quote style. The statement must end right
# after the closing quote, with a `;` or at the end of the line, so media
# queries (`@import 'x' print;`) and import lists are left to the compiler.
IMPORT_PATTERN: re.Pattern[str] = re.compile(
    r"""
    @import\s*
    (?P<quote>['"])
    (?P<path>[^'"]*)
    (?P=quote)
    (?:[ \t]*;|(?=[ \t]*(?:\r?\n|$)))
    """,
    re.VERBOSE | re.MULTILINE,
)

_PLACEHOLDER_PREFIX = "css-light"

# Compilers are free to reformat the rule, so allow whitespace everywhere.
PLACEHOLDER_PATTERN: re.Pattern[str] = re.compile(
    rf"{_PLACEHOLDER_PREFIX}(?P<index>\d+)\s*\{{\s*display\s*:\s*block\s*;?\s*\}}",
    re.MULTILINE,
)

# A file extension immediately before the closing quote.
_EXTENSION_RE: re.Pattern[str] = re.compile(r"(\.[a-zA-Z0-9]+)(?=['\"])")

ImportMap = list[str]
"""Original import statements of one file, indexed by placeholder number."""


def make_placeholder(index: int) -> str:
    return f"{_PLACEHOLDER_PREFIX}{index}{{display:block}}"


def extract_imports(
    content: str,
    matchers: Sequence[IgnoreMatcher] | None,
    ignore_modules: bool,
) -> tuple[str, ImportMap]:
    """
    Replace every import that is not ignored with a placeholder.

    Returns `(new_content, import_map)` where `import_map[i]` is the exact text
    replaced by placeholder `i`. Ignored imports stay in place and get no entry.
    """
    import_map: ImportMap = []

    def replace_import(match: re.Match[str]) -> str:
        if should_ignore(match.group("path"), matchers, ignore_modules):
            return match.group(0)
        import_map.append(match.group(0))
        return make_placeholder(len(import_map) - 1)

    new_content = IMPORT_PATTERN.sub(replace_import, content)
    return new_content, import_map


def rewrite_extension(statement: str, ext: str) -> str:
    """
    Swap the extension right before the closing quote, e.g.
    `@import './foo.less';` -> `@import './foo.css';`. Statements without an
    extension are returned unchanged.
    """
    return _EXTENSION_RE.sub(lambda _m: ext, statement, count=1)


def restore_imports(content: str, import_map: Sequence[str], ext: str | None = None) -> str:
    """
    Inverse of `extract_imports()`, optionally rewriting extensions.

    A placeholder whose index has no entry (the compiler duplicated or invented
    one) is left as is and reported as a warning.
    """

    def replace_placeholder(match: re.Match[str]) -> str:
        index = int(match.group("index"))
        if index >= len(import_map):
            logger.warning(
                "Unresolved import placeholder {!r}: index {} but only {} imports recorded",
                match.group(0),
                index,
                len(import_map),
            )
            return match.group(0)
        statement = import_map[index]
        return rewrite_extension(statement, ext) if ext else statement

    return PLACEHOLDER_PATTERN.sub(replace_placeholder, content)
