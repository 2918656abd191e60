"""
Decides which import targets (or file paths) are left alone.

Glob strings use gitignore wildmatch syntax and are compiled with `pathspec`,
one glob per matcher. Negated globs (`!pattern`) are rejected since a single
glob has nothing to negate.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import pathspec

from lightcss.errors import ConfigurationError

# Ignore everything unless the configuration narrows it.
MATCH_ALL: list[str] = ["**/*"]

# Globs that match any candidate, including ones pathspec normalizes to an
# empty path (`''`, `'./'`, `'/'`).
_MATCH_EVERYTHING = frozenset(["**", "**/*"])

# Package references (`lodash/foo`, `@scope/pkg`) as opposed to relative or
# absolute paths.
_MODULE_PATH_RE: re.Pattern[str] = re.compile(r"^[@a-zA-Z]")


@dataclass(frozen=True)
class IgnoreMatcher:
    """A single compiled glob."""

    glob: str
    _spec: pathspec.PathSpec = field(repr=False, compare=False)

    @classmethod
    def compile(cls, glob: str) -> IgnoreMatcher:
        if glob.startswith("!"):
            raise ConfigurationError(f"Negated ignore patterns are not supported: {glob!r}")
        return cls(glob=glob, _spec=pathspec.PathSpec.from_lines("gitignore", [glob]))

    def test(self, candidate: str) -> bool:
        if self.glob in _MATCH_EVERYTHING:
            return True
        return self._spec.match_file(candidate)


def compile_ignores(globs: Iterable[str]) -> tuple[IgnoreMatcher, ...]:
    """
    Compile glob strings into matchers, preserving order. Blank entries and
    `#` comments are skipped, as they would be in an ignore file.
    """
    return tuple(
        IgnoreMatcher.compile(glob.strip())
        for glob in globs
        if glob.strip() and not glob.strip().startswith("#")
    )


def is_module_path(candidate: str) -> bool:
    """True if `candidate` looks like a package reference rather than a path."""
    return bool(_MODULE_PATH_RE.match(candidate))


def should_ignore(
    candidate: str,
    matchers: Sequence[IgnoreMatcher] | None,
    ignore_modules: bool,
) -> bool:
    """
    Should `candidate` be left untouched? Module references are ignored when
    `ignore_modules` is set; otherwise any matching glob decides.
    """
    if ignore_modules and is_module_path(candidate):
        return True
    if not matchers:
        return False
    return any(m.test(candidate) for m in matchers)
