"""Expands command-line inputs into the stylesheet files to process."""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

import pathspec

DEFAULT_INCLUDES: list[str] = ["*.less", "*.scss", "*.css"]

# Never descended into.
DEFAULT_EXCLUDES: list[str] = [".git/", "node_modules/", "bower_components/", "dist/", "build/"]


@dataclass(frozen=True)
class FoundFile:
    """A resolved file and the input root it was found under."""

    path: Path
    base: Path

    @property
    def relative(self) -> Path:
        return self.path.relative_to(self.base)


def find_stylesheets(
    paths: Sequence[str | Path], include: Sequence[str] | None = None
) -> list[FoundFile]:
    """
    Resolve files and directories into a list of files sorted by path, with
    duplicates dropped (the first input naming a file sets its base).
    Files named explicitly are always kept, with their own directory as base;
    directories are walked for files matching `include` and are the base of
    everything below them. Missing paths raise `FileNotFoundError`.
    """
    include_spec = pathspec.PathSpec.from_lines("gitignore", include or DEFAULT_INCLUDES)
    exclude_spec = pathspec.PathSpec.from_lines("gitignore", DEFAULT_EXCLUDES)

    found: dict[Path, FoundFile] = {}
    for raw_path in paths:
        p = Path(raw_path)
        if p.is_file():
            resolved = p.resolve()
            found.setdefault(resolved, FoundFile(path=resolved, base=resolved.parent))
        elif p.is_dir():
            root = p.resolve()
            for f in _walk(root, include_spec, exclude_spec):
                found.setdefault(f, FoundFile(path=f, base=root))
        else:
            raise FileNotFoundError(f"Path not found: {raw_path}")
    return [found[path] for path in sorted(found)]


def _walk(
    root: Path, include_spec: pathspec.PathSpec, exclude_spec: pathspec.PathSpec
) -> Iterable[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        # Prune in place so excluded trees are never entered
        dirnames[:] = [d for d in dirnames if not exclude_spec.match_file(d + "/")]
        for filename in filenames:
            if include_spec.match_file(filename):
                yield Path(dirpath) / filename
