"""
Feeds one stylesheet at a time through import extraction, an external
compiler, and import restoration.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import BinaryIO, Protocol, runtime_checkable

from loguru import logger

from lightcss.errors import ConfigurationError, UnsupportedInputError
from lightcss.shielding import (
    MATCH_ALL,
    IgnoreMatcher,
    compile_ignores,
    extract_imports,
    restore_imports,
    should_ignore,
)


@runtime_checkable
class StyleCompiler(Protocol):
    """
    Anything that turns stylesheet source into compiled CSS. Errors raised by
    `compile()` propagate to the caller unchanged.
    """

    def compile(self, source: str, path: Path) -> str: ...


@dataclass(frozen=True)
class StyleFile:
    """
    A stylesheet in flight. `contents` is `None` for an empty entry, `bytes`
    when buffered, or a readable binary stream. `base` is the root the file was
    found under; `relative` is the path below it.
    """

    path: Path
    contents: bytes | BinaryIO | None
    encoding: str = "utf-8"
    base: Path | None = None

    @classmethod
    def from_path(
        cls, path: Path, base: Path | None = None, encoding: str = "utf-8"
    ) -> StyleFile:
        return cls(path=path, contents=path.read_bytes(), encoding=encoding, base=base)

    @property
    def relative(self) -> Path:
        """Path below `base`, or just the file name when there is no base."""
        if self.base is not None and self.path.is_relative_to(self.base):
            return self.path.relative_to(self.base)
        return Path(self.path.name)

    def is_null(self) -> bool:
        return self.contents is None

    def is_buffer(self) -> bool:
        return isinstance(self.contents, (bytes, bytearray))

    def is_stream(self) -> bool:
        return not self.is_null() and not self.is_buffer() and hasattr(self.contents, "read")

    @property
    def text(self) -> str:
        if not isinstance(self.contents, (bytes, bytearray)):
            raise UnsupportedInputError(f"No buffered contents for {self.path}")
        return bytes(self.contents).decode(self.encoding)

    def with_text(self, text: str) -> StyleFile:
        return replace(self, contents=text.encode(self.encoding))


@dataclass
class LightCssOptions:
    """
    Pipeline configuration.

    `ignores` are globs for import targets to leave alone (default: all of them).
    With `not_pack_ignore_files`, a file whose own path matches is passed
    through untouched. `ext` (with leading dot) rewrites the extension of
    every restored import; empty means no rewrite.
    """

    compiler: StyleCompiler | None = None
    ignores: list[str] = field(default_factory=lambda: list(MATCH_ALL))
    not_pack_ignore_files: bool = False
    ignore_node_modules: bool = True
    ext: str = ""


class LightCss:
    """
    The import-shielding pipeline. Construct once, then call `process()` per
    file. Ignore matchers are compiled here and shared read-only; the import
    map is created per call and never outlives it.
    """

    def __init__(self, options: LightCssOptions) -> None:
        if options.compiler is None:
            raise ConfigurationError("Compiler is invalid!")
        self._options: LightCssOptions = options
        self._compiler: StyleCompiler = options.compiler
        self._matchers: tuple[IgnoreMatcher, ...] = compile_ignores(options.ignores)

    @property
    def options(self) -> LightCssOptions:
        return self._options

    def is_file_ignored(self, file: StyleFile) -> bool:
        """
        Whether `not_pack_ignore_files` applies to this file. The globs are matched
        against the path below the file's `base`, so folders above the project
        never count. A file on disk is never a package reference.
        """
        return self._options.not_pack_ignore_files and should_ignore(
            file.relative.as_posix(), self._matchers, ignore_modules=False
        )

    def process(self, file: StyleFile) -> StyleFile | None:
        """
        Run one file through the pipeline. Returns `None` for an empty file,
        the file unchanged if its path is ignored, else the compiled file.
        """
        if file.is_null():
            logger.debug("Skipping empty file {}", file.path)
            return None
        if self.is_file_ignored(file):
            logger.debug("Passing through ignored file {}", file.path)
            return file
        if file.is_stream():
            raise UnsupportedInputError("Streaming not supported.")

        shielded, import_map = extract_imports(
            file.text, self._matchers, self._options.ignore_node_modules
        )
        logger.debug("Shielded {} import(s) in {}", len(import_map), file.path)

        compiled = self._compiler.compile(shielded, file.path)

        restored = restore_imports(compiled, import_map, self._options.ext)
        return file.with_text(restored)

    def process_all(self, files: Iterable[StyleFile]) -> Iterator[StyleFile]:
        """Process files one after another, yielding every emitted result."""
        for file in files:
            result = self.process(file)
            if result is not None:
                yield result
