"""
Bundled stylesheet compilers. Any object with a matching `compile()` method
works with the pipeline; these cover the common cases.
"""

from __future__ import annotations

import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from lightcss.errors import CompilerError, ConfigurationError
from lightcss.pipeline import StyleCompiler


class IdentityCompiler:
    """Returns the source unchanged. Useful for checking shielding by itself."""

    def compile(self, source: str, path: Path) -> str:
        return source


@dataclass
class CommandCompiler:
    """
    Runs an external compiler that reads source on stdin and writes CSS to
    stdout, e.g. `lessc -` or `sass --stdin`. The command runs in the
    stylesheet's directory so relative lookups behave as usual.
    """

    command: Sequence[str]
    encoding: str = "utf-8"

    @classmethod
    def from_string(cls, command_line: str) -> CommandCompiler:
        args = shlex.split(command_line)
        if not args:
            raise ConfigurationError("Compiler command is empty")
        return cls(command=args)

    def compile(self, source: str, path: Path) -> str:
        cwd = path.parent if path.parent.is_dir() else None
        logger.debug("Running {} on {}", shlex.join(self.command), path)
        try:
            proc = subprocess.run(
                list(self.command),
                input=source.encode(self.encoding),
                capture_output=True,
                cwd=cwd,
                check=False,
            )
        except FileNotFoundError as e:
            raise CompilerError(f"Compiler not found: {self.command[0]}") from e
        if proc.returncode != 0:
            stderr = proc.stderr.decode(self.encoding, errors="replace")
            raise CompilerError(
                f"`{shlex.join(self.command)}` failed on {path} (exit {proc.returncode})",
                stderr=stderr,
            )
        return proc.stdout.decode(self.encoding)


@dataclass
class SassCompiler:
    """
    In-process SCSS compilation with libsass (the `sass` extra). The indented
    `.sass` syntax is not supported since placeholders are brace rules.
    """

    output_style: str = "expanded"
    include_paths: list[str] = field(default_factory=list)

    def compile(self, source: str, path: Path) -> str:
        import sass  # pyright: ignore[reportMissingImports]

        include_paths = [str(path.parent), *self.include_paths]
        try:
            return sass.compile(
                string=source,
                output_style=self.output_style,
                include_paths=include_paths,
            )
        except sass.CompileError as e:
            raise CompilerError(f"Sass compilation failed on {path}", stderr=str(e)) from e


def compiler_from_spec(spec: str) -> StyleCompiler:
    """
    Build a compiler from its configured name: `identity`, `sass`, or any other
    string as a command line.
    """
    name = spec.strip()
    if name == "identity":
        return IdentityCompiler()
    if name == "sass":
        return SassCompiler()
    return CommandCompiler.from_string(name)
