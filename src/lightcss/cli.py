#!/usr/bin/env python3
"""
lightcss: Compile stylesheets without letting the compiler touch @import

Common usage:
  lightcss --compiler "lessc -" --ext .css src/styles/ --output-dir dist/
  lightcss --compiler sass --ignore "_*" main.scss -o main.css
  cat main.less | lightcss --compiler "lessc -" -

Imports are hidden from the compiler and restored in the output. By default
every import is left alone; narrow this with --ignore.
"""

from __future__ import annotations

import argparse
import importlib.metadata
import sys
from dataclasses import dataclass
from pathlib import Path

from loguru import logger
from strif import atomic_output_file

from lightcss.compilers import compiler_from_spec
from lightcss.config import find_config_file, load_config, merge_cli_with_config
from lightcss.discovery import find_stylesheets
from lightcss.errors import CompilerError, ConfigurationError, LightCssError
from lightcss.log import configure_logging
from lightcss.pipeline import LightCss, LightCssOptions, StyleFile
from lightcss.shielding import MATCH_ALL

_STDIN = "-"


@dataclass
class Options:
    """Command-line options for the lightcss tool."""

    files: list[str]
    output: str
    output_dir: str | None
    compiler: str | None
    ignores: list[str]
    not_pack_ignore_files: bool
    ignore_node_modules: bool
    ext: str
    include: list[str] | None
    verbose: int
    version: bool


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns `(options, explicit_flags)`. Options that config may supply default
    to `None` so that anything the user actually typed can be told apart.
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="lightcss",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=str,
        default=[],
        help="Input files or directories (use '-' for stdin)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default="-",
        help="Output file for a single input (use '-' for stdout)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        metavar="DIR",
        help="Write each compiled file to DIR as <name>.css",
    )
    parser.add_argument(
        "--compiler",
        type=str,
        default=None,
        metavar="CMD",
        help="Compiler: 'sass' (libsass), 'identity', or a command reading stdin, "
        "e.g. 'lessc -'",
    )
    parser.add_argument(
        "--ignore",
        action="append",
        dest="ignores",
        default=None,
        metavar="PATTERN",
        help="Glob for imports to leave alone; replaces the match-all default. Can be repeated",
    )
    parser.add_argument(
        "--not-pack-ignore-files",
        action="store_true",
        default=None,
        help="Pass files whose own path matches an ignore pattern through uncompiled",
    )
    parser.add_argument(
        "--no-ignore-node-modules",
        action="store_false",
        dest="ignore_node_modules",
        default=None,
        help="Shield package imports like 'lodash/foo' too",
    )
    parser.add_argument(
        "--ext",
        type=str,
        default=None,
        help="Rewrite the extension of restored imports, e.g. '.css'",
    )
    parser.add_argument(
        "--include",
        action="append",
        default=None,
        metavar="PATTERN",
        help="File patterns to pick up when walking directories (default: *.less, *.scss, *.css)",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More logging; repeat for debug"
    )
    parser.add_argument("--version", action="store_true", help="Show version information and exit")
    opts = parser.parse_args(args)

    tracked = (
        "compiler",
        "ignores",
        "not_pack_ignore_files",
        "ignore_node_modules",
        "ext",
        "include",
    )
    explicit_flags = {name for name in tracked if getattr(opts, name) is not None}

    return (
        Options(
            files=opts.files,
            output=opts.output,
            output_dir=opts.output_dir,
            compiler=opts.compiler,
            ignores=opts.ignores if opts.ignores is not None else list(MATCH_ALL),
            not_pack_ignore_files=bool(opts.not_pack_ignore_files),
            ignore_node_modules=opts.ignore_node_modules is not False,
            ext=opts.ext or "",
            include=opts.include,
            verbose=opts.verbose,
            version=opts.version,
        ),
        explicit_flags,
    )


def _read_inputs(options: Options) -> list[StyleFile]:
    files: list[StyleFile] = []
    if _STDIN in options.files:
        cwd = Path.cwd()
        files.append(StyleFile(path=cwd / "stdin", contents=sys.stdin.buffer.read(), base=cwd))
    paths = [f for f in options.files if f != _STDIN]
    if paths:
        files.extend(
            StyleFile.from_path(found.path, base=found.base)
            for found in find_stylesheets(paths, options.include)
        )
    return files


def _output_targets(options: Options, files: list[StyleFile]) -> list[Path | None]:
    """
    Where each file goes: below `--output-dir` keeping its path relative to its
    input root, the `--output` file, or `None` for stdout.
    """
    if options.output_dir:
        out_dir = Path(options.output_dir)
        return [out_dir / file.relative.with_suffix(".css") for file in files]
    if len(files) == 1 and options.output != "-":
        return [Path(options.output)]
    return [None] * len(files)


def _find_clash(files: list[StyleFile], targets: list[Path | None]) -> str | None:
    claimed: dict[Path, StyleFile] = {}
    for file, target in zip(files, targets):
        if target is None:
            continue
        if target in claimed:
            return f"{claimed[target].path} and {file.path} would both be written to {target}"
        claimed[target] = file
    return None


def _write_output(result: StyleFile, target: Path | None) -> None:
    if target is None:
        sys.stdout.write(result.text)
        return
    with atomic_output_file(target, make_parents=True) as tmp_path:
        Path(tmp_path).write_bytes(result.text.encode(result.encoding))
    logger.info("Wrote {}", target)


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the lightcss CLI.

    Returns the exit code: 0 on success, 1 for usage or configuration errors,
    2 when processing a file fails.
    """
    options, explicit_flags = _parse_args(args)

    if options.version:
        try:
            print(f"v{importlib.metadata.version('lightcss')}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    configure_logging(options.verbose)

    if not options.files:
        print(
            "Error: No input specified. Provide files, directories, or '-' for stdin."
            " Use --help for more options.",
            file=sys.stderr,
        )
        return 1

    try:
        config_path = find_config_file(Path.cwd())
        if config_path:
            logger.info("Using config {}", config_path)
            merge_cli_with_config(options, load_config(config_path), explicit_flags)
        pipeline = LightCss(
            LightCssOptions(
                compiler=compiler_from_spec(options.compiler) if options.compiler else None,
                ignores=options.ignores,
                not_pack_ignore_files=options.not_pack_ignore_files,
                ignore_node_modules=options.ignore_node_modules,
                ext=options.ext,
            )
        )
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        if not options.compiler:
            print("Pass --compiler or set `compiler` in config.", file=sys.stderr)
        return 1

    try:
        # Files kept out of the bundle are not written anywhere: their source is
        # not compiled CSS.
        inputs: list[StyleFile] = []
        for file in _read_inputs(options):
            if pipeline.is_file_ignored(file):
                logger.info("Not packing ignored file {}", file.path)
            else:
                inputs.append(file)

        if len(inputs) > 1 and not options.output_dir and options.output != "-":
            print("Error: --output takes a single input; use --output-dir", file=sys.stderr)
            return 1
        targets = _output_targets(options, inputs)
        clash = _find_clash(inputs, targets)
        if clash:
            print(f"Error: {clash}", file=sys.stderr)
            return 1

        for file, target in zip(inputs, targets):
            result = pipeline.process(file)
            if result is not None:
                _write_output(result, target)
    except LightCssError as e:
        print(f"Error: {e}", file=sys.stderr)
        if isinstance(e, CompilerError) and e.stderr:
            print(e.stderr.rstrip(), file=sys.stderr)
        return 2
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
