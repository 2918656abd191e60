"""Tests for the lightcss command line."""

from __future__ import annotations

import shlex
import sys
from pathlib import Path

import pytest

from lightcss.cli import main

SOURCE = "@import './_vars.less';\n@import './theme.less';\n.a { color: red; }\n"


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "main.less").write_text(SOURCE)
    return tmp_path


def test_help(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["--help"])
    assert exc.value.code == 0
    out = capsys.readouterr().out
    assert "lightcss: Compile stylesheets without letting the compiler touch @import" in out
    assert "Common usage:" in out


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--version"]) == 0
    assert capsys.readouterr().out.startswith(("v", "unknown"))


def test_no_input(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 1
    assert "No input specified" in capsys.readouterr().err


def test_missing_compiler(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["main.less"]) == 1
    assert "Compiler is invalid!" in capsys.readouterr().err


def test_stdout_output(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["--compiler", "identity", "--ignore", "_*", "--ext", ".css", "main.less"])
    assert code == 0
    assert capsys.readouterr().out == (
        "@import './_vars.less';\n@import './theme.css';\n.a { color: red; }\n"
    )


def test_output_file(project: Path) -> None:
    assert main(["--compiler", "identity", "main.less", "-o", "out/main.css"]) == 0
    assert (project / "out" / "main.css").read_text() == SOURCE


def test_output_dir(project: Path) -> None:
    styles = project / "styles"
    styles.mkdir()
    (styles / "theme.less").write_text("@import './colors.less';\n")
    code = main(
        ["--compiler", "identity", "--ignore", "_*", "--ext", ".css", ".", "--output-dir", "dist"]
    )
    assert code == 0
    assert (project / "dist" / "main.css").read_text() == (
        "@import './_vars.less';\n@import './theme.css';\n.a { color: red; }\n"
    )
    assert (project / "dist" / "styles" / "theme.css").read_text() == "@import './colors.css';\n"


def test_output_dir_clash_across_input_roots(
    project: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    for folder in ("a", "b"):
        (project / folder).mkdir()
        (project / folder / "main.less").write_text(f".{folder} {{}}\n")
    # Each directory input is the root of the files below it
    assert main(["--compiler", "identity", "a", "b", "--output-dir", "dist"]) == 1
    err = capsys.readouterr().err
    assert "would both be written to" in err
    assert "main.css" in err


def test_output_dir_walk_keeps_structure(project: Path) -> None:
    for folder in ("a", "b"):
        (project / folder).mkdir()
        (project / folder / "main.less").write_text(f".{folder} {{}}\n")
    (project / "main.less").unlink()
    assert main(["--compiler", "identity", ".", "--output-dir", "dist"]) == 0
    assert (project / "dist" / "a" / "main.css").read_text() == ".a {}\n"
    assert (project / "dist" / "b" / "main.css").read_text() == ".b {}\n"


def test_output_dir_name_clash_fails(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "main.scss").write_text(".b {}\n")
    assert main(["--compiler", "identity", ".", "--output-dir", "dist"]) == 1
    assert "would both be written to" in capsys.readouterr().err
    assert not (project / "dist").exists()


def test_output_requires_single_input(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "other.less").write_text(".b{}")
    assert main(["--compiler", "identity", "main.less", "other.less", "-o", "x.css"]) == 1
    assert "--output-dir" in capsys.readouterr().err


def test_config_file_supplies_options(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "lightcss.toml").write_text(
        'compiler = "identity"\nignores = ["_*"]\next = ".css"\n'
    )
    assert main(["main.less"]) == 0
    assert "@import './theme.css';" in capsys.readouterr().out


def test_cli_flag_overrides_config(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "lightcss.toml").write_text('compiler = "identity"\next = ".css"\n')
    assert main(["--ext", ".scss", "--ignore", "_*", "main.less"]) == 0
    assert "@import './theme.scss';" in capsys.readouterr().out


def test_compiler_failure_exit_code(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    script = "import sys; sys.stderr.write('boom'); sys.exit(3)"
    failing = f"{shlex.quote(sys.executable)} -c {shlex.quote(script)}"
    assert main(["--compiler", failing, "--ignore", "_*", "main.less"]) == 2
    err = capsys.readouterr().err
    assert "exit 3" in err
    assert "boom" in err


def test_missing_input_file(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--compiler", "identity", "nope.less"]) == 2
    assert "Path not found" in capsys.readouterr().err


def test_not_pack_ignore_files_not_written(project: Path) -> None:
    (project / "_vars.less").write_text("@primary: red;\n")
    code = main(
        [
            "--compiler",
            "identity",
            "--ignore",
            "_*",
            "--not-pack-ignore-files",
            ".",
            "--output-dir",
            "dist",
        ]
    )
    assert code == 0
    assert (project / "dist" / "main.css").exists()
    assert not (project / "dist" / "_vars.css").exists()


def test_not_pack_ignore_files_stdout(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "_vars.less").write_text("@primary: red;\n")
    args = ["--compiler", "identity", "--ignore", "_*", "--not-pack-ignore-files", "_vars.less"]
    assert main(args) == 0
    assert capsys.readouterr().out == ""


def test_invalid_config_value(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (project / "lightcss.toml").write_text('compiler = "identity"\nignores = "_*"\n')
    assert main(["main.less"]) == 1
    assert "`ignores` must be a list" in capsys.readouterr().err


def test_negated_ignore_rejected(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--compiler", "identity", "--ignore", "!main.less", "main.less"]) == 1
    err = capsys.readouterr().err
    assert "Negated ignore patterns are not supported" in err
    assert "Pass --compiler" not in err
