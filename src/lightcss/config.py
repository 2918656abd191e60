"""
TOML-based config file loading for lightcss.

Searches for `.lightcss.toml`, `lightcss.toml`, or `pyproject.toml [tool.lightcss]`
walking up from the current directory. Config values are merged with CLI flags
using three-way precedence: explicit CLI flags > config file > built-in defaults.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, TypeVar, cast

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

from lightcss.errors import ConfigurationError


@dataclass
class LightCssConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    so the merge can tell "not configured" from "explicitly set to the default".
    """

    # Shielding
    compiler: str | None = None
    ignores: list[str] | None = None
    not_pack_ignore_files: bool | None = None
    ignore_node_modules: bool | None = None
    ext: str | None = None
    # File discovery
    include: list[str] | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".lightcss.toml", "lightcss.toml", "pyproject.toml"]

_VALID_FIELDS = {f.name for f in fields(LightCssConfig)}

# Expected TOML value type per field; list fields hold strings
_FIELD_TYPES: dict[str, type] = {
    "compiler": str,
    "ignores": list,
    "not_pack_ignore_files": bool,
    "ignore_node_modules": bool,
    "ext": str,
    "include": list,
}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`.
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename != "pyproject.toml" or _pyproject_has_lightcss_section(candidate):
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_lightcss_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text())
        return "lightcss" in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> LightCssConfig:
    """
    Load a `LightCssConfig` from a TOML file, either standalone or the
    `[tool.lightcss]` table of a `pyproject.toml`. Values of the wrong type
    raise `ConfigurationError`.
    """
    data = tomllib.loads(config_path.read_text())

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get("lightcss", {})

    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> LightCssConfig:
    """Parse a flat or sectioned TOML dict into LightCssConfig."""
    # Sections like [shielding] and [file-discovery] merge into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key in _VALID_FIELDS:
            _check_type(key, snake_key, value)
            mapped[snake_key] = value

    return LightCssConfig(**mapped)


def _check_type(key: str, field_name: str, value: Any) -> None:
    expected = _FIELD_TYPES[field_name]
    if not isinstance(value, expected):
        raise ConfigurationError(
            f"Config key `{key}` must be a {expected.__name__}, got {type(value).__name__}"
        )
    if expected is list and not all(isinstance(item, str) for item in value):
        raise ConfigurationError(f"Config key `{key}` must be a list of strings")


_T = TypeVar("_T")


def merge_cli_with_config(
    cli_opts: _T,
    config: LightCssConfig | None,
    explicit_flags: set[str],
) -> _T:
    """
    Fill in CLI options from config for every option the user did not pass.
    Precedence: explicit CLI flags > config file > built-in defaults.
    """
    if config is None:
        return cli_opts

    for cfg_field in fields(LightCssConfig):
        cfg_value = getattr(config, cfg_field.name)
        if cfg_value is None or cfg_field.name in explicit_flags:
            continue
        if hasattr(cli_opts, cfg_field.name):
            setattr(cli_opts, cfg_field.name, cfg_value)

    return cli_opts
