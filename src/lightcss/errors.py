"""Plugin-level errors raised by lightcss."""

from __future__ import annotations

PLUGIN_NAME = "lightcss"


class LightCssError(Exception):
    """
    Base error for everything lightcss raises itself. The message is prefixed
    with the plugin name so it reads well when surfaced by a build tool.
    """

    plugin: str = PLUGIN_NAME

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message: str = message

    def __str__(self) -> str:
        return f"{self.plugin}: {self.message}"


class ConfigurationError(LightCssError):
    """The pipeline was configured without a usable compiler."""


class UnsupportedInputError(LightCssError):
    """The input file is a live stream rather than buffered content."""


class CompilerError(LightCssError):
    """A bundled compiler failed. User-supplied compilers raise their own errors."""

    def __init__(self, message: str, stderr: str = "") -> None:
        super().__init__(message)
        self.stderr: str = stderr
