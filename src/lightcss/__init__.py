"""
lightcss: keep stylesheet `@import` statements intact through a compiler.
"""

from lightcss.errors import (
    CompilerError,
    ConfigurationError,
    LightCssError,
    UnsupportedInputError,
)
from lightcss.pipeline import LightCss, LightCssOptions, StyleCompiler, StyleFile
from lightcss.shielding import extract_imports, restore_imports, should_ignore

__all__ = [
    "CompilerError",
    "ConfigurationError",
    "LightCss",
    "LightCssError",
    "LightCssOptions",
    "StyleCompiler",
    "StyleFile",
    "extract_imports",
    "restore_imports",
    "should_ignore",
]
