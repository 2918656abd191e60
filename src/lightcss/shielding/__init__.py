"""
Import shielding: hide `@import` statements behind inert placeholder rules
before a stylesheet compiler runs, then put them back afterward.
"""

from lightcss.shielding.ignore_rules import (
    MATCH_ALL,
    IgnoreMatcher,
    compile_ignores,
    is_module_path,
    should_ignore,
)
from lightcss.shielding.import_shield import (
    IMPORT_PATTERN,
    PLACEHOLDER_PATTERN,
    ImportMap,
    extract_imports,
    make_placeholder,
    restore_imports,
    rewrite_extension,
)

__all__ = [
    "IMPORT_PATTERN",
    "MATCH_ALL",
    "PLACEHOLDER_PATTERN",
    "IgnoreMatcher",
    "ImportMap",
    "compile_ignores",
    "extract_imports",
    "is_module_path",
    "make_placeholder",
    "restore_imports",
    "rewrite_extension",
    "should_ignore",
]
