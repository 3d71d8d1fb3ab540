"""
Configuration constants to replace magic numbers throughout opparse
"""

import os
import sys
import tempfile

# Precedence ranks (lower rank binds tighter)
SENTINEL_RANK = sys.maxsize  # START / END: loosest possible
GROUP_RANK = sys.maxsize - 1  # Looser than every operator, tighter than the sentinels

# Sentinel symbols
START_SYMBOL = "START"
END_SYMBOL = "END"

# Grammar file format
GROUP_KEYWORD = "group"
UNARY_ARITY = 1
BINARY_ARITY = 2

# Grammar-file parser cache (under temp dir to avoid cluttering project root)
DEFAULT_LOADER_CACHE_FILE = os.path.join(tempfile.gettempdir(), "opparse_grammar_spec.cache")

# File encoding constants
DEFAULT_FILE_ENCODING = "utf-8"

# Error reporting constants
ERROR_POINTER_CHAR = "^"
DEFAULT_INPUT_NAME = "<input>"

# Environment variables
COLOR_ENV_VAR = "OPPARSE_COLOR"
NO_COLOR_ENV_VAR = "NO_COLOR"
GRAMMAR_ENV_VAR = "OPPARSE_GRAMMAR"


def default_grammar_path():
    """Grammar file named by OPPARSE_GRAMMAR, or None."""
    value = os.environ.get(GRAMMAR_ENV_VAR, "").strip()
    return value or None
