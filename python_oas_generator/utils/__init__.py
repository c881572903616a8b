"""
Utilities Module for Python Client Generation

This module provides utility functions for file operations and string case
conversions used throughout the generator.
"""

from .file_utils import write_files_to_disk
from .string_case import (
    escape_python_keyword,
    normalize_python_identifier,
    pascalcase,
    snakecase,
    to_model_filename,
    to_model_name,
    to_var_name,
)

__all__ = [
    "escape_python_keyword",
    "normalize_python_identifier",
    "pascalcase",
    "snakecase",
    "to_model_filename",
    "to_model_name",
    "to_var_name",
    "write_files_to_disk",
]
