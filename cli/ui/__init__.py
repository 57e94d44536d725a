# cli/ui - console components (rich)
"""
Console output helpers for the CLI
"""

from .console import (
    SYMBOL_ERROR,
    console,
    get_console,
    get_logger,
    print_error,
    print_table,
)

__all__ = [
    "console",
    "get_console",
    "get_logger",
    "print_error",
    "print_table",
    "SYMBOL_ERROR",
]
