"""
cli/ui/console.py - Rich console utilities

Console output and logging helpers shared by the CLI commands.
"""

import logging
import platform

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from core.config import LogConfig

# urllib3 connection noise
logging.getLogger("urllib3.connectionpool").setLevel(logging.WARNING)


def get_console() -> Console:
    """Create the Rich Console instance"""
    is_windows = platform.system().lower() == "windows"

    return Console(
        color_system="auto",
        highlight=False,
        soft_wrap=True,
        markup=True,
        emoji=not is_windows,
    )


# global console instances (logs go to stderr)
console = get_console()
err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def get_logger(name: str = "core", level: str | None = None) -> logging.Logger:
    """Return a logger with a RichHandler attached

    Args:
        name: logger name (default "core", the library root)
        level: log level; LogConfig.from_env() when omitted

    Returns:
        logging.Logger: configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level or LogConfig.from_env().level)

    # handler already attached
    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return logger

    handler = RichHandler(console=err_console, rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.propagate = False

    return logger


# =============================================================================
# Status output
# =============================================================================

SYMBOL_ERROR = "✗"


def print_error(message: str) -> None:
    """Print an error message (red X)

    Args:
        message: message to print
    """
    console.print(f"[red]{SYMBOL_ERROR} {escape(message)}[/red]")


def print_table(
    title: str,
    columns: list[str],
    rows: list[list],
) -> None:
    """Print rows as a table

    Args:
        title: table title
        columns: column headers
        rows: row values
    """
    table = Table(title=title, show_header=True, header_style="bold magenta")

    for column in columns:
        table.add_column(column)

    for row in rows:
        table.add_row(*[escape(str(cell)) for cell in row])

    console.print(table)
