# tests/cli/test_console.py
"""
Tests for cli/ui/console.py - output and logging helpers
"""

import logging

from rich.logging import RichHandler

from cli.ui.console import get_logger, print_error, print_table


class TestStatusOutput:
    def test_print_error_keeps_brackets(self, capsys):
        """bracketed text in messages is not treated as markup"""
        print_error("invalid filter [region] for images")

        assert "invalid filter [region] for images" in capsys.readouterr().out

    def test_print_table(self, capsys):
        print_table("images (1)", ["id", "flavor"], [["i1", "gpu"]])

        out = capsys.readouterr().out
        assert "images (1)" in out
        assert "gpu" in out


class TestGetLogger:
    def test_attaches_single_handler(self):
        logger = get_logger("core.test_console", "DEBUG")
        get_logger("core.test_console", "INFO")

        handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
        assert len(handlers) == 1
        assert logger.level == logging.INFO
        assert logger.propagate is False
