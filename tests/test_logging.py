"""Tests for perflist.logging: console verbosity and the DEBUG log file."""

from __future__ import annotations

import logging
import tempfile
import unittest
from pathlib import Path

from perflist.logging import get_logger, setup_logging


class TestSetupLogging(unittest.TestCase):
    def tearDown(self) -> None:
        logger = logging.getLogger("perflist")
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()

    def _console_level(self, logger: logging.Logger) -> int:
        return logger.handlers[0].level

    def test_default_level_is_info(self) -> None:
        self.assertEqual(self._console_level(setup_logging()), logging.INFO)

    def test_verbose_wins_over_quiet(self) -> None:
        logger = setup_logging(verbose=True, quiet=True)
        self.assertEqual(self._console_level(logger), logging.DEBUG)

    def test_quiet(self) -> None:
        self.assertEqual(self._console_level(setup_logging(quiet=True)), logging.WARNING)

    def test_reconfiguring_replaces_handlers(self) -> None:
        setup_logging()
        logger = setup_logging()
        self.assertEqual(len(logger.handlers), 1)

    def test_log_file_records_debug(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            log_path = Path(tmpdir) / "run.log"
            setup_logging(quiet=True, log_file=log_path)
            get_logger("ledger").debug("Loaded ledger with %d version(s)", 2)
            for handler in logging.getLogger("perflist").handlers:
                handler.flush()
            text = log_path.read_text()
        self.assertIn("perflist.ledger: Loaded ledger with 2 version(s)", text)


if __name__ == "__main__":
    unittest.main()
