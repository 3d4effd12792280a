from __future__ import annotations

import logging
import tempfile
import unittest
from pathlib import Path

from scriptdeck.log import configure_logging


class ConfigureLoggingTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmp = Path(self._tmp.name)

    def tearDown(self) -> None:
        logger = logging.getLogger("scriptdeck")
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    def test_records_go_to_log_file(self) -> None:
        log_path = self.tmp / "logs" / "scriptdeck.log"
        logger = configure_logging(verbose=True, log_path=log_path)
        logging.getLogger("scriptdeck.launch.dispatcher").debug("launched %s", "a.sh")
        for handler in logger.handlers:
            handler.flush()

        self.assertEqual(logger.level, logging.DEBUG)
        self.assertFalse(logger.propagate)
        self.assertIn("launched a.sh", log_path.read_text(encoding="utf-8"))

    def test_reconfiguring_replaces_handler(self) -> None:
        configure_logging(log_path=self.tmp / "one.log")
        logger = configure_logging(log_path=self.tmp / "two.log")
        self.assertEqual(len(logger.handlers), 1)
        self.assertEqual(logger.level, logging.INFO)


if __name__ == "__main__":
    unittest.main()
