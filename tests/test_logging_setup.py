import logging
import unittest
from unittest.mock import patch

from hurricane.config.logging_setup import LOG_FORMAT, configure_logging


class LoggingSetupTests(unittest.TestCase):
    def test_installs_one_handler(self):
        with patch.object(logging.root, "handlers", []), patch.object(logging.root, "level", logging.WARNING):
            configure_logging("debug")
            configure_logging("debug")
            self.assertEqual(len(logging.root.handlers), 1)
            self.assertEqual(logging.root.handlers[0].formatter._fmt, LOG_FORMAT)
            self.assertEqual(logging.root.level, logging.DEBUG)

    def test_keeps_existing_handlers(self):
        existing = logging.NullHandler()
        with patch.object(logging.root, "handlers", [existing]):
            configure_logging()
            self.assertEqual(logging.root.handlers, [existing])


if __name__ == "__main__":
    unittest.main()
