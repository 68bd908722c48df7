import logging
import os
import unittest
from unittest.mock import patch

from cadastro.config import Settings
from cadastro.logging_config import configure_logging


class SettingsTests(unittest.TestCase):
    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        settings = Settings(_env_file=None)
        self.assertEqual(settings.port, 3001)
        self.assertEqual(settings.host, "0.0.0.0")
        self.assertIsNone(settings.firebase_database_url)
        self.assertFalse(settings.use_in_memory_backends)

    @patch.dict(
        os.environ,
        {
            "PORT": "8080",
            "FIREBASE_DATABASE_URL": "https://example.firebaseio.com",
            "CADASTRO_USE_IN_MEMORY_BACKENDS": "true",
        },
        clear=True,
    )
    def test_environment_overrides(self):
        settings = Settings(_env_file=None)
        self.assertEqual(settings.port, 8080)
        self.assertEqual(
            settings.firebase_database_url, "https://example.firebaseio.com"
        )
        self.assertTrue(settings.use_in_memory_backends)


class LoggingConfigTests(unittest.TestCase):
    def test_configure_logging_sets_levels(self):
        root = logging.getLogger()
        self.addCleanup(root.setLevel, root.level)
        configure_logging("debug")
        self.assertEqual(root.level, logging.DEBUG)
        self.assertEqual(logging.getLogger("urllib3").level, logging.WARNING)

        configure_logging("nonsense")
        self.assertEqual(root.level, logging.INFO)


if __name__ == "__main__":
    unittest.main()
