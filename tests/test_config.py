import importlib
import os
import unittest
from unittest.mock import patch

import directory_fixtures  # noqa: F401  (sets sys.path)

from utils import config


class TestConfigDefaults(unittest.TestCase):
    def tearDown(self):
        importlib.reload(config)

    def test_defaults(self):
        env = {k: v for k, v in os.environ.items()
               if k not in ("NEARBY_CITIES_LIMIT", "STORE_READ_WORKERS", "STORE_TIMEOUT_SECONDS")}
        with patch.dict(os.environ, env, clear=True), patch("dotenv.load_dotenv"):
            importlib.reload(config)
            self.assertEqual(config.NEARBY_CITIES_LIMIT, 5)
            self.assertEqual(config.STORE_READ_WORKERS, 16)
            self.assertEqual(config.STORE_TIMEOUT_SECONDS, 5.0)

    def test_env_override(self):
        with patch.dict(os.environ, {"NEARBY_CITIES_LIMIT": "8"}), patch("dotenv.load_dotenv"):
            importlib.reload(config)
            self.assertEqual(config.NEARBY_CITIES_LIMIT, 8)


if __name__ == '__main__':
    unittest.main()
