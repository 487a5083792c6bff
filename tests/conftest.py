"""Test configuration shared by every test module.

Environment overrides are applied before any ``src`` import so the
configuration loaded at import time already reflects them.
"""

import os
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent

os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("APP_CONFIG_FILE", str(ROOT / "config.yaml"))
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["REPORT_CLEANUP_ENABLED"] = "false"
os.environ["LOG_FILE"] = ""
os.environ["JWT_SECRET"] = "test-secret-key-for-storefront"

from tests.fixtures import *  # noqa: E402,F401,F403
