"""Test configuration.

Environment overrides are applied before any ``src.catalog`` import so the
configuration loaded at import time uses in-memory storage and no log file.
"""

import os

os.environ["CATALOG_STORAGE_BACKEND"] = "memory"
os.environ["LOG_FILE"] = ""

from tests.fixtures import *  # noqa: E402,F401,F403
