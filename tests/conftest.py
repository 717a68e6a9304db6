"""Test configuration and shared fixtures for Muslim Hunt."""

import os

os.environ.setdefault("APP_ENVIRONMENT", "test")

from tests.fixtures import *  # noqa: E402,F401,F403
