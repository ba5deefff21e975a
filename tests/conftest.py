"""Pytest configuration and shared fixtures."""

import os

from hypothesis import settings

if "MMKV_HEX_LIMIT" in os.environ:
    # Tests assume the default hex preview length.
    del os.environ["MMKV_HEX_LIMIT"]

# Create a profile named "no_deadline" with deadline disabled.
settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")
