"""
Global configuration for the MMKV dump reader.

This module contains environment-specific settings read once at import.
"""

import os

_DEFAULT_HEX_LIMIT = "100"

_raw_hex_limit = os.environ.get("MMKV_HEX_LIMIT", _DEFAULT_HEX_LIMIT).strip()

if not _raw_hex_limit.isdigit() or int(_raw_hex_limit) <= 0:
    raise ValueError(
        f"Invalid MMKV_HEX_LIMIT environment variable: '{_raw_hex_limit}'. "
        f"Expected a positive integer."
    )

HEX_PREVIEW_LIMIT: int = int(_raw_hex_limit)
"""Number of bytes shown by the hexadecimal fallback before truncating. Defaults to 100."""
