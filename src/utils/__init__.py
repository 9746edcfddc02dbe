# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
- password: bcrypt hashing for stored credentials
"""

from src.utils.datetime import ensure_utc, is_expired, seconds_from_now, utc_now
from src.utils.logging import log_context, setup_logging
from src.utils.password import PasswordHasher, hash_cost

__all__ = [
    # Logging
    "setup_logging",
    "log_context",
    # Datetime
    "utc_now",
    "ensure_utc",
    "seconds_from_now",
    "is_expired",
    # Password
    "PasswordHasher",
    "hash_cost",
]
