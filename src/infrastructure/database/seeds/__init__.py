# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database seed package.

Run ``python -m src.infrastructure.database.seeds.initial`` to seed the
database configured by the ``DB_*`` and ``SEED_*`` settings.
"""

from src.infrastructure.database.seeds.initial import (
    seed_admin_user,
    seed_categories,
    seed_database,
    seed_sample_course,
)

__all__ = ["seed_admin_user", "seed_categories", "seed_database", "seed_sample_course"]
