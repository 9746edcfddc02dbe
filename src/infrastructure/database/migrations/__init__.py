# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database migrations package.

Revisions live in ``versions/`` and can be applied either with the Alembic
CLI (``alembic upgrade head``, see ``env.py``) or programmatically through
``runner.run_migrations``.
"""
