"""Coursebase schema package.

Relational data model for a learning-management system: courses, modules,
lessons, assessments, enrollments, groups, access grants, progress tracking
and lesson discussions, exposed through SQLAlchemy models and an async
data-access client.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
