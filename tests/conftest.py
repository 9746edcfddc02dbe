# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests
- Integration tests
"""

from typing import Any

import pytest

from src.core.config.settings import clear_settings_cache


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def test_environment() -> dict[str, str]:
    """Provide test environment variables.

    Returns:
        Dictionary of environment variables for testing.
    """
    return {
        "ENVIRONMENT": "development",
        "DEBUG": "true",
        "LOG_LEVEL": "DEBUG",
        "DB_DSN": "sqlite+aiosqlite:///:memory:",
        "SEED_ADMIN_PASSWORD": "test-admin-password",
    }


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Make every test read settings afresh."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (uses a database)"
    )
    config.addinivalue_line("markers", "slow: mark test as slow running")


# =============================================================================
# Helper Fixtures
# =============================================================================


@pytest.fixture
def sample_user_data() -> dict[str, Any]:
    """Provide sample user data for testing."""
    return {
        "username": "ada",
        "email": "ada@example.com",
        "password_hash": "$2b$04$abcdefghijklmnopqrstuuJ0mYQbNs1SVY8u8z9kT7M8f2bN6.mKa",
        "name": "Ada Lovelace",
    }


@pytest.fixture
def sample_course_data() -> dict[str, Any]:
    """Provide sample course data for testing."""
    return {
        "title": "Relational Databases",
        "description": "Tables, keys and constraints.",
        "category": "Technology",
        "duration": 90,
    }
