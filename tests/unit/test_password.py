# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for password hashing utilities.

Tests use the lowest bcrypt cost to stay fast.
"""

import pytest

from src.utils.password import (
    PasswordHasher,
    hash_cost,
)


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


class TestPasswordHasher:
    """Tests for PasswordHasher class."""

    def test_hash_password_returns_bcrypt_hash(self, hasher) -> None:
        hashed = hasher.hash("test_password_123")

        assert hashed.startswith("$2b$04$")
        assert len(hashed) == 60

    def test_hash_is_salted(self, hasher) -> None:
        assert hasher.hash("same") != hasher.hash("same")

    def test_verify_correct_password(self, hasher) -> None:
        hashed = hasher.hash("correct_password")

        assert hasher.verify("correct_password", hashed) is True

    def test_verify_incorrect_password(self, hasher) -> None:
        hashed = hasher.hash("correct_password")

        assert hasher.verify("wrong_password", hashed) is False

    def test_verify_empty_inputs_return_false(self, hasher) -> None:
        hashed = hasher.hash("valid_password")

        assert hasher.verify("", hashed) is False
        assert hasher.verify("password", "") is False

    def test_verify_invalid_hash_returns_false(self, hasher) -> None:
        assert hasher.verify("password", "not_a_valid_bcrypt_hash") is False

    def test_hash_empty_password_raises_error(self, hasher) -> None:
        with pytest.raises(ValueError, match="Password cannot be empty"):
            hasher.hash("")

    @pytest.mark.parametrize("rounds", [3, 32])
    def test_rounds_out_of_range(self, rounds) -> None:
        with pytest.raises(ValueError):
            PasswordHasher(rounds=rounds)

    def test_needs_rehash_for_other_cost(self, hasher) -> None:
        old_hash = hasher.hash("password")

        assert hasher.needs_rehash(old_hash) is False
        assert PasswordHasher(rounds=5).needs_rehash(old_hash) is True

    def test_needs_rehash_ignores_non_bcrypt(self, hasher) -> None:
        assert hasher.needs_rehash("") is False
        assert hasher.needs_rehash("plain") is False

    def test_unicode_password(self, hasher) -> None:
        password = "şifre_parola_密码"

        assert hasher.verify(password, hasher.hash(password)) is True


class TestHashCost:
    """Tests for hash_cost."""

    def test_reads_cost(self) -> None:
        assert hash_cost("$2b$12$" + "a" * 53) == 12

    @pytest.mark.parametrize("value", ["", "abc", "$2b$xx$abc"])
    def test_not_bcrypt(self, value) -> None:
        assert hash_cost(value) is None

