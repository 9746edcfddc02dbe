# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Credential hashing for ``User.password_hash``.

The schema only ever stores a bcrypt hash. Hashes look like
``$2b$12$<22-char salt><31-char digest>``; the number after the second
``$`` is the cost factor.

Example:
    >>> hasher = PasswordHasher(rounds=4)
    >>> stored = hasher.hash("s3cret")
    >>> hasher.verify("s3cret", stored)
    True
"""

import logging

import bcrypt

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 12


class PasswordHasher:
    """bcrypt hashing with a configurable cost factor.

    Attributes:
        rounds: bcrypt cost used for new hashes.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError(f"bcrypt rounds must be within 4-31, got {rounds}")
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a plain password.

        Raises:
            ValueError: If the password is empty.
        """
        if not password:
            raise ValueError("Password cannot be empty")

        digest = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds))
        return digest.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a plain password against a stored hash.

        Malformed hashes count as a mismatch.
        """
        if not password or not password_hash:
            return False

        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError as e:
            logger.warning("Password verification failed: %s", e)
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        """Whether a stored hash was made with a different cost factor."""
        cost = hash_cost(password_hash)
        return cost is not None and cost != self.rounds


def hash_cost(password_hash: str) -> int | None:
    """Cost factor of a bcrypt hash, or None if it is not one."""
    parts = password_hash.split("$") if password_hash else []
    if len(parts) < 4 or not parts[2].isdigit():
        return None
    return int(parts[2])

