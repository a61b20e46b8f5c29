"""
Password hashing helpers (bcrypt).
"""

from __future__ import annotations

import bcrypt

# bcrypt only looks at the first 72 bytes of the secret.
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(password: str, rounds: int = 10) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, stored: str | None) -> bool:
    if not password or not stored:
        return False
    try:
        return bcrypt.checkpw(_encode(password), stored.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash (e.g. a legacy plaintext row).
        return False
