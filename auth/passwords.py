"""
auth/passwords.py -- bcrypt password hashing.

Passwords: bcrypt directly, no passlib wrapper. Bcrypt is the right choice
for low-entropy secrets because its cost factor makes brute-force expensive,
and every hash carries its own random salt.

bcrypt only reads the first 72 bytes of its input, and current releases
raise ValueError for anything longer. hash_password() refuses such input up
front with InputError instead of relying on library-version behaviour; the
API layer enforces the same limit on the request model.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import bcrypt

from auth.errors import InputError

MAX_PASSWORD_BYTES = 72
DEFAULT_ROUNDS = 12


def hash_password(plain: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Return a salted bcrypt hash of the given plaintext password."""
    encoded = plain.encode("utf-8")
    if not encoded:
        raise InputError("password must not be empty")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise InputError(f"password exceeds {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    Any input bcrypt refuses (over-long password, corrupt hash) is a mismatch.
    """
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False
