"""
auth/store.py -- In-memory credential table.

Pattern: Repository. CredentialStore exclusively owns the username ->
password-hash mapping; route and flow code never touch the dict directly.

Concurrency:
  Requests are served in parallel (FastAPI runs sync handlers in a thread
  pool), so the table is guarded by a single threading.Lock on both the read
  and write paths. bcrypt work happens OUTSIDE the lock -- only the dict
  access is serialized, so a slow hash never blocks other logins.

Duplicate usernames:
  register() on an existing username overwrites the stored hash
  (last-write-wins). This is a weak policy: anyone can reset anyone's
  password by re-registering. Every overwrite is logged at WARNING.

Timing equalization [C1]:
  verify() always runs bcrypt, against a dummy hash when the username is
  unknown, so response time does not reveal whether a username exists.

Storage is volatile: the table lives and dies with the process.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

import logging
import threading

from auth.errors import InputError
from auth.models import Credential
from auth.passwords import DEFAULT_ROUNDS, hash_password, verify_password

logger = logging.getLogger("tokenauth.auth.store")


class CredentialStore:
    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        self._rounds = rounds
        self._credentials: dict[str, Credential] = {}
        self._lock = threading.Lock()
        # Computed once per store at the same cost as real hashes so the
        # first unknown-user login is not measurably faster [C1].
        self._dummy_hash = hash_password("tokenauth_timing_dummy", rounds=rounds)

    def register(self, username: str, password: str) -> None:
        """Hash password and store it under username, replacing any existing entry.

        Raises InputError if either field is empty or the password is longer
        than bcrypt accepts.
        """
        if not username:
            raise InputError("username must not be empty")
        if not password:
            raise InputError("password must not be empty")

        credential = Credential(username=username, password_hash=hash_password(password, rounds=self._rounds))
        with self._lock:
            replaced = username in self._credentials
            self._credentials[username] = credential

        if replaced:
            logger.warning("Credential for existing user %r overwritten by re-registration", username)
        else:
            logger.info("Registered user %r", username)

    def verify(self, username: str, password: str) -> bool:
        """Return True only if username exists and password matches its hash.

        Unknown user and wrong password both return False, at the same bcrypt
        cost. Never raises for bad input -- empty values simply fail.
        """
        with self._lock:
            credential = self._credentials.get(username)

        if credential is None:
            # Equalize timing -- do NOT return early before running bcrypt [C1]
            verify_password(password, self._dummy_hash)
            return False
        return verify_password(password, credential.password_hash)

    def count(self) -> int:
        with self._lock:
            return len(self._credentials)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, username: object) -> bool:
        with self._lock:
            return username in self._credentials
