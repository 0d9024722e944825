"""
Password credentials: HMAC-SHA512 over the UTF-8 password, keyed with a
per-credential random salt. The salt is stored next to the hash on the user row.
"""

import hashlib
import hmac
import secrets
from typing import NamedTuple

from app.exceptions.http import InvalidInputError, MalformedCredentialError

HASH_LENGTH = 64  # SHA-512 digest size
SALT_LENGTH = 128  # HMAC-SHA512 block size


class PasswordCredential(NamedTuple):
    hash: bytes
    salt: bytes


def _require_password(password: str | None) -> str:
    if password is None:
        raise InvalidInputError("Password is required.")
    if not password.strip():
        raise InvalidInputError("Password cannot be empty or whitespace only.")
    return password


def _digest(password: str, salt: bytes) -> bytes:
    return hmac.new(salt, password.encode("utf-8"), hashlib.sha512).digest()


def hash_password(password: str | None) -> PasswordCredential:
    """
    Derives a new credential for the password. A fresh salt is drawn on every
    call, so hashing the same password twice yields two different credentials.
    """
    password = _require_password(password)
    salt = secrets.token_bytes(SALT_LENGTH)
    return PasswordCredential(hash=_digest(password, salt), salt=salt)


def check_password(password: str | None, stored_hash: bytes, stored_salt: bytes) -> bool:
    """
    Re-derives the hash of `password` under `stored_salt` and compares it to
    `stored_hash` in constant time.

    Raises:
        InvalidInputError: password is missing or blank.
        MalformedCredentialError: the stored hash or salt has the wrong length.
    """
    password = _require_password(password)
    if stored_hash is None or len(stored_hash) != HASH_LENGTH:
        raise MalformedCredentialError(f"Invalid length of password hash ({HASH_LENGTH} bytes expected).")
    if stored_salt is None or len(stored_salt) != SALT_LENGTH:
        raise MalformedCredentialError(f"Invalid length of password salt ({SALT_LENGTH} bytes expected).")

    return hmac.compare_digest(_digest(password, stored_salt), bytes(stored_hash))
