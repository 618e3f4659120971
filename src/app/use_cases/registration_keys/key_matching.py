"""
Registration key matching and validity checks shared by key consumption and
user registration.
"""

from datetime import datetime
from typing import Iterable, Optional

import bcrypt

from libs.result import Error
from src.domain.entities import RegistrationKey

INVALID_KEY = Error("INVALID_KEY", "Invalid registration key")
KEY_REVOKED = Error("KEY_REVOKED", "Registration key has been revoked")
KEY_EXPIRED = Error("KEY_EXPIRED", "Registration key has expired")
KEY_EXHAUSTED = Error("KEY_EXHAUSTED", "Registration key has no uses left")
KEY_TENANT_MISMATCH = Error(
    "KEY_TENANT_MISMATCH", "Registration key does not belong to this tenant"
)


def generate_key_hash(plaintext_key: str) -> str:
    return bcrypt.hashpw(plaintext_key.encode(), bcrypt.gensalt(12)).decode()


def find_matching_key(
    keys: Iterable[RegistrationKey], plaintext_key: str
) -> Optional[RegistrationKey]:
    """
    Linear scan with bcrypt.checkpw (constant-time per comparison).

    Records with unusable hashes are skipped.
    """
    plaintext_bytes = plaintext_key.encode()
    for key in keys:
        if not key.key_hash:
            continue
        try:
            if bcrypt.checkpw(plaintext_bytes, key.key_hash.encode()):
                return key
        except ValueError:
            continue
    return None


def check_key_usable(key: RegistrationKey, now: datetime) -> Optional[Error]:
    """Revoked, then expired, then exhausted. None when the key can be used."""
    if key.revoked:
        return KEY_REVOKED
    if key.is_expired(now):
        return KEY_EXPIRED
    if key.uses_left <= 0:
        return KEY_EXHAUSTED
    return None
