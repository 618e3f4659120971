"""
Password hashing.

bcrypt with a fixed work factor; the same helpers hash registration keys.
"""

import bcrypt

# Cost 12 keeps a login around a quarter of a second on current hardware
BCRYPT_ROUNDS = 12

# Checked against when the email is unknown so both login failures take as long
_DUMMY_HASH = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(BCRYPT_ROUNDS))


def hash_password(plaintext: str) -> str:
    return bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(BCRYPT_ROUNDS)).decode(
        "utf-8"
    )


def verify_password(plaintext: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(plaintext.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash or over-long input
        return False


def burn_password_check(plaintext: str) -> None:
    """Spend one bcrypt verification without a real hash."""
    verify_password(plaintext, _DUMMY_HASH.decode("utf-8"))
