"""Password hashing for member credentials

Hashes are bcrypt strings stored in the member's ``password`` field.
Records created by other tools may still hold plain text; those are
compared in constant time and flagged for rehashing.
"""

import hmac

import bcrypt

from perpus_portal.config import settings

_BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")
# bcrypt only looks at the first 72 bytes; newer releases reject longer input
_BCRYPT_MAX_BYTES = 72


def _bcrypt_input(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_bcrypt_input(password), bcrypt.gensalt(rounds=settings.password_hash_rounds)).decode("utf-8")


def is_hashed(stored: str) -> bool:
    return stored.startswith(_BCRYPT_PREFIXES)


def verify_password(password: str, stored: object) -> bool:
    """Check a candidate password against the stored value"""
    if not isinstance(stored, str) or not stored:
        return False
    if is_hashed(stored):
        try:
            return bcrypt.checkpw(_bcrypt_input(password), stored.encode("utf-8"))
        except ValueError:
            # Malformed hash
            return False
    return hmac.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))


def needs_rehash(stored: object) -> bool:
    return isinstance(stored, str) and not is_hashed(stored)
