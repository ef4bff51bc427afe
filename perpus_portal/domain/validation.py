"""Form-level validation run before any store request"""

import re
from typing import Dict

from perpus_portal.domain.exceptions import PasswordMismatchError, ValidationError
from perpus_portal.domain.models import MemberType

# Characters the Realtime Database rejects in keys; "/" would also escape the path
_FORBIDDEN_KEY_CHARS = re.compile(r"[.$#\[\]/]")


def require_matching_passwords(password: str, confirmation: str) -> None:
    if password != confirmation:
        raise PasswordMismatchError()


def require_fields(fields: Dict[str, str | None]) -> None:
    """Reject blank required form fields"""
    missing = [name for name, value in fields.items() if value is None or not str(value).strip()]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def validate_store_key(key: str) -> str:
    """Return key if it can be used as a single path segment in the store"""
    if not key or not key.strip() or _FORBIDDEN_KEY_CHARS.search(key):
        raise ValidationError(f"Invalid member id: {key!r}")
    return key


def is_known_member_type(value: str) -> bool:
    return value in {t.value for t in MemberType}
