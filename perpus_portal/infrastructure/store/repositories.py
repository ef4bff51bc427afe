"""Data access layer for members and loan transactions

Each public operation makes its store round trips and returns an
``Outcome``; no exception escapes to callers. Store failures are logged
with their cause and reported with a generic message.
"""

import asyncio
import functools
import logging
import random
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from perpus_portal.config import settings
from perpus_portal.domain.exceptions import (
    DomainException,
    EmailNotFoundError,
    EmailTakenError,
    MemberNotFoundError,
    NoMembersError,
    TransportError,
    WrongOldPasswordError,
    WrongPasswordError,
)
from perpus_portal.domain.models import (
    Member,
    MemberRegistration,
    MemberStatus,
    Outcome,
    ProfileChanges,
    Transaction,
)
from perpus_portal.domain.passwords import hash_password, needs_rehash, verify_password
from perpus_portal.domain.validation import validate_store_key
from perpus_portal.infrastructure.clients.store import RealtimeStoreClient
from perpus_portal.utils.date_utils import iso_timestamp

MEMBERS_PATH = "Members"
TRANSACTIONS_PATH = "Transactions"

logger = logging.getLogger(__name__)

T = TypeVar("T")


def returns_outcome(failure_message: str):
    """Wrap a repository coroutine so it returns Outcome instead of raising"""

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[Outcome[T]]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Outcome[T]:
            try:
                return Outcome.ok(await func(*args, **kwargs))
            except TransportError as e:
                logger.error(f"{func.__name__} failed: {e}", extra={"operation": func.__name__})
                return Outcome.fail(TransportError(failure_message))
            except DomainException as e:
                return Outcome.fail(e)
            except Exception:
                logger.exception(f"Unexpected error in {func.__name__}", extra={"operation": func.__name__})
                return Outcome.fail(TransportError(failure_message))

        return wrapper

    return decorator


def iter_children(value: Any) -> Dict[str, Dict[str, Any]]:
    """
    Keyed object children of a collection node.

    The store returns arrays (with null holes) for integer-like keys, so
    both shapes are accepted; anything that is not an object is skipped.
    """
    if isinstance(value, dict):
        items = value.items()
    elif isinstance(value, list):
        items = ((str(index), child) for index, child in enumerate(value))
    else:
        return {}
    return {str(key): child for key, child in items if isinstance(child, dict)}


def _text(record: Dict[str, Any], name: str, default: str = "") -> str:
    """Field as text; other tools may store numbers where strings are expected"""
    value = record.get(name)
    return default if value is None else str(value)


def member_from_record(key: str, record: Dict[str, Any]) -> Member:
    """Build a Member from a stored record, dropping the password"""
    return Member(
        id=key,
        uid=_text(record, "uid"),
        name=_text(record, "name"),
        email=_text(record, "email"),
        phone=_text(record, "phone"),
        address=_text(record, "address"),
        type=_text(record, "type"),
        status=_text(record, "status", MemberStatus.ACTIVE.value),
        created_at=_text(record, "createdAt"),
    )


def transaction_from_record(key: str, record: Dict[str, Any]) -> Transaction:
    return Transaction(
        id=key,
        member_id=_text(record, "memberId"),
        book_title=_text(record, "bookTitle"),
        borrow_date=_text(record, "borrowDate"),
        due_date=_text(record, "dueDate"),
        status=_text(record, "status"),
    )


class MemberRepository:
    """Repository for library members"""

    def __init__(
        self,
        store: RealtimeStoreClient,
        uid_upper_bound: int | None = None,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.uid_upper_bound = uid_upper_bound or settings.uid_upper_bound
        self.rng = rng or random.Random()

    def generate_uid(self) -> str:
        """Short display id; collisions are not checked"""
        return str(self.rng.randrange(self.uid_upper_bound))

    @returns_outcome("Registration failed")
    async def register(self, registration: MemberRegistration) -> str:
        """Create a member record and return its store key"""
        records = iter_children(await self.store.get(MEMBERS_PATH))
        if any(record.get("email") == registration.email for record in records.values()):
            raise EmailTakenError()

        record = {
            "address": registration.address,
            "createdAt": iso_timestamp(),
            "email": registration.email,
            "name": registration.name,
            "phone": registration.phone,
            "status": MemberStatus.ACTIVE.value,
            "type": registration.type,
            "uid": self.generate_uid(),
            "password": await asyncio.to_thread(hash_password, registration.password),
        }
        return await self.store.push(MEMBERS_PATH, record)

    @returns_outcome("Login failed")
    async def authenticate(self, email: str, password: str) -> Member:
        """
        Find the member by email and check the password.

        Raises (inside the Outcome):
            NoMembersError: collection is empty
            EmailNotFoundError: no member with this email
            WrongPasswordError: email found, password differs
        """
        records = iter_children(await self.store.get(MEMBERS_PATH))
        if not records:
            raise NoMembersError()

        for key, record in records.items():
            if record.get("email") != email:
                continue
            stored = record.get("password")
            if not await asyncio.to_thread(verify_password, password, stored):
                raise WrongPasswordError()
            if needs_rehash(stored):
                await self._upgrade_password(key, password)
            return member_from_record(key, record)

        raise EmailNotFoundError()

    async def _upgrade_password(self, member_id: str, password: str) -> None:
        """Replace a legacy plain-text password with its hash"""
        hashed = await asyncio.to_thread(hash_password, password)
        try:
            await self.store.update(f"{MEMBERS_PATH}/{member_id}", {"password": hashed})
        except TransportError as e:
            logger.warning(f"Password upgrade failed: {e}", extra={"member_id": member_id})

    @returns_outcome("Could not load member")
    async def get_member(self, member_id: str) -> Member:
        record = await self.store.get(f"{MEMBERS_PATH}/{validate_store_key(member_id)}")
        if not isinstance(record, dict):
            raise MemberNotFoundError()
        return member_from_record(member_id, record)

    @returns_outcome("Could not update password")
    async def update_password(self, member_id: str, old_password: str, new_password: str) -> None:
        path = f"{MEMBERS_PATH}/{validate_store_key(member_id)}"
        record = await self.store.get(path)
        if not isinstance(record, dict):
            raise MemberNotFoundError()
        if not await asyncio.to_thread(verify_password, old_password, record.get("password")):
            raise WrongOldPasswordError()
        hashed = await asyncio.to_thread(hash_password, new_password)
        await self.store.update(path, {"password": hashed})

    @returns_outcome("Could not update member")
    async def update_profile(self, member_id: str, changes: ProfileChanges) -> None:
        """Merge only the supplied fields; type is trusted from the caller"""
        path = f"{MEMBERS_PATH}/{validate_store_key(member_id)}"
        values = changes.as_update()
        if values:
            await self.store.update(path, values)


class TransactionRepository:
    """Repository for loan transactions"""

    def __init__(self, store: RealtimeStoreClient):
        self.store = store

    @returns_outcome("Could not load transactions")
    async def list_for_member(self, member_id: str) -> List[Transaction]:
        """All loans of a member in store order (full collection scan)"""
        records = iter_children(await self.store.get(TRANSACTIONS_PATH))
        return [
            transaction_from_record(key, record)
            for key, record in records.items()
            if _text(record, "memberId") == member_id
        ]
