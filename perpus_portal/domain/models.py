"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Generic, List, Optional, TypeVar

from perpus_portal.domain.exceptions import DomainException

T = TypeVar("T")


class MemberType(str, Enum):
    STUDENT = "Student"
    LECTURER = "Lecturer"
    STAFF = "Staff"
    PUBLIC = "Public"


class MemberStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass
class Member:
    """Registered library member as exposed to callers (never carries a password)"""

    id: str
    uid: str
    name: str
    email: str
    phone: str
    address: str
    type: str
    status: str
    created_at: str


@dataclass
class MemberRegistration:
    """Registration form data"""

    name: str
    email: str
    password: str
    phone: str
    address: str
    type: str = MemberType.STUDENT.value


@dataclass
class ProfileChanges:
    """Editable profile fields; None means "leave unchanged" """

    phone: Optional[str] = None
    address: Optional[str] = None
    type: Optional[str] = None

    def as_update(self) -> Dict[str, str]:
        """Store payload holding only the supplied fields"""
        return {
            name: value
            for name, value in (("phone", self.phone), ("address", self.address), ("type", self.type))
            if value is not None
        }


@dataclass
class Transaction:
    """Loan record written by the library desk, read-only here"""

    id: str
    member_id: str
    book_title: str
    borrow_date: str
    due_date: str
    status: str

    def is_returned(self, returned_statuses: List[str]) -> bool:
        if not isinstance(self.status, str):
            return False
        return self.status.strip().lower() in {s.lower() for s in returned_statuses}


@dataclass
class Outcome(Generic[T]):
    """Uniform success/failure envelope returned by the data-access layer"""

    success: bool
    value: Optional[T] = None
    failure: Optional[DomainException] = field(default=None, repr=False)

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "Outcome[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, failure: DomainException) -> "Outcome[T]":
        return cls(success=False, failure=failure)

    @property
    def error(self) -> Optional[str]:
        return str(self.failure) if self.failure is not None else None

    @property
    def code(self) -> Optional[str]:
        return self.failure.code if self.failure is not None else None
