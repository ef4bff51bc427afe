"""Pydantic schemas for API request/response validation"""

from typing import List, Optional

from pydantic import BaseModel, Field

from perpus_portal.domain.models import Member, MemberType, Transaction
from perpus_portal.domain.reminders import Reminder
from perpus_portal.domain.session import DashboardTab, PortalSession, View


# Requests


class RegisterRequest(BaseModel):
    """Request body for POST /v1/members"""

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    type: MemberType = MemberType.STUDENT


class RegisterFormRequest(BaseModel):
    """Registration form submitted through a session (type checked by the controller)"""

    name: str
    email: str
    password: str
    confirm_password: str
    phone: str
    address: str
    type: str = MemberType.STUDENT.value


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ProfileUpdateRequest(BaseModel):
    """Only the fields present in the body are written"""

    phone: Optional[str] = None
    address: Optional[str] = None
    type: Optional[str] = None


class PasswordUpdateRequest(BaseModel):
    old_password: str
    new_password: str = Field(..., min_length=1)


class PasswordChangeFormRequest(PasswordUpdateRequest):
    confirm_password: str


class NavigateRequest(BaseModel):
    view: View


class TabRequest(BaseModel):
    tab: DashboardTab


# Responses


class FailureResponse(BaseModel):
    success: bool = False
    error: str
    code: str


class SuccessResponse(BaseModel):
    success: bool = True


class MemberSchema(BaseModel):
    id: str
    uid: str
    name: str
    email: str
    phone: str
    address: str
    type: str
    status: str
    created_at: str

    @classmethod
    def from_member(cls, member: Member) -> "MemberSchema":
        return cls(**member.__dict__)


class RegisterResponse(BaseModel):
    """Response for POST /v1/members"""

    success: bool = True
    id: str


class LoginResponse(BaseModel):
    success: bool = True
    member: MemberSchema


class MemberResponse(BaseModel):
    success: bool = True
    member: MemberSchema


class TransactionSchema(BaseModel):
    id: str
    member_id: str
    book_title: str
    borrow_date: str
    due_date: str
    status: str

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionSchema":
        return cls(**transaction.__dict__)


class TransactionsResponse(BaseModel):
    success: bool = True
    member_id: str
    transactions: List[TransactionSchema]


class ReminderItemSchema(BaseModel):
    book_title: str
    due_date: str
    days: int
    label: str


class ReminderSchema(BaseModel):
    severity: str
    title: str
    message: str
    detail: str
    days: int
    total: int
    items: List[ReminderItemSchema]
    more_count: int

    @classmethod
    def from_reminder(cls, reminder: Reminder, preview_limit: int) -> "ReminderSchema":
        return cls(
            severity=reminder.severity.value,
            title=reminder.title,
            message=reminder.message,
            detail=reminder.detail,
            days=reminder.days,
            total=reminder.total,
            items=[
                ReminderItemSchema(
                    book_title=standing.loan.book_title,
                    due_date=standing.loan.due_date,
                    days=abs(standing.days_diff),
                    label=standing.label,
                )
                for standing in reminder.preview(preview_limit)
            ],
            more_count=reminder.remaining(preview_limit),
        )


class ReminderResponse(BaseModel):
    """Alert for the dashboard, null when nothing is due"""

    alert: Optional[ReminderSchema] = None


class SessionResponse(BaseModel):
    session_id: str
    view: View
    tab: DashboardTab
    member: Optional[MemberSchema] = None
    alert_dismissed: bool
    loading: bool

    @classmethod
    def from_session(cls, session: PortalSession) -> "SessionResponse":
        return cls(
            session_id=session.session_id,
            view=session.view,
            tab=session.tab,
            member=MemberSchema.from_member(session.member) if session.member else None,
            alert_dismissed=session.alert_dismissed,
            loading=session.loading,
        )
