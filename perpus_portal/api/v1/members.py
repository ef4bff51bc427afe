"""/v1/members - member registration, profile, password and loans"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from perpus_portal.api.controller import PortalController
from perpus_portal.api.dependencies import (
    get_controller,
    get_member_repository,
    get_request_id,
    get_transaction_repository,
)
from perpus_portal.api.errors import failure_response
from perpus_portal.api.v1.schemas import (
    FailureResponse,
    MemberResponse,
    MemberSchema,
    PasswordUpdateRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    RegisterResponse,
    ReminderResponse,
    ReminderSchema,
    SuccessResponse,
    TransactionSchema,
    TransactionsResponse,
)
from perpus_portal.config import settings
from perpus_portal.domain.models import MemberRegistration, ProfileChanges
from perpus_portal.infrastructure.observability.logging import log_member_event
from perpus_portal.infrastructure.observability.metrics import record_registration
from perpus_portal.infrastructure.store.repositories import MemberRepository, TransactionRepository

router = APIRouter()

ERROR_RESPONSES = {status: {"model": FailureResponse} for status in (401, 404, 409, 422, 503)}


@router.post("/members", response_model=RegisterResponse, status_code=201, responses=ERROR_RESPONSES)
async def register_member(
    request_body: RegisterRequest,
    request: Request,
    members: MemberRepository = Depends(get_member_repository),
):
    """
    Register a new member.

    Fails with 409 when the email is already registered.
    """
    request_id = get_request_id(request)
    outcome = await members.register(
        MemberRegistration(
            name=request_body.name,
            email=request_body.email,
            password=request_body.password,
            phone=request_body.phone,
            address=request_body.address,
            type=request_body.type.value,
        )
    )
    record_registration(outcome.code)
    log_member_event(request_id, "register", outcome.code or "success", member_id=outcome.value)
    if not outcome.success:
        return failure_response(outcome)
    return RegisterResponse(id=outcome.value)


@router.get("/members/{member_id}", response_model=MemberResponse, responses=ERROR_RESPONSES)
async def get_member(member_id: str, members: MemberRepository = Depends(get_member_repository)):
    outcome = await members.get_member(member_id)
    if not outcome.success:
        return failure_response(outcome)
    return MemberResponse(member=MemberSchema.from_member(outcome.value))


@router.patch("/members/{member_id}", response_model=SuccessResponse, responses=ERROR_RESPONSES)
async def update_member(
    member_id: str,
    request_body: ProfileUpdateRequest,
    request: Request,
    members: MemberRepository = Depends(get_member_repository),
):
    """Update phone, address and/or type; omitted fields stay as they are"""
    changes = ProfileChanges(**request_body.model_dump(exclude_unset=True, exclude_none=True))
    outcome = await members.update_profile(member_id, changes)
    log_member_event(get_request_id(request), "update_profile", outcome.code or "success", member_id=member_id)
    if not outcome.success:
        return failure_response(outcome)
    return SuccessResponse()


@router.put("/members/{member_id}/password", response_model=SuccessResponse, responses=ERROR_RESPONSES)
async def update_password(
    member_id: str,
    request_body: PasswordUpdateRequest,
    request: Request,
    members: MemberRepository = Depends(get_member_repository),
):
    outcome = await members.update_password(member_id, request_body.old_password, request_body.new_password)
    log_member_event(get_request_id(request), "update_password", outcome.code or "success", member_id=member_id)
    if not outcome.success:
        return failure_response(outcome)
    return SuccessResponse()


@router.get("/members/{member_id}/transactions", response_model=TransactionsResponse, responses=ERROR_RESPONSES)
async def list_transactions(
    member_id: str,
    transactions: TransactionRepository = Depends(get_transaction_repository),
):
    """
    Borrowing history of a member.

    Returns an empty list when the member has no loans and 503 when the
    store could not be read.
    """
    outcome = await transactions.list_for_member(member_id)
    if not outcome.success:
        return failure_response(outcome)
    return TransactionsResponse(
        member_id=member_id,
        transactions=[TransactionSchema.from_transaction(t) for t in outcome.value],
    )


@router.get("/members/{member_id}/reminder", response_model=ReminderResponse, responses=ERROR_RESPONSES)
async def get_reminder(
    member_id: str,
    today: Optional[date] = Query(None, description="Reference date (defaults to today, UTC)"),
    controller: PortalController = Depends(get_controller),
):
    """Overdue / due-soon alert for the member's active loans"""
    outcome = await controller.reminder_for(member_id, today)
    if not outcome.success:
        return failure_response(outcome)
    if outcome.value is None:
        return ReminderResponse()
    return ReminderResponse(alert=ReminderSchema.from_reminder(outcome.value, settings.reminder_preview_limit))
