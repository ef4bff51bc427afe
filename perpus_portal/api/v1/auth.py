"""POST /v1/auth/login - member authentication"""

from fastapi import APIRouter, Depends, Request

from perpus_portal.api.dependencies import get_member_repository, get_request_id
from perpus_portal.api.errors import failure_response
from perpus_portal.api.v1.schemas import FailureResponse, LoginRequest, LoginResponse, MemberSchema
from perpus_portal.infrastructure.observability.logging import log_member_event
from perpus_portal.infrastructure.observability.metrics import record_login
from perpus_portal.infrastructure.store.repositories import MemberRepository

router = APIRouter()


@router.post(
    "/auth/login",
    response_model=LoginResponse,
    responses={status: {"model": FailureResponse} for status in (401, 404, 503)},
)
async def login(
    request_body: LoginRequest,
    request: Request,
    members: MemberRepository = Depends(get_member_repository),
):
    """
    Check email and password against the Members collection.

    Outcomes:
    - 200 with the member (password never included)
    - 404 email_not_found / no_members
    - 401 wrong_password
    - 503 store unavailable
    """
    outcome = await members.authenticate(request_body.email, request_body.password)
    record_login(outcome.code)
    log_member_event(
        get_request_id(request),
        "login",
        outcome.code or "success",
        member_id=outcome.value.id if outcome.success else None,
    )
    if not outcome.success:
        return failure_response(outcome)
    return LoginResponse(member=MemberSchema.from_member(outcome.value))
