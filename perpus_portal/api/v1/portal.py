"""/v1/sessions - view/session controller driven over HTTP"""

from fastapi import APIRouter, Depends, Request

from perpus_portal.api.controller import PortalController
from perpus_portal.api.dependencies import get_controller, get_request_id, get_session_registry
from perpus_portal.api.errors import failure_response
from perpus_portal.api.sessions import SessionRegistry
from perpus_portal.api.v1.schemas import (
    FailureResponse,
    LoginRequest,
    NavigateRequest,
    PasswordChangeFormRequest,
    ProfileUpdateRequest,
    RegisterFormRequest,
    ReminderResponse,
    ReminderSchema,
    SessionResponse,
    SuccessResponse,
    TabRequest,
    TransactionSchema,
    TransactionsResponse,
)
from perpus_portal.config import settings
from perpus_portal.domain.models import MemberRegistration, ProfileChanges
from perpus_portal.domain.session import PortalSession
from perpus_portal.infrastructure.observability.logging import log_member_event

router = APIRouter()

ERROR_RESPONSES = {status: {"model": FailureResponse} for status in (401, 404, 409, 422, 503)}


def get_portal_session(session_id: str, registry: SessionRegistry = Depends(get_session_registry)) -> PortalSession:
    return registry.get(session_id)


@router.post("/sessions", response_model=SessionResponse, status_code=201)
def create_session(registry: SessionRegistry = Depends(get_session_registry)):
    """Start a visitor session on the home view"""
    return SessionResponse.from_session(registry.create())


@router.get("/sessions/{session_id}", response_model=SessionResponse, responses=ERROR_RESPONSES)
def get_session(session: PortalSession = Depends(get_portal_session)):
    return SessionResponse.from_session(session)


@router.post("/sessions/{session_id}/navigate", response_model=SessionResponse, responses=ERROR_RESPONSES)
def navigate(
    request_body: NavigateRequest,
    session: PortalSession = Depends(get_portal_session),
    controller: PortalController = Depends(get_controller),
):
    outcome = controller.navigate(session, request_body.view)
    if not outcome.success:
        return failure_response(outcome)
    return SessionResponse.from_session(session)


@router.post("/sessions/{session_id}/login", response_model=SessionResponse, responses=ERROR_RESPONSES)
async def login(
    request_body: LoginRequest,
    request: Request,
    session: PortalSession = Depends(get_portal_session),
    controller: PortalController = Depends(get_controller),
):
    outcome = await controller.login(session, request_body.email, request_body.password)
    log_member_event(
        get_request_id(request),
        "login",
        outcome.code or "success",
        session_id=session.session_id,
        member_id=outcome.value.id if outcome.success else None,
    )
    if not outcome.success:
        return failure_response(outcome)
    return SessionResponse.from_session(session)


@router.post("/sessions/{session_id}/register", response_model=SessionResponse, responses=ERROR_RESPONSES)
async def register(
    request_body: RegisterFormRequest,
    request: Request,
    session: PortalSession = Depends(get_portal_session),
    controller: PortalController = Depends(get_controller),
):
    """
    Register and log in with the same credentials.

    On success the session moves to the dashboard; when the automatic
    login fails it stays on the register view.
    """
    registration = MemberRegistration(
        name=request_body.name,
        email=request_body.email,
        password=request_body.password,
        phone=request_body.phone,
        address=request_body.address,
        type=request_body.type,
    )
    outcome = await controller.register(session, registration, request_body.confirm_password)
    log_member_event(
        get_request_id(request),
        "register",
        outcome.code or "success",
        session_id=session.session_id,
        member_id=outcome.value.id if outcome.success else None,
    )
    if not outcome.success:
        return failure_response(outcome)
    return SessionResponse.from_session(session)


@router.post("/sessions/{session_id}/logout", response_model=SessionResponse, responses=ERROR_RESPONSES)
def logout(
    request: Request,
    session: PortalSession = Depends(get_portal_session),
    controller: PortalController = Depends(get_controller),
):
    member_id = session.member.id if session.member else None
    outcome = controller.logout(session)
    log_member_event(get_request_id(request), "logout", outcome.code or "success", member_id=member_id)
    if not outcome.success:
        return failure_response(outcome)
    return SessionResponse.from_session(session)


@router.post("/sessions/{session_id}/tab", response_model=SessionResponse, responses=ERROR_RESPONSES)
def select_tab(
    request_body: TabRequest,
    session: PortalSession = Depends(get_portal_session),
    controller: PortalController = Depends(get_controller),
):
    outcome = controller.select_tab(session, request_body.tab)
    if not outcome.success:
        return failure_response(outcome)
    return SessionResponse.from_session(session)


@router.patch("/sessions/{session_id}/profile", response_model=SessionResponse, responses=ERROR_RESPONSES)
async def edit_profile(
    request_body: ProfileUpdateRequest,
    request: Request,
    session: PortalSession = Depends(get_portal_session),
    controller: PortalController = Depends(get_controller),
):
    changes = ProfileChanges(**request_body.model_dump(exclude_unset=True, exclude_none=True))
    outcome = await controller.update_profile(session, changes)
    log_member_event(get_request_id(request), "update_profile", outcome.code or "success", session_id=session.session_id)
    if not outcome.success:
        return failure_response(outcome)
    return SessionResponse.from_session(session)


@router.post("/sessions/{session_id}/password", response_model=SuccessResponse, responses=ERROR_RESPONSES)
async def change_password(
    request_body: PasswordChangeFormRequest,
    request: Request,
    session: PortalSession = Depends(get_portal_session),
    controller: PortalController = Depends(get_controller),
):
    outcome = await controller.change_password(
        session,
        request_body.old_password,
        request_body.new_password,
        request_body.confirm_password,
    )
    log_member_event(get_request_id(request), "update_password", outcome.code or "success", session_id=session.session_id)
    if not outcome.success:
        return failure_response(outcome)
    return SuccessResponse()


@router.get("/sessions/{session_id}/history", response_model=TransactionsResponse, responses=ERROR_RESPONSES)
async def history(
    session: PortalSession = Depends(get_portal_session),
    controller: PortalController = Depends(get_controller),
):
    outcome = await controller.history(session)
    if not outcome.success:
        return failure_response(outcome)
    return TransactionsResponse(
        member_id=session.member.id,
        transactions=[TransactionSchema.from_transaction(t) for t in outcome.value],
    )


@router.get("/sessions/{session_id}/alert", response_model=ReminderResponse, responses=ERROR_RESPONSES)
async def alert(
    session: PortalSession = Depends(get_portal_session),
    controller: PortalController = Depends(get_controller),
):
    """Dashboard reminder; null when nothing is due or after dismissal"""
    outcome = await controller.alert(session)
    if not outcome.success:
        return failure_response(outcome)
    if outcome.value is None:
        return ReminderResponse()
    return ReminderResponse(alert=ReminderSchema.from_reminder(outcome.value, settings.reminder_preview_limit))


@router.post("/sessions/{session_id}/alert/dismiss", response_model=SessionResponse, responses=ERROR_RESPONSES)
def dismiss_alert(
    session: PortalSession = Depends(get_portal_session),
    controller: PortalController = Depends(get_controller),
):
    outcome = controller.dismiss_alert(session)
    if not outcome.success:
        return failure_response(outcome)
    return SessionResponse.from_session(session)
