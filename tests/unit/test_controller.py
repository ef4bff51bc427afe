"""Unit tests for PortalController with in-memory repositories"""

from typing import List

import pytest

from factories import TODAY, make_loan
from perpus_portal.api.controller import PortalController
from perpus_portal.domain.exceptions import EmailNotFoundError, TransportError
from perpus_portal.domain.models import Member, MemberRegistration, Outcome, Transaction
from perpus_portal.domain.session import DashboardTab, PortalSession, View


def _member() -> Member:
    return Member(
        id="-Nmember",
        uid="42",
        name="Siti",
        email="siti@example.com",
        phone="0812",
        address="Bandung",
        type="Student",
        status="active",
        created_at="2024-05-01T00:00:00.000Z",
    )


class StubMembers:
    """Registration succeeds; authenticate answers with a preset outcome"""

    def __init__(self, login: Outcome):
        self.login = login
        self.calls: List[str] = []

    async def register(self, registration: MemberRegistration) -> Outcome[str]:
        self.calls.append("register")
        return Outcome.ok("-Nmember")

    async def authenticate(self, email: str, password: str) -> Outcome[Member]:
        self.calls.append("authenticate")
        return self.login


class StubTransactions:
    def __init__(self, outcome: Outcome[List[Transaction]]):
        self.outcome = outcome

    async def list_for_member(self, member_id: str) -> Outcome[List[Transaction]]:
        return self.outcome


@pytest.fixture
def registration() -> MemberRegistration:
    return MemberRegistration("Siti", "siti@example.com", "rahasia123", "0812", "Bandung")


def _controller(login: Outcome = None, loans: Outcome = None, **kwargs) -> PortalController:
    return PortalController(
        StubMembers(login or Outcome.ok(_member())),
        StubTransactions(loans or Outcome.ok([])),
        today=lambda: TODAY,
        **kwargs,
    )


def _dashboard_session() -> PortalSession:
    session = PortalSession(session_id="s1", view=View.LOGIN)
    session.enter_dashboard(_member())
    return session


async def test_login_while_busy_is_rejected():
    controller = _controller()
    session = PortalSession(session_id="s1", view=View.LOGIN, loading=True)

    outcome = await controller.login(session, "siti@example.com", "rahasia123")

    assert outcome.code == "request_in_progress"
    assert controller.members.calls == []
    assert session.view is View.LOGIN
    assert session.loading is True


async def test_register_while_busy_is_rejected(registration):
    controller = _controller()
    session = PortalSession(session_id="s1", view=View.REGISTER, loading=True)

    outcome = await controller.register(session, registration, "rahasia123")

    assert outcome.code == "request_in_progress"
    assert controller.members.calls == []


async def test_loading_flag_is_cleared_after_an_action():
    controller = _controller()
    session = PortalSession(session_id="s1", view=View.LOGIN)

    await controller.login(session, "siti@example.com", "rahasia123")

    assert session.loading is False
    assert session.view is View.DASHBOARD


async def test_register_stays_on_register_when_login_fails(registration):
    controller = _controller(login=Outcome.fail(EmailNotFoundError()))
    session = PortalSession(session_id="s1", view=View.REGISTER)

    outcome = await controller.register(session, registration, "rahasia123")

    assert controller.members.calls == ["register", "authenticate"]
    assert outcome.code == "email_not_found"
    assert session.view is View.REGISTER
    assert session.member is None
    assert session.loading is False


async def test_register_logs_in_on_success(registration):
    controller = _controller()
    session = PortalSession(session_id="s1", view=View.REGISTER)

    outcome = await controller.register(session, registration, "rahasia123")

    assert outcome.success
    assert session.view is View.DASHBOARD


async def test_history_failure_keeps_current_tab():
    controller = _controller(loans=Outcome.fail(TransportError("Could not load transactions")))
    session = _dashboard_session()

    outcome = await controller.history(session)

    assert outcome.code == "transport_error"
    assert session.tab is DashboardTab.PROFILE


async def test_history_success_opens_history_tab():
    controller = _controller(loans=Outcome.ok([make_loan(3)]))
    session = _dashboard_session()

    outcome = await controller.history(session)

    assert len(outcome.value) == 1
    assert session.tab is DashboardTab.HISTORY


async def test_zero_day_window_only_reminds_loans_due_today():
    controller = _controller(loans=Outcome.ok([make_loan(0, "Today"), make_loan(1, "Tomorrow")]), window_days=0)

    reminder = (await controller.reminder_for("-Nmember")).value

    assert controller.window_days == 0
    assert [s.loan.book_title for s in reminder.items] == ["Today"]
