"""Unit tests for the portal session state machine"""

import pytest

from perpus_portal.domain.exceptions import InvalidTransitionError, NotAuthenticatedError
from perpus_portal.domain.models import Member
from perpus_portal.domain.session import DashboardTab, PortalSession, View


@pytest.fixture
def member() -> Member:
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


def test_new_session_starts_at_home():
    session = PortalSession(session_id="s1")

    assert session.view is View.HOME
    assert session.member is None
    assert not session.authenticated


@pytest.mark.parametrize(
    "path",
    [
        [View.LOGIN],
        [View.REGISTER],
        [View.LOGIN, View.REGISTER, View.LOGIN],
        [View.REGISTER, View.HOME],
        [View.LOGIN, View.HOME, View.REGISTER],
    ],
)
def test_allowed_navigation(path):
    session = PortalSession(session_id="s1")
    for view in path:
        session.navigate(view)
    assert session.view is path[-1]


@pytest.mark.parametrize("target", [View.DASHBOARD, View.HOME])
def test_home_cannot_jump_to_dashboard_or_itself(target):
    session = PortalSession(session_id="s1")
    with pytest.raises(InvalidTransitionError):
        session.navigate(target)
    assert session.view is View.HOME


def test_enter_dashboard_from_login(member):
    session = PortalSession(session_id="s1")
    session.navigate(View.LOGIN)

    session.enter_dashboard(member)

    assert session.view is View.DASHBOARD
    assert session.member is member
    assert session.tab is DashboardTab.PROFILE


def test_enter_dashboard_requires_login_or_register_view(member):
    session = PortalSession(session_id="s1")
    with pytest.raises(InvalidTransitionError):
        session.enter_dashboard(member)


def test_dashboard_navigation_is_closed(member):
    session = PortalSession(session_id="s1", view=View.LOGIN)
    session.enter_dashboard(member)

    with pytest.raises(InvalidTransitionError):
        session.navigate(View.LOGIN)


def test_logout_clears_member_and_returns_home(member):
    session = PortalSession(session_id="s1", view=View.REGISTER)
    session.enter_dashboard(member)
    session.select_tab(DashboardTab.HISTORY)
    session.dismiss_alert()

    session.logout()

    assert session.view is View.HOME
    assert session.member is None
    assert session.tab is DashboardTab.PROFILE
    assert session.alert_dismissed is False


def test_logout_without_member_is_rejected():
    with pytest.raises(NotAuthenticatedError):
        PortalSession(session_id="s1").logout()


def test_tabs_and_alert_need_a_member():
    session = PortalSession(session_id="s1")
    with pytest.raises(NotAuthenticatedError):
        session.select_tab(DashboardTab.PASSWORD)
    with pytest.raises(NotAuthenticatedError):
        session.dismiss_alert()


def test_new_login_resets_dismissed_alert(member):
    session = PortalSession(session_id="s1", view=View.LOGIN)
    session.enter_dashboard(member)
    session.dismiss_alert()
    session.logout()

    session.navigate(View.LOGIN)
    session.enter_dashboard(member)

    assert session.alert_dismissed is False
