"""Portal session state machine - current view, member and dashboard tab"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional

from perpus_portal.domain.exceptions import InvalidTransitionError, NotAuthenticatedError
from perpus_portal.domain.models import Member


class View(str, Enum):
    HOME = "home"
    LOGIN = "login"
    REGISTER = "register"
    DASHBOARD = "dashboard"


class DashboardTab(str, Enum):
    PROFILE = "profile"
    HISTORY = "history"
    PASSWORD = "password"


# Plain navigation; dashboard is only reachable through login/register
NAVIGATION: Dict[View, FrozenSet[View]] = {
    View.HOME: frozenset({View.LOGIN, View.REGISTER}),
    View.LOGIN: frozenset({View.REGISTER, View.HOME}),
    View.REGISTER: frozenset({View.LOGIN, View.HOME}),
    View.DASHBOARD: frozenset(),
}


@dataclass
class PortalSession:
    """
    State held for one visitor.

    Transitions:
    - home -> login | register, login <-> register, login | register -> home
    - login | register -> dashboard after a successful authentication
    - dashboard -> home on logout (drops the member)
    """

    session_id: str
    view: View = View.HOME
    member: Optional[Member] = None
    tab: DashboardTab = DashboardTab.PROFILE
    alert_dismissed: bool = False
    loading: bool = False

    @property
    def authenticated(self) -> bool:
        return self.member is not None

    def navigate(self, target: View) -> None:
        if target not in NAVIGATION[self.view]:
            raise InvalidTransitionError(f"Cannot go from {self.view.value} to {target.value}")
        self.view = target

    def enter_dashboard(self, member: Member) -> None:
        if self.view not in (View.LOGIN, View.REGISTER):
            raise InvalidTransitionError(f"Cannot log in from {self.view.value}")
        self.member = member
        self.view = View.DASHBOARD
        self.tab = DashboardTab.PROFILE
        self.alert_dismissed = False

    def logout(self) -> None:
        self.require_member()
        self.member = None
        self.view = View.HOME
        self.tab = DashboardTab.PROFILE
        self.alert_dismissed = False

    def require_member(self) -> Member:
        if self.member is None or self.view is not View.DASHBOARD:
            raise NotAuthenticatedError()
        return self.member

    def select_tab(self, tab: DashboardTab) -> None:
        self.require_member()
        self.tab = tab

    def dismiss_alert(self) -> None:
        self.require_member()
        self.alert_dismissed = True
