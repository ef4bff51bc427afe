"""Session/view controller - routes portal actions to the repositories"""

import contextlib
import logging
from datetime import date
from typing import Callable, Iterator, List, Optional

from perpus_portal.config import settings
from perpus_portal.domain.exceptions import (
    DomainException,
    InvalidTransitionError,
    RequestInProgressError,
    ValidationError,
)
from perpus_portal.domain.models import Member, MemberRegistration, Outcome, ProfileChanges, Transaction
from perpus_portal.domain.reminders import Reminder, build_reminder
from perpus_portal.domain.session import DashboardTab, PortalSession, View
from perpus_portal.domain.validation import is_known_member_type, require_fields, require_matching_passwords
from perpus_portal.infrastructure.observability.metrics import record_login, record_registration, record_reminder
from perpus_portal.infrastructure.store.repositories import MemberRepository, TransactionRepository
from perpus_portal.utils.date_utils import utc_today

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def _busy(session: PortalSession) -> Iterator[None]:
    """Best-effort guard against a double submit on one session"""
    if session.loading:
        raise RequestInProgressError()
    session.loading = True
    try:
        yield
    finally:
        session.loading = False


class PortalController:
    """
    Drives a PortalSession through member actions.

    Every action returns an Outcome; state changes happen only when the
    underlying store operation succeeded.
    """

    def __init__(
        self,
        members: MemberRepository,
        transactions: TransactionRepository,
        today: Callable[[], date] = utc_today,
        window_days: int | None = None,
        returned_statuses: List[str] | None = None,
    ):
        self.members = members
        self.transactions = transactions
        self.today = today
        self.window_days = window_days if window_days is not None else settings.reminder_window_days
        self.returned_statuses = returned_statuses if returned_statuses is not None else settings.returned_statuses

    def navigate(self, session: PortalSession, view: View) -> Outcome[None]:
        try:
            session.navigate(view)
        except DomainException as e:
            return Outcome.fail(e)
        return Outcome.ok()

    async def login(self, session: PortalSession, email: str, password: str) -> Outcome[Member]:
        if session.view is not View.LOGIN:
            return Outcome.fail(InvalidTransitionError(f"Cannot log in from {session.view.value}"))
        try:
            with _busy(session):
                outcome = await self.members.authenticate(email, password)
        except DomainException as e:
            return Outcome.fail(e)

        record_login(outcome.code)
        if outcome.success:
            session.enter_dashboard(outcome.value)
        return outcome

    async def register(
        self,
        session: PortalSession,
        registration: MemberRegistration,
        confirm_password: str,
    ) -> Outcome[Member]:
        """Register, then log in with the same credentials"""
        if session.view is not View.REGISTER:
            return Outcome.fail(InvalidTransitionError(f"Cannot register from {session.view.value}"))
        try:
            require_fields(
                {
                    "name": registration.name,
                    "email": registration.email,
                    "password": registration.password,
                    "phone": registration.phone,
                    "address": registration.address,
                }
            )
            require_matching_passwords(registration.password, confirm_password)
            if not is_known_member_type(registration.type):
                raise ValidationError(f"Unknown member type: {registration.type}")

            with _busy(session):
                created = await self.members.register(registration)
                record_registration(created.code)
                if not created.success:
                    return Outcome.fail(created.failure)
                outcome = await self.members.authenticate(registration.email, registration.password)
        except DomainException as e:
            return Outcome.fail(e)

        record_login(outcome.code)
        if outcome.success:
            session.enter_dashboard(outcome.value)
        else:
            logger.warning("Login after registration failed", extra={"code": outcome.code})
        return outcome

    def logout(self, session: PortalSession) -> Outcome[None]:
        try:
            session.logout()
        except DomainException as e:
            return Outcome.fail(e)
        return Outcome.ok()

    def select_tab(self, session: PortalSession, tab: DashboardTab) -> Outcome[None]:
        try:
            session.select_tab(tab)
        except DomainException as e:
            return Outcome.fail(e)
        return Outcome.ok()

    async def update_profile(self, session: PortalSession, changes: ProfileChanges) -> Outcome[Member]:
        """Save profile edits and refresh the member held by the session"""
        try:
            member = session.require_member()
            with _busy(session):
                outcome = await self.members.update_profile(member.id, changes)
        except DomainException as e:
            return Outcome.fail(e)

        if not outcome.success:
            return Outcome.fail(outcome.failure)
        for name, value in changes.as_update().items():
            setattr(member, name, value)
        return Outcome.ok(member)

    async def change_password(
        self,
        session: PortalSession,
        old_password: str,
        new_password: str,
        confirm_password: str,
    ) -> Outcome[None]:
        try:
            member = session.require_member()
            require_matching_passwords(new_password, confirm_password)
            with _busy(session):
                return await self.members.update_password(member.id, old_password, new_password)
        except DomainException as e:
            return Outcome.fail(e)

    async def history(self, session: PortalSession) -> Outcome[List[Transaction]]:
        """Borrowing history; opens the history tab"""
        try:
            member = session.require_member()
        except DomainException as e:
            return Outcome.fail(e)
        outcome = await self.transactions.list_for_member(member.id)
        if outcome.success:
            session.tab = DashboardTab.HISTORY
        return outcome

    async def reminder_for(self, member_id: str, today: date | None = None) -> Outcome[Optional[Reminder]]:
        """Alert for a member's loans that are not yet returned"""
        loans = await self.transactions.list_for_member(member_id)
        if not loans.success:
            return Outcome.fail(loans.failure)

        active = [loan for loan in loans.value if not loan.is_returned(self.returned_statuses)]
        reminder = build_reminder(active, today or self.today(), self.window_days)
        record_reminder(reminder.severity.value if reminder else None)
        return Outcome.ok(reminder)

    async def alert(self, session: PortalSession) -> Outcome[Optional[Reminder]]:
        """Dashboard alert, or None once dismissed in this session"""
        try:
            member = session.require_member()
        except DomainException as e:
            return Outcome.fail(e)
        if session.alert_dismissed:
            return Outcome.ok(None)
        return await self.reminder_for(member.id)

    def dismiss_alert(self, session: PortalSession) -> Outcome[None]:
        try:
            session.dismiss_alert()
        except DomainException as e:
            return Outcome.fail(e)
        return Outcome.ok()
