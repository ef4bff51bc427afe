"""Loan reminder classifier - picks the single dashboard alert for a member"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional

from perpus_portal.domain.models import Transaction
from perpus_portal.utils.date_utils import days_between, parse_calendar_date

DEFAULT_WINDOW_DAYS = 7
DEFAULT_PREVIEW_LIMIT = 3


class Severity(str, Enum):
    ERROR = "error"  # overdue loans
    SUCCESS = "success"  # friendly due-soon reminder


@dataclass
class LoanStanding:
    """A loan together with its distance to the due date"""

    loan: Transaction
    days_diff: int

    @property
    def days_overdue(self) -> int:
        return max(-self.days_diff, 0)

    @property
    def days_left(self) -> int:
        return max(self.days_diff, 0)

    @property
    def label(self) -> str:
        if self.days_diff < 0:
            return f"{_days(self.days_overdue)} overdue"
        if self.days_diff == 0:
            return "Due today"
        return f"{_days(self.days_left)} left"


@dataclass
class LoanClassification:
    overdue: List[LoanStanding] = field(default_factory=list)
    due_soon: List[LoanStanding] = field(default_factory=list)


@dataclass
class Reminder:
    """Alert shown once per dashboard session"""

    severity: Severity
    title: str
    message: str
    detail: str
    days: int  # exact for one loan, max overdue / min left for several
    items: List[LoanStanding]

    @property
    def total(self) -> int:
        return len(self.items)

    def preview(self, limit: int = DEFAULT_PREVIEW_LIMIT) -> List[LoanStanding]:
        """First entries in source order"""
        return self.items[:limit]

    def remaining(self, limit: int = DEFAULT_PREVIEW_LIMIT) -> int:
        return max(len(self.items) - limit, 0)


def _days(count: int) -> str:
    return f"{count} day" if count == 1 else f"{count} days"


def _due_text(days_left: int) -> str:
    return "today" if days_left == 0 else f"in {_days(days_left)}"


def classify_loans(
    loans: List[Transaction],
    today: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> LoanClassification:
    """
    Partition loans by due date relative to today.

    - overdue:  due date already passed (days_diff < 0)
    - due_soon: due within the window, today included (0 <= days_diff <= window)
    Loans further out, or with an unparseable due date, are left out.
    """
    classification = LoanClassification()
    for loan in loans:
        due = parse_calendar_date(loan.due_date)
        if due is None:
            continue
        days_diff = days_between(today, due)
        if days_diff < 0:
            classification.overdue.append(LoanStanding(loan, days_diff))
        elif days_diff <= window_days:
            classification.due_soon.append(LoanStanding(loan, days_diff))
    return classification


def _overdue_reminder(overdue: List[LoanStanding]) -> Reminder:
    if len(overdue) == 1:
        standing = overdue[0]
        return Reminder(
            severity=Severity.ERROR,
            title="BOOK OVERDUE!",
            message=(
                f'"{standing.loan.book_title}" is {_days(standing.days_overdue)} past its return date. '
                "Please return it to the library as soon as possible to avoid a fine."
            ),
            detail=f"Due date: {standing.loan.due_date}",
            days=standing.days_overdue,
            items=overdue,
        )

    worst = max(s.days_overdue for s in overdue)
    return Reminder(
        severity=Severity.ERROR,
        title="BOOK OVERDUE!",
        message=(
            f"You have {len(overdue)} overdue books. Some are up to {_days(worst)} late. "
            "Please return all of them as soon as possible to avoid fines."
        ),
        detail=f"{len(overdue)} books need to be returned soon",
        days=worst,
        items=overdue,
    )


def _due_soon_reminder(due_soon: List[LoanStanding]) -> Reminder:
    if len(due_soon) == 1:
        standing = due_soon[0]
        return Reminder(
            severity=Severity.SUCCESS,
            title="RETURN REMINDER",
            message=(
                f'"{standing.loan.book_title}" is due {_due_text(standing.days_left)}. '
                "Remember to return it on time to avoid a fine."
            ),
            detail=f"Due date: {standing.loan.due_date}",
            days=standing.days_left,
            items=due_soon,
        )

    soonest = min(s.days_left for s in due_soon)
    return Reminder(
        severity=Severity.SUCCESS,
        title="RETURN REMINDER",
        message=(
            f"You have {len(due_soon)} books due soon. The earliest is due {_due_text(soonest)}. "
            "Make sure to return all of them on time."
        ),
        detail=f"{len(due_soon)} books need to be returned soon",
        days=soonest,
        items=due_soon,
    )


def build_reminder(
    loans: List[Transaction],
    today: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> Optional[Reminder]:
    """
    Main entry point: select the alert for a member's active loans.

    Overdue loans take priority and hide due-soon ones entirely; without
    either there is no alert.
    """
    classification = classify_loans(loans, today, window_days)
    if classification.overdue:
        return _overdue_reminder(classification.overdue)
    if classification.due_soon:
        return _due_soon_reminder(classification.due_soon)
    return None
