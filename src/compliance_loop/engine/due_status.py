"""Due-status classification for dated items."""

from dataclasses import dataclass
from typing import Literal

from compliance_loop.engine.dates import days_between, normalize_date
from compliance_loop.models.qa_action import QaAction

DueStatusKind = Literal['overdue', 'due-soon', 'upcoming']

DEFAULT_DUE_SOON_DAYS = 7


@dataclass(frozen=True)
class DueStatus:
    """Where a due date sits relative to a reference day."""

    status: DueStatusKind
    days_until: int
    is_overdue: bool

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "days_until": self.days_until,
            "is_overdue": self.is_overdue,
        }


def evaluate_due_status(
    today: str,
    due_date: str,
    due_soon_days: int = DEFAULT_DUE_SOON_DAYS,
) -> DueStatus:
    """Classify ``due_date`` as overdue, due-soon or upcoming as of ``today``.

    ``days_until`` is negative when overdue (days since due) and the days
    remaining otherwise. If either date is not a valid date the item is
    reported as upcoming with ``days_until`` 0.
    """
    today_iso = normalize_date(today)
    due_iso = normalize_date(due_date)
    if not today_iso or not due_iso:
        return DueStatus(status='upcoming', days_until=0, is_overdue=False)

    # ISO dates compare correctly as strings
    is_overdue = due_iso < today_iso
    if is_overdue:
        days_until = -days_between(due_iso, today_iso)
    else:
        days_until = days_between(today_iso, due_iso)

    if is_overdue:
        status: DueStatusKind = 'overdue'
    elif days_until <= due_soon_days:
        status = 'due-soon'
    else:
        status = 'upcoming'

    return DueStatus(status=status, days_until=days_until, is_overdue=is_overdue)


def is_action_overdue(action: QaAction, today: str) -> bool:
    """An open action whose valid due date is before ``today``."""
    if action.status == 'complete':
        return False
    return evaluate_due_status(today, action.due_date).is_overdue
