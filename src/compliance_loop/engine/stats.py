"""Closed-loop KPIs over QA actions.

Closure rate, time to close and overdue counts, rolled up overall and per
owner and unit for dashboards.
"""

from dataclasses import dataclass, field
from typing import Iterable

from compliance_loop.engine.dates import days_between, is_before, normalize_date
from compliance_loop.models.qa_action import QaAction

UNASSIGNED_OWNER = 'Unassigned'
UNKNOWN_UNIT = 'Unknown'

# Closure speed buckets, in days from creation to completion
CLOSE_WITHIN_DAYS = (7, 14, 30)


@dataclass
class StatusTally:
    """Action counts for one owner or unit."""

    open: int = 0
    complete: int = 0
    overdue: int = 0

    def to_dict(self) -> dict:
        return {
            "open": self.open,
            "complete": self.complete,
            "overdue": self.overdue,
        }


@dataclass
class ClosedLoopStats:
    """Roll-up of QA action outcomes."""

    total: int = 0
    open: int = 0
    complete: int = 0
    closure_rate: int = 0
    closed_within: dict[int, int] = field(
        default_factory=lambda: {days: 0 for days in CLOSE_WITHIN_DAYS}
    )
    overdue_count: int = 0
    avg_close_days: float = 0.0
    by_owner: dict[str, StatusTally] = field(default_factory=dict)
    by_unit: dict[str, StatusTally] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "open": self.open,
            "complete": self.complete,
            "closure_rate": self.closure_rate,
            "closed_within": dict(self.closed_within),
            "overdue_count": self.overdue_count,
            "avg_close_days": self.avg_close_days,
            "by_owner": {k: v.to_dict() for k, v in self.by_owner.items()},
            "by_unit": {k: v.to_dict() for k, v in self.by_unit.items()},
        }


def compute_closed_loop_stats(actions: Iterable[QaAction], today: str) -> ClosedLoopStats:
    """Closure and overdue KPIs for ``actions`` as of ``today``.

    Soft-deleted actions are left out. Time to close is measured from
    ``created_at`` to ``completed_at`` and only counts actions that have
    both dates.
    """
    stats = ClosedLoopStats()
    close_days: list[int] = []

    for action in actions:
        if action.deleted_at:
            continue

        stats.total += 1
        owner = action.owner.strip() or UNASSIGNED_OWNER
        unit = action.unit.strip() or UNKNOWN_UNIT
        tallies = (
            stats.by_owner.setdefault(owner, StatusTally()),
            stats.by_unit.setdefault(unit, StatusTally()),
        )

        if action.status == 'complete':
            stats.complete += 1
            for tally in tallies:
                tally.complete += 1

            created = normalize_date(action.created_at)
            completed = normalize_date(action.completed_at)
            if created and completed:
                days = days_between(created, completed)
                close_days.append(days)
                for limit in CLOSE_WITHIN_DAYS:
                    if days <= limit:
                        stats.closed_within[limit] += 1
            continue

        stats.open += 1
        for tally in tallies:
            tally.open += 1
        if is_before(action.due_date, today):
            stats.overdue_count += 1
            for tally in tallies:
                tally.overdue += 1

    if stats.total:
        stats.closure_rate = int(100 * stats.complete / stats.total + 0.5)
    if close_days:
        stats.avg_close_days = int(10 * sum(close_days) / len(close_days) + 0.5) / 10

    return stats
