"""Escalation scanning over open cases.

Events are derived on every pass and never stored. Their ids depend only on
the action and the rule, so repeated scans produce the same identifiers.
"""

from dataclasses import dataclass, field
from typing import Iterable, Literal

import structlog

from compliance_loop.engine.dates import add_days, is_before, normalize_date
from compliance_loop.models.qa_action import QaAction

logger = structlog.get_logger(__name__)

EscalationType = Literal['critical_overdue', 'stale_case', 'reaudit_missed']

DEFAULT_INACTIVITY_DAYS = 5

# Recipient used when an action has no owner
DEFAULT_RECIPIENTS: dict[str, str] = {
    'critical_overdue': 'QAPI Coordinator',
    'reaudit_missed': 'Unit Manager',
    'stale_case': 'Director of Nursing',
}

# Suffix of the event id per rule
EVENT_ID_SUFFIX: dict[str, str] = {
    'critical_overdue': 'critical',
    'reaudit_missed': 'reaudit',
    'stale_case': 'stale',
}


@dataclass(frozen=True)
class EscalationEvent:
    """Alert raised for a case that needs attention."""

    id: str
    case_id: str
    action_id: str
    type: EscalationType
    message: str
    recipients: list[str] = field(default_factory=list)
    created_at: str = ''

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "case_id": self.case_id,
            "action_id": self.action_id,
            "type": self.type,
            "message": self.message,
            "recipients": list(self.recipients),
            "created_at": self.created_at,
        }


def _event(action: QaAction, kind: EscalationType, message: str, created_at: str) -> EscalationEvent:
    return EscalationEvent(
        id=f"esc-{action.id}-{EVENT_ID_SUFFIX[kind]}",
        case_id=action.case_id,
        action_id=action.id,
        type=kind,
        message=message,
        recipients=[action.owner or DEFAULT_RECIPIENTS[kind]],
        created_at=created_at,
    )


def escalations_for_action(
    action: QaAction,
    today: str,
    inactivity_threshold_days: int = DEFAULT_INACTIVITY_DAYS,
) -> list[EscalationEvent]:
    """All escalation events for one action; the rules are independent."""
    if not action.case_id:
        return []

    today_iso = normalize_date(today)
    if not today_iso:
        return []

    created_at = f"{today_iso}T00:00:00+00:00"
    is_open = action.status != 'complete'
    events: list[EscalationEvent] = []

    if is_open and action.severity == 'critical' and is_before(action.due_date, today_iso):
        events.append(_event(
            action,
            'critical_overdue',
            f"Critical QA action overdue for case {action.case_id}",
            created_at,
        ))

    if (
        action.re_audit_due_date
        and not action.re_audit_completed_at
        and is_before(action.re_audit_due_date, today_iso)
    ):
        events.append(_event(
            action,
            'reaudit_missed',
            f"Re-audit missed due date for case {action.case_id}",
            created_at,
        ))

    cutoff = add_days(today_iso, -inactivity_threshold_days)
    if is_open and is_before(action.created_at, cutoff):
        events.append(_event(
            action,
            'stale_case',
            f"No progress for {inactivity_threshold_days}+ days on case {action.case_id}",
            created_at,
        ))

    return events


def scan_escalations(
    actions: Iterable[QaAction],
    today: str,
    inactivity_threshold_days: int = DEFAULT_INACTIVITY_DAYS,
) -> list[EscalationEvent]:
    """Escalation events for every action, in input order.

    Actions without a case id never escalate.
    """
    events: list[EscalationEvent] = []
    scanned = 0
    for action in actions:
        scanned += 1
        events.extend(escalations_for_action(action, today, inactivity_threshold_days))

    logger.debug(
        "escalation_scan_complete",
        today=today,
        actions_scanned=scanned,
        events=len(events),
    )
    return events
