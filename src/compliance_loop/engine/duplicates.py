"""Duplicate detection for QA actions and audit sessions.

Detection is advisory: a match is handed back for the caller to confirm or
override, nothing here refuses to create a record.
"""

from typing import Iterable, Optional

import structlog

from compliance_loop.engine.dates import add_days, normalize_date
from compliance_loop.models.audit import AuditSession
from compliance_loop.models.qa_action import QaAction

logger = structlog.get_logger(__name__)

DUPLICATE_WINDOW_DAYS = 7


def find_duplicate_qa_action(
    candidate: QaAction,
    existing: Iterable[QaAction],
    today: str,
    window_days: int = DUPLICATE_WINDOW_DAYS,
) -> Optional[QaAction]:
    """Return the first existing action that looks like a re-submission of ``candidate``.

    A match has the same issue, unit and audited staff member, an audit date
    no earlier than ``window_days`` before ``today``, is not complete and is
    not soft-deleted. An invalid ``today`` disables detection.
    """
    cutoff = add_days(today, -window_days)
    if not cutoff:
        return None

    for action in existing:
        if action.id == candidate.id:
            continue
        if action.status == 'complete' or action.deleted_at:
            continue
        if (
            action.issue != candidate.issue
            or action.unit != candidate.unit
            or action.staff_audited != candidate.staff_audited
        ):
            continue

        audit_date = normalize_date(action.audit_date)
        if audit_date and audit_date >= cutoff:
            logger.debug(
                "duplicate_qa_action_found",
                candidate_issue=candidate.issue,
                match_id=action.id,
            )
            return action

    return None


def find_duplicate_session(
    session_id: str,
    existing: Iterable[AuditSession],
) -> Optional[AuditSession]:
    """Return the audit session whose header carries ``session_id``, if any."""
    if not session_id:
        return None
    for session in existing:
        if session.header.session_id == session_id:
            return session
    return None
