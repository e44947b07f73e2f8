"""
Closed-loop bundle generation.

Turns an audit finding into a new case: one open QA action plus one planned
education draft, cross-linked and sharing a case id. The corrective-action
deadline and the re-audit deadline come from the same severity table.
"""

from typing import Callable, Container, Optional

import structlog

from compliance_loop.core.clock import (
    Clock,
    IdGenerator,
    SystemClock,
    UuidIdGenerator,
    utc_date_iso,
    utc_timestamp_iso,
)
from compliance_loop.core.errors import IdentifierCollisionError
from compliance_loop.engine.dates import add_days
from compliance_loop.models.case import BundleInput, CaseBundle
from compliance_loop.models.education import EducationSession
from compliance_loop.models.qa_action import QaAction, Severity

logger = structlog.get_logger(__name__)

# Days from bundle creation until the action and its re-audit are due
DUE_POLICY: dict[str, int] = {
    'critical': 2,
    'high': 7,
    'medium': 14,
    'low': 30,
}

DEFAULT_SEVERITY: Severity = 'medium'
TOKEN_LENGTH = 8
MAX_ID_ATTEMPTS = 5
DEFAULT_AUDIENCE = 'Nursing'


def due_days_for(severity: str) -> int:
    """Days allowed for a severity; unknown severities get the medium window."""
    return DUE_POLICY.get(severity, DUE_POLICY[DEFAULT_SEVERITY])


def _unique_id(
    build: Callable[[str], str],
    id_generator: IdGenerator,
    taken: Container[str],
    issued: set[str],
    prefix: str,
) -> str:
    for _ in range(MAX_ID_ATTEMPTS):
        token = id_generator.new_token()[:TOKEN_LENGTH]
        candidate = build(token)
        if candidate not in taken and candidate not in issued:
            issued.add(candidate)
            return candidate
    raise IdentifierCollisionError(
        f"Could not generate a unique {prefix} identifier",
        prefix=prefix,
        attempts=MAX_ID_ATTEMPTS,
    )


def create_closed_loop_bundle(
    bundle_input: BundleInput,
    clock: Optional[Clock] = None,
    id_generator: Optional[IdGenerator] = None,
    existing_ids: Container[str] = frozenset(),
) -> CaseBundle:
    """
    Build the QA action and education draft for a new case.

    Args:
        bundle_input: The finding and its context.
        clock: Source of the creation instant. Defaults to the UTC wall clock.
        id_generator: Source of id tokens. Defaults to uuid4.
        existing_ids: Identifiers already in use; generated ids avoid them.

    Returns:
        The constructed case bundle. Nothing is persisted.

    Raises:
        IdentifierCollisionError: If no free identifier could be generated.
    """
    clock = clock or SystemClock()
    id_generator = id_generator or UuidIdGenerator()

    now = clock.now()
    created_at = utc_timestamp_iso(now)
    today = utc_date_iso(now)
    year = today[:4]
    severity = bundle_input.severity
    due_date = add_days(today, due_days_for(severity))

    issued: set[str] = set()
    case_id = _unique_id(
        lambda token: f"CASE-{year}-{token.upper()}", id_generator, existing_ids, issued, "case"
    )
    qa_id = _unique_id(lambda token: f"qa_{token}", id_generator, existing_ids, issued, "qa_action")
    edu_id = _unique_id(lambda token: f"edu_{token}", id_generator, existing_ids, issued, "education")

    topic = bundle_input.topic or bundle_input.finding_label

    qa_action = QaAction(
        id=qa_id,
        case_id=case_id,
        created_at=created_at,
        status='open',
        severity=severity,
        template_id=bundle_input.template_id,
        template_title=bundle_input.template_title,
        unit=bundle_input.unit,
        audit_date=bundle_input.audit_date,
        session_id=bundle_input.session_id,
        sample=bundle_input.sample_id,
        issue=bundle_input.finding_label,
        reason=bundle_input.finding_reason,
        topic=topic,
        summary=f"Closed-loop bundle created from finding: {bundle_input.finding_label}",
        owner=bundle_input.owner,
        staff_audited=bundle_input.staff_audited,
        staff_role=bundle_input.staff_role,
        ftag_tags=list(bundle_input.ftag_tags),
        nydoh_tags=list(bundle_input.nydoh_tags),
        due_date=due_date,
        re_audit_due_date=due_date,
        re_audit_template_id=bundle_input.template_id,
        linked_edu_session_id=edu_id,
        linked_education_sessions=[edu_id],
    )

    education_draft = EducationSession(
        id=edu_id,
        case_id=case_id,
        created_at=created_at,
        status='planned',
        topic=topic,
        summary=f"Education draft linked to case {case_id}",
        audience=bundle_input.staff_role or DEFAULT_AUDIENCE,
        instructor=bundle_input.owner,
        unit=bundle_input.unit,
        scheduled_date=due_date,
        template_id=bundle_input.template_id,
        template_title=bundle_input.template_title,
        issue=bundle_input.finding_label,
        linked_qa_action_id=qa_id,
    )

    logger.debug(
        "closed_loop_bundle_created",
        case_id=case_id,
        qa_action_id=qa_id,
        education_id=edu_id,
        severity=severity,
        due_date=due_date,
    )

    return CaseBundle(
        case_id=case_id,
        qa_action=qa_action,
        education_draft=education_draft,
        re_audit_due_date=due_date,
    )
