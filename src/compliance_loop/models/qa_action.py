"""
QA action models for the compliance workflow engine.

A QA action is the corrective-action record at the centre of a case. Dates
are ISO ``YYYY-MM-DD`` strings and timestamps ISO-8601 strings; the empty
string means "not set".
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field


# Type aliases - severity and status enums
Severity = Literal['critical', 'high', 'medium', 'low']
QaActionStatus = Literal['open', 'complete']

EVIDENCE_FIELDS = (
    'ev_policy_reviewed',
    'ev_education_provided',
    'ev_competency_validated',
    'ev_corrective_action',
    'ev_monitoring_in_place',
)


class ReAuditResult(BaseModel):
    """Outcome of the follow-up audit for a QA action."""
    passed: bool
    score: Optional[float] = None
    completed_at: str = ''
    session_ref: str = ''
    notes: str = ''


class ChangeRecord(BaseModel):
    """One field change on a QA action. Values are stored as display text."""
    timestamp: str
    user: str
    field: str
    old_value: str = ''
    new_value: str = ''


class QaAction(BaseModel):
    """Corrective-action record; the primary state holder of a case."""
    id: str
    case_id: str = ''
    created_at: str = ''
    status: QaActionStatus = 'open'
    severity: Severity = 'medium'

    # Finding
    template_id: str = ''
    template_title: str = ''
    unit: str = ''
    audit_date: str = ''
    session_id: str = ''
    sample: str = ''
    issue: str = ''
    reason: str = ''
    topic: str = ''
    summary: str = ''
    owner: str = ''
    staff_audited: str = ''
    staff_role: str = ''
    ftag_tags: list[str] = Field(default_factory=list)
    nydoh_tags: list[str] = Field(default_factory=list)

    due_date: str = ''
    completed_at: str = ''
    notes: str = ''
    deleted_at: str = ''

    # Re-audit
    re_audit_due_date: str = ''
    re_audit_completed_at: str = ''
    re_audit_session_ref: str = ''
    re_audit_template_id: str = ''
    re_audit_results: Optional[ReAuditResult] = None

    # Evidence checklist
    ev_policy_reviewed: bool = False
    ev_education_provided: bool = False
    ev_competency_validated: bool = False
    ev_corrective_action: bool = False
    ev_monitoring_in_place: bool = False

    # Education links are references; the sessions are not owned here
    linked_edu_session_id: str = ''
    linked_education_sessions: list[str] = Field(default_factory=list)

    # Accountability trail
    modified_at: str = ''
    modified_by: str = ''
    change_history: list[ChangeRecord] = Field(default_factory=list)

    def evidence_count(self) -> int:
        """Number of evidence flags that are set."""
        return sum(1 for name in EVIDENCE_FIELDS if getattr(self, name))

    def education_refs(self) -> list[str]:
        """All referenced education session ids, primary link first, no repeats."""
        refs: list[str] = []
        for ref in [self.linked_edu_session_id, *self.linked_education_sessions]:
            if ref and ref not in refs:
                refs.append(ref)
        return refs
