"""
Case models for the compliance workflow engine.

A case links one audit finding to its remediation chain: one QA action and,
at creation, one education draft.
"""

from typing import Optional
from pydantic import BaseModel, Field

from .qa_action import QaAction, Severity
from .education import EducationSession


class BundleInput(BaseModel):
    """Finding details used to open a new case."""
    template_id: str = ''
    template_title: str = ''
    finding_label: str
    finding_reason: str = ''
    audit_date: str = ''
    session_id: str = ''
    sample_id: str = ''
    severity: Severity = 'medium'
    unit: str = ''
    topic: str = ''
    staff_audited: str = ''
    staff_role: str = ''
    owner: str = ''
    ftag_tags: list[str] = Field(default_factory=list)
    nydoh_tags: list[str] = Field(default_factory=list)


class CaseBundle(BaseModel):
    """The records constructed for a new case. Persisting them is up to the caller."""
    case_id: str
    qa_action: QaAction
    education_draft: EducationSession
    re_audit_due_date: str


class CaseOpenResult(BaseModel):
    """Outcome of asking the service to open a case.

    Exactly one of ``bundle`` and ``duplicate_of`` is set.
    """
    bundle: Optional[CaseBundle] = None
    duplicate_of: Optional[QaAction] = None

    @property
    def created(self) -> bool:
        return self.bundle is not None
