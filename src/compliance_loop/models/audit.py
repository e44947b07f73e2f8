"""
Audit session models for the compliance workflow engine.

Only the fields the workflow engine reads are modelled; sample answers and
scoring belong to the audit tooling.
"""

from typing import Literal
from pydantic import BaseModel, Field


# Type alias - audit session status
AuditSessionStatus = Literal['draft', 'in_progress', 'complete']


class SessionHeader(BaseModel):
    """Header block of an audit session."""
    status: AuditSessionStatus = 'draft'
    session_id: str
    audit_date: str = ''
    auditor: str = ''
    unit: str = ''


class AuditSample(BaseModel):
    """One audited sample within a session."""
    id: str
    staff_audited: str = ''


class AuditSession(BaseModel):
    """An audit session; the source of findings."""
    id: str
    template_id: str = ''
    template_title: str = ''
    created_at: str = ''
    header: SessionHeader
    samples: list[AuditSample] = Field(default_factory=list)
