"""
Education session models for the compliance workflow engine.
"""

from typing import Literal
from pydantic import BaseModel, Field


# Type alias - education session status
EducationStatus = Literal['planned', 'complete']


class EducationSession(BaseModel):
    """A remediation or training assignment.

    ``linked_qa_action_id`` is a back-reference. The session outlives the QA
    action it was created for.
    """
    id: str
    case_id: str = ''
    created_at: str = ''
    status: EducationStatus = 'planned'
    topic: str = ''
    summary: str = ''
    audience: str = ''
    instructor: str = ''
    unit: str = ''
    scheduled_date: str = ''
    completed_date: str = ''
    notes: str = ''
    template_id: str = ''
    template_title: str = ''
    issue: str = ''
    linked_qa_action_id: str = ''
    category: str = ''
    attendees: list[str] = Field(default_factory=list)
