"""Workflow stage and progress projection for a case.

Stages are recomputed from the QA action, its audit session and its linked
education sessions on every call. They have no identity beyond their slot id
and are never stored.

The sequence is Audit Finding -> QA Action Opened -> Education -> Re-Audit ->
Closed. The education stage is present only for cases with an education
track and the re-audit stage only for cases with a re-audit scheduled or
recorded.
"""

from dataclasses import dataclass, field
from typing import Iterable, Literal, Optional

from compliance_loop.engine.dates import days_between, normalize_date
from compliance_loop.models.audit import AuditSession
from compliance_loop.models.education import EducationSession
from compliance_loop.models.qa_action import QaAction

StageStatus = Literal['pending', 'in-progress', 'complete', 'blocked']
LinkedItemType = Literal['session', 'qa-action', 'education']

STAGE_AUDIT_FINDING = 'audit-finding'
STAGE_QA_OPENED = 'qa-opened'
STAGE_EDUCATION = 'education'
STAGE_RE_AUDIT = 're-audit'
STAGE_CLOSED = 'closed'

STAGE_LINKS = {
    STAGE_AUDIT_FINDING: '/sessions',
    STAGE_QA_OPENED: '/qa-actions',
    STAGE_EDUCATION: '/education',
    STAGE_RE_AUDIT: '/sessions',
    STAGE_CLOSED: '/qa-actions',
}
DEFAULT_LINK = '/qa-actions'


@dataclass
class WorkflowStage:
    """One phase of a case's lifecycle."""

    id: str
    title: str
    description: str
    status: StageStatus = 'pending'
    completed_at: Optional[str] = None
    assignee: Optional[str] = None
    linked_item_id: Optional[str] = None
    linked_item_type: Optional[LinkedItemType] = None
    days_in_stage: Optional[int] = None
    started_at: Optional[str] = field(default=None, repr=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "completed_at": self.completed_at,
            "assignee": self.assignee,
            "linked_item_id": self.linked_item_id,
            "linked_item_type": self.linked_item_type,
            "days_in_stage": self.days_in_stage,
        }


@dataclass(frozen=True)
class WorkflowMetrics:
    """Roll-up of a stage list."""

    total_days: int
    completed_stages: int
    total_stages: int
    progress_percent: int
    is_blocked: bool
    blocked_reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "total_days": self.total_days,
            "completed_stages": self.completed_stages,
            "total_stages": self.total_stages,
            "progress_percent": self.progress_percent,
            "is_blocked": self.is_blocked,
            "blocked_reason": self.blocked_reason,
        }


@dataclass(frozen=True)
class NextAction:
    """Advisory routing hint for the next step on a case."""

    action: str
    description: str
    link_to: str
    stage_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "action": self.action,
            "description": self.description,
            "link_to": self.link_to,
            "stage_id": self.stage_id,
        }


@dataclass
class CaseProgress:
    """Stages, metrics and next step for one case."""

    stages: list[WorkflowStage]
    metrics: WorkflowMetrics
    next_action: NextAction

    def to_dict(self) -> dict:
        return {
            "stages": [s.to_dict() for s in self.stages],
            "metrics": self.metrics.to_dict(),
            "next_action": self.next_action.to_dict(),
        }


def _find_audit_session(
    action: QaAction, sessions: Iterable[AuditSession]
) -> Optional[AuditSession]:
    if not action.session_id:
        return None
    for session in sessions:
        if session.id == action.session_id or session.header.session_id == action.session_id:
            return session
    return None


def _linked_education(
    action: QaAction, education_sessions: Iterable[EducationSession]
) -> list[EducationSession]:
    refs = action.education_refs()
    return [
        edu for edu in education_sessions
        if edu.id in refs or (edu.linked_qa_action_id and edu.linked_qa_action_id == action.id)
    ]


def _latest(values: Iterable[str]) -> Optional[str]:
    present = [v for v in values if v]
    return max(present) if present else None


def _audit_stage(action: QaAction, session: Optional[AuditSession]) -> WorkflowStage:
    stage = WorkflowStage(
        id=STAGE_AUDIT_FINDING,
        title='Audit Finding',
        description=action.issue or 'Finding created from audit session.',
    )
    if session is not None:
        stage.status = 'complete'
        stage.completed_at = session.created_at or session.header.audit_date or None
        stage.linked_item_id = session.id
        stage.linked_item_type = 'session'
    elif action.session_id:
        stage.status = 'blocked'
        stage.description = f"Linked audit session {action.session_id} was not found."
    elif normalize_date(action.audit_date):
        stage.status = 'complete'
        stage.completed_at = action.audit_date
    return stage


def _qa_stage(action: QaAction) -> WorkflowStage:
    return WorkflowStage(
        id=STAGE_QA_OPENED,
        title='QA Action Opened',
        description=action.summary or 'Action opened for follow-up.',
        status='complete',
        completed_at=action.created_at or None,
        assignee=action.owner or None,
        linked_item_id=action.id,
        linked_item_type='qa-action',
    )


def _education_stage(
    action: QaAction, linked: list[EducationSession]
) -> WorkflowStage:
    stage = WorkflowStage(
        id=STAGE_EDUCATION,
        title='Education',
        description='Education session planned and delivered.',
    )
    if linked:
        first = linked[0]
        stage.linked_item_id = first.id
        stage.linked_item_type = 'education'
        stage.assignee = first.instructor or None

    completed = [edu for edu in linked if edu.status == 'complete']
    if completed or action.ev_education_provided:
        stage.status = 'complete'
        stage.completed_at = _latest(edu.completed_date for edu in completed)
    elif linked:
        stage.status = 'in-progress'
        stage.started_at = _latest(edu.created_at for edu in linked)
    elif action.education_refs():
        stage.status = 'blocked'
        stage.description = (
            f"Linked education session {action.education_refs()[0]} was not found."
        )
    return stage


def _re_audit_stage(action: QaAction) -> WorkflowStage:
    stage = WorkflowStage(
        id=STAGE_RE_AUDIT,
        title='Re-Audit',
        description='Follow-up audit verifies the corrective action.',
    )
    results = action.re_audit_results
    if results is not None:
        completed_at = results.completed_at or action.re_audit_completed_at or None
        ref = results.session_ref or action.re_audit_session_ref
        if ref:
            stage.linked_item_id = ref
            stage.linked_item_type = 'session'
        if results.passed:
            stage.status = 'complete'
            stage.completed_at = completed_at
        else:
            stage.status = 'in-progress'
            stage.description = 'Re-audit failed; a repeat re-audit is needed.'
            stage.started_at = completed_at
    elif action.re_audit_completed_at:
        stage.status = 'complete'
        stage.completed_at = action.re_audit_completed_at
        if action.re_audit_session_ref:
            stage.linked_item_id = action.re_audit_session_ref
            stage.linked_item_type = 'session'
    elif action.re_audit_due_date:
        stage.description = f"Re-audit due by {action.re_audit_due_date}."
    return stage


def _closed_stage(action: QaAction) -> WorkflowStage:
    stage = WorkflowStage(
        id=STAGE_CLOSED,
        title='Closed',
        description='QA action is fully closed.',
        assignee=action.owner or None,
    )
    if action.status == 'complete':
        stage.status = 'complete'
        stage.completed_at = action.completed_at or None
    return stage


def _mark_blocked(stages: list[WorkflowStage]) -> None:
    # A pending step with progress recorded after it is an inconsistency
    for index, stage in enumerate(stages):
        if stage.status != 'pending':
            continue
        later = [s for s in stages[index + 1:] if s.status in ('complete', 'in-progress')]
        if later:
            stage.status = 'blocked'
            stage.description = (
                f"{stage.title} is incomplete but {later[0].title} already has progress."
            )


def build_workflow_stages(
    action: QaAction,
    audit_sessions: Iterable[AuditSession],
    education_sessions: Iterable[EducationSession],
    today: str,
) -> list[WorkflowStage]:
    """Derive the ordered stage list for the case of ``action`` as of ``today``."""
    education_sessions = list(education_sessions)
    session = _find_audit_session(action, audit_sessions)
    linked = _linked_education(action, education_sessions)

    stages = [_audit_stage(action, session), _qa_stage(action)]

    if linked or action.education_refs() or action.ev_education_provided:
        stages.append(_education_stage(action, linked))

    if action.re_audit_due_date or action.re_audit_completed_at or action.re_audit_results:
        stages.append(_re_audit_stage(action))

    stages.append(_closed_stage(action))

    _mark_blocked(stages)

    for stage in stages:
        anchor = stage.completed_at if stage.status == 'complete' else stage.started_at
        if anchor and normalize_date(anchor) and normalize_date(today):
            stage.days_in_stage = days_between(anchor, today)

    return stages


def calculate_workflow_metrics(stages: list[WorkflowStage]) -> WorkflowMetrics:
    """Progress percentage, blocked flag and elapsed days for a stage list."""
    total = len(stages)
    completed = sum(1 for s in stages if s.status == 'complete')
    # Half-up rounding
    progress = int(100 * completed / total + 0.5) if total else 0

    blocked = next((s for s in stages if s.status == 'blocked'), None)

    completed_dates = sorted(
        d for d in (normalize_date(s.completed_at) for s in stages) if d
    )
    total_days = days_between(completed_dates[0], completed_dates[-1]) if completed_dates else 0

    return WorkflowMetrics(
        total_days=total_days,
        completed_stages=completed,
        total_stages=total,
        progress_percent=progress,
        is_blocked=blocked is not None,
        blocked_reason=blocked.description if blocked else None,
    )


def get_next_workflow_action(stages: list[WorkflowStage]) -> NextAction:
    """The first stage that is not complete, as a navigation hint."""
    for stage in stages:
        if stage.status != 'complete':
            return NextAction(
                action=stage.title,
                description=f"Next best step: {stage.description}",
                link_to=STAGE_LINKS.get(stage.id, DEFAULT_LINK),
                stage_id=stage.id,
            )

    return NextAction(
        action='Monitor',
        description='Workflow is complete. Continue routine monitoring.',
        link_to=DEFAULT_LINK,
    )


def compute_case_progress(
    action: QaAction,
    audit_sessions: Iterable[AuditSession],
    education_sessions: Iterable[EducationSession],
    today: str,
) -> CaseProgress:
    """Stages, metrics and next action for one case in a single call."""
    stages = build_workflow_stages(action, audit_sessions, education_sessions, today)
    return CaseProgress(
        stages=stages,
        metrics=calculate_workflow_metrics(stages),
        next_action=get_next_workflow_action(stages),
    )
