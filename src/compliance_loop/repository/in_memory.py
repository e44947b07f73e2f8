"""
In-memory implementation of CaseRepository.

Suitable for local development and tests. All data is lost when the process
terminates.
"""
from copy import deepcopy
from typing import Optional

from compliance_loop.models.audit import AuditSession
from compliance_loop.models.education import EducationSession
from compliance_loop.models.qa_action import QaAction

from compliance_loop.repository.base import CaseRepository


class InMemoryCaseRepository(CaseRepository):
    """Stores records in dictionaries keyed by id."""

    def __init__(self):
        self._qa_actions: dict[str, QaAction] = {}  # action_id -> action
        self._education_sessions: dict[str, EducationSession] = {}  # session_id -> session
        self._audit_sessions: dict[str, AuditSession] = {}  # session_id -> session

    # ==================== QA Actions ====================

    def list_qa_actions(self, include_deleted: bool = False) -> list[QaAction]:
        actions = list(self._qa_actions.values())
        if not include_deleted:
            actions = [a for a in actions if not a.deleted_at]
        return [deepcopy(a) for a in actions]

    def get_qa_action(self, action_id: str) -> Optional[QaAction]:
        action = self._qa_actions.get(action_id)
        return deepcopy(action) if action else None

    def save_qa_action(self, action: QaAction) -> QaAction:
        self._qa_actions[action.id] = deepcopy(action)
        return deepcopy(action)

    # ==================== Education Sessions ====================

    def list_education_sessions(self) -> list[EducationSession]:
        return [deepcopy(s) for s in self._education_sessions.values()]

    def get_education_session(self, session_id: str) -> Optional[EducationSession]:
        session = self._education_sessions.get(session_id)
        return deepcopy(session) if session else None

    def save_education_session(self, session: EducationSession) -> EducationSession:
        self._education_sessions[session.id] = deepcopy(session)
        return deepcopy(session)

    # ==================== Audit Sessions ====================

    def list_audit_sessions(self) -> list[AuditSession]:
        return [deepcopy(s) for s in self._audit_sessions.values()]

    def save_audit_session(self, session: AuditSession) -> AuditSession:
        self._audit_sessions[session.id] = deepcopy(session)
        return deepcopy(session)
