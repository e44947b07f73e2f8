"""
Abstract base class for the case record store.

The engine never touches the store. The case service reads current
collections from it and hands newly constructed records back for
persistence.
"""
from abc import ABC, abstractmethod
from typing import Optional

from compliance_loop.models.audit import AuditSession
from compliance_loop.models.education import EducationSession
from compliance_loop.models.qa_action import QaAction


class CaseRepository(ABC):
    """
    Abstract base class for case record persistence.

    Implementations return copies, so callers can never mutate stored state
    in place.
    """

    # ==================== QA Actions ====================

    @abstractmethod
    def list_qa_actions(self, include_deleted: bool = False) -> list[QaAction]:
        """
        List QA actions.

        Args:
            include_deleted: Also return soft-deleted actions.

        Returns:
            QA actions in insertion order.
        """
        ...

    @abstractmethod
    def get_qa_action(self, action_id: str) -> Optional[QaAction]:
        """
        Get a QA action by ID.

        Returns:
            The action, or None if it does not exist.
        """
        ...

    @abstractmethod
    def save_qa_action(self, action: QaAction) -> QaAction:
        """
        Insert or replace a QA action.

        Returns:
            The stored action.
        """
        ...

    # ==================== Education Sessions ====================

    @abstractmethod
    def list_education_sessions(self) -> list[EducationSession]:
        """List education sessions in insertion order."""
        ...

    @abstractmethod
    def get_education_session(self, session_id: str) -> Optional[EducationSession]:
        """Get an education session by ID, or None."""
        ...

    @abstractmethod
    def save_education_session(self, session: EducationSession) -> EducationSession:
        """Insert or replace an education session."""
        ...

    # ==================== Audit Sessions ====================

    @abstractmethod
    def list_audit_sessions(self) -> list[AuditSession]:
        """List audit sessions in insertion order."""
        ...

    @abstractmethod
    def save_audit_session(self, session: AuditSession) -> AuditSession:
        """Insert or replace an audit session."""
        ...

    # ==================== Identity ====================

    def known_ids(self) -> set[str]:
        """Every record and case identifier currently stored."""
        ids: set[str] = set()
        for action in self.list_qa_actions(include_deleted=True):
            ids.add(action.id)
            if action.case_id:
                ids.add(action.case_id)
        for session in self.list_education_sessions():
            ids.add(session.id)
            if session.case_id:
                ids.add(session.case_id)
        for audit in self.list_audit_sessions():
            ids.add(audit.id)
        return ids
