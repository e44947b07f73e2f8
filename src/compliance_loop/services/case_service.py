"""
Case Service for the compliance workflow engine.

Wires the record store, clock, id generator and policy thresholds to the
pure engine. This is where records are read and written; the engine itself
only computes.
"""

from typing import Optional

import structlog

from compliance_loop.core.clock import (
    Clock,
    IdGenerator,
    SystemClock,
    UuidIdGenerator,
)
from compliance_loop.core.config import PolicyConfig
from compliance_loop.core.errors import InvalidTransitionError, RecordNotFoundError
from compliance_loop.core.logging import bind_case_context
from compliance_loop.engine.audit_trail import DEFAULT_USER, record_change
from compliance_loop.engine.bundle import create_closed_loop_bundle
from compliance_loop.engine.closure import ClosureValidation, close_action, validate_closure
from compliance_loop.engine.dates import normalize_date, today_iso
from compliance_loop.engine.dictionaries import (
    StructuredDictionaries,
    build_structured_dictionaries,
)
from compliance_loop.engine.due_status import DueStatus, evaluate_due_status
from compliance_loop.engine.duplicates import find_duplicate_qa_action, find_duplicate_session
from compliance_loop.engine.escalation import EscalationEvent, scan_escalations
from compliance_loop.engine.reminders import Reminder, build_reminders
from compliance_loop.engine.stats import ClosedLoopStats, compute_closed_loop_stats
from compliance_loop.engine.workflow import CaseProgress, compute_case_progress
from compliance_loop.models.audit import AuditSession
from compliance_loop.models.case import BundleInput, CaseOpenResult
from compliance_loop.models.education import EducationSession
from compliance_loop.models.qa_action import EVIDENCE_FIELDS, QaAction, ReAuditResult
from compliance_loop.repository.base import CaseRepository

logger = structlog.get_logger(__name__)


class ComplianceCaseService:
    """
    Service for opening, advancing and closing compliance cases.
    """

    def __init__(
        self,
        repository: CaseRepository,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
        config: Optional[PolicyConfig] = None,
    ):
        """
        Initialize the Case Service.

        Args:
            repository: Record store for QA actions and sessions.
            clock: Time source. Defaults to the UTC wall clock.
            id_generator: Token source for new ids. Defaults to uuid4.
            config: Policy thresholds. Defaults to PolicyConfig().
        """
        self.repository = repository
        self.clock = clock or SystemClock()
        self.id_generator = id_generator or UuidIdGenerator()
        self.config = config or PolicyConfig()

    def today(self) -> str:
        """Current UTC date as YYYY-MM-DD."""
        return today_iso(self.clock)

    def _require_action(self, action_id: str) -> QaAction:
        action = self.repository.get_qa_action(action_id)
        if action is None or action.deleted_at:
            raise RecordNotFoundError(
                f"QA action '{action_id}' not found",
                record_type="QaAction",
                record_id=action_id,
            )
        return action

    def _require_open(self, action: QaAction) -> None:
        if action.status == 'complete':
            raise InvalidTransitionError(
                f"QA action '{action.id}' is complete and can no longer change",
                action_id=action.id,
                current_status=action.status,
            )

    # ==================== Cases ====================

    def open_case(self, bundle_input: BundleInput, force: bool = False) -> CaseOpenResult:
        """
        Open a case from an audit finding.

        The duplicate check is advisory: when an open action for the same
        issue, unit and staff member was audited recently, nothing is stored
        and the match is returned. Pass ``force=True`` to create anyway.

        Args:
            bundle_input: The finding.
            force: Skip the duplicate check.

        Returns:
            Either the stored bundle or the existing duplicate.
        """
        if not force:
            candidate = QaAction(
                id='',
                issue=bundle_input.finding_label,
                unit=bundle_input.unit,
                staff_audited=bundle_input.staff_audited,
                audit_date=bundle_input.audit_date,
            )
            duplicate = find_duplicate_qa_action(
                candidate,
                self.repository.list_qa_actions(),
                self.today(),
                window_days=self.config.duplicate_window_days,
            )
            if duplicate is not None:
                logger.warning(
                    "possible_duplicate_finding",
                    duplicate_id=duplicate.id,
                    case_id=duplicate.case_id,
                    issue=bundle_input.finding_label,
                )
                return CaseOpenResult(duplicate_of=duplicate)

        bundle = create_closed_loop_bundle(
            bundle_input,
            clock=self.clock,
            id_generator=self.id_generator,
            existing_ids=self.repository.known_ids(),
        )
        self.repository.save_qa_action(bundle.qa_action)
        self.repository.save_education_session(bundle.education_draft)

        with bind_case_context(bundle.case_id, bundle.qa_action.id):
            logger.info(
                "case_opened",
                severity=bundle.qa_action.severity,
                due_date=bundle.qa_action.due_date,
                forced=force,
            )

        return CaseOpenResult(bundle=bundle)

    def case_progress(self, action_id: str) -> CaseProgress:
        """Derived stages, metrics and next step for the case of ``action_id``."""
        action = self._require_action(action_id)
        return compute_case_progress(
            action,
            self.repository.list_audit_sessions(),
            self.repository.list_education_sessions(),
            self.today(),
        )

    def due_status(self, action_id: str) -> DueStatus:
        """Due status of a QA action's deadline as of today."""
        action = self._require_action(action_id)
        return evaluate_due_status(self.today(), action.due_date, self.config.due_soon_days)

    # ==================== Audit Sessions ====================

    def register_audit_session(self, session: AuditSession) -> tuple[AuditSession, bool]:
        """
        Store an audit session unless one with the same session id exists.

        Returns:
            The stored (or already existing) session and whether it was created.
        """
        existing = find_duplicate_session(
            session.header.session_id, self.repository.list_audit_sessions()
        )
        if existing is not None:
            logger.warning(
                "duplicate_audit_session",
                session_id=session.header.session_id,
                existing_id=existing.id,
            )
            return existing, False
        return self.repository.save_audit_session(session), True

    # ==================== Education ====================

    def link_education(
        self, action_id: str, education_id: str, actor: str = DEFAULT_USER
    ) -> QaAction:
        """
        Link an existing education session to a QA action.

        The action gains a reference; the session gets its back-reference
        only if it does not already point at another action.
        """
        action = self._require_action(action_id)
        self._require_open(action)

        session = self.repository.get_education_session(education_id)
        if session is None:
            raise RecordNotFoundError(
                f"Education session '{education_id}' not found",
                record_type="EducationSession",
                record_id=education_id,
            )

        if education_id not in action.linked_education_sessions:
            action = record_change(
                action,
                'linked_education_sessions',
                [*action.linked_education_sessions, education_id],
                user=actor,
                clock=self.clock,
            )
        if not action.linked_edu_session_id:
            action = record_change(
                action, 'linked_edu_session_id', education_id, user=actor, clock=self.clock
            )

        if not session.linked_qa_action_id:
            session.linked_qa_action_id = action.id
            if not session.case_id:
                session.case_id = action.case_id
            self.repository.save_education_session(session)

        saved = self.repository.save_qa_action(action)
        with bind_case_context(action.case_id, action.id):
            logger.info("education_linked", education_id=education_id)
        return saved

    def complete_education(self, education_id: str, completed_date: Optional[str] = None) -> EducationSession:
        """Mark an education session delivered, defaulting the date to today."""
        session = self.repository.get_education_session(education_id)
        if session is None:
            raise RecordNotFoundError(
                f"Education session '{education_id}' not found",
                record_type="EducationSession",
                record_id=education_id,
            )
        session.status = 'complete'
        session.completed_date = normalize_date(completed_date) or self.today()
        logger.info("education_completed", education_id=education_id, case_id=session.case_id)
        return self.repository.save_education_session(session)

    # ==================== Evidence / Re-Audit ====================

    def record_evidence(self, action_id: str, actor: str = DEFAULT_USER, **flags: bool) -> QaAction:
        """
        Set evidence flags on a QA action.

        Accepts ``policy_reviewed``, ``education_provided``,
        ``competency_validated``, ``corrective_action`` and
        ``monitoring_in_place``. Flags that already hold the given value
        leave no history entry.
        """
        action = self._require_action(action_id)
        self._require_open(action)

        field_names = {name: f"ev_{name}" for name in flags}
        for name, field_name in field_names.items():
            if field_name not in EVIDENCE_FIELDS:
                raise ValueError(f"Unknown evidence flag '{name}'")

        for name, value in flags.items():
            action = record_change(
                action, field_names[name], bool(value), user=actor, clock=self.clock
            )

        return self.repository.save_qa_action(action)

    def record_re_audit(
        self,
        action_id: str,
        passed: bool,
        completed_at: Optional[str] = None,
        session_ref: str = '',
        score: Optional[float] = None,
        notes: str = '',
        actor: str = DEFAULT_USER,
    ) -> QaAction:
        """Record the outcome of a re-audit against a QA action."""
        action = self._require_action(action_id)
        self._require_open(action)

        completed = normalize_date(completed_at) or self.today()
        results = ReAuditResult(
            passed=passed,
            score=score,
            completed_at=completed,
            session_ref=session_ref,
            notes=notes,
        )
        action = record_change(action, 're_audit_results', results, user=actor, clock=self.clock)
        action = record_change(action, 're_audit_completed_at', completed, user=actor, clock=self.clock)
        if session_ref:
            action = record_change(
                action, 're_audit_session_ref', session_ref, user=actor, clock=self.clock
            )

        saved = self.repository.save_qa_action(action)
        with bind_case_context(action.case_id, action.id):
            log = logger.info if passed else logger.warning
            log("re_audit_recorded", passed=passed, completed_at=completed)
        return saved

    # ==================== Closure ====================

    def check_closure(self, action_id: str) -> ClosureValidation:
        """Closure validation without changing anything."""
        return validate_closure(self._require_action(action_id))

    def close(self, action_id: str, actor: str = DEFAULT_USER) -> ClosureValidation:
        """
        Close a QA action through the closure gate.

        The action is stored as complete only when validation passes; the
        validation is returned either way.
        """
        action = self._require_action(action_id)
        self._require_open(action)

        outcome = close_action(action, clock=self.clock, user=actor)
        with bind_case_context(action.case_id, action.id):
            if outcome.closed:
                self.repository.save_qa_action(outcome.action)
                logger.info("qa_action_closed", warnings=outcome.validation.warnings)
            else:
                logger.warning("qa_action_closure_blocked", errors=outcome.validation.errors)
        return outcome.validation

    # ==================== Derived views ====================

    def escalations(self) -> list[EscalationEvent]:
        """Current escalation events across all QA actions."""
        return scan_escalations(
            self.repository.list_qa_actions(),
            self.today(),
            inactivity_threshold_days=self.config.inactivity_threshold_days,
        )

    def reminders(self, dismissed: tuple[str, ...] = ()) -> list[Reminder]:
        """Current reminders, minus the dismissed ids."""
        return build_reminders(
            self.repository.list_qa_actions(),
            self.repository.list_education_sessions(),
            self.today(),
            due_soon_days=self.config.reminder_due_soon_days,
            dismissed=dismissed,
        )

    def dictionaries(self) -> StructuredDictionaries:
        """Canonical unit/owner/role/topic pick-lists from current records."""
        return build_structured_dictionaries(
            self.repository.list_qa_actions(),
            self.repository.list_education_sessions(),
        )

    def stats(self) -> ClosedLoopStats:
        """Closure and overdue KPIs across all QA actions as of today."""
        return compute_closed_loop_stats(self.repository.list_qa_actions(), self.today())
