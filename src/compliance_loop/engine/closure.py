"""Closure gate for QA actions.

``validate_closure`` decides whether an action may move to ``complete`` and
``close_action`` is the only code path that performs that move.
"""

from dataclasses import dataclass, field
from typing import Optional

import structlog

from compliance_loop.core.clock import Clock, FixedClock, SystemClock, utc_timestamp_iso
from compliance_loop.engine.audit_trail import DEFAULT_USER, record_change
from compliance_loop.models.qa_action import QaAction

logger = structlog.get_logger(__name__)

ERROR_NO_EVIDENCE = "At least one evidence item must be documented"
ERROR_REAUDIT_INCOMPLETE = "Re-audit required but not completed"
ERROR_ALREADY_COMPLETE = "QA action is already complete"

WARNING_REAUDIT_FAILED = "Re-audit failed - issue may persist"
WARNING_COMPETENCY_WITHOUT_EDUCATION = (
    "Competency issues should have a linked education session"
)
WARNING_EDUCATION_NOT_LINKED = (
    "Education marked as provided but no education session is linked"
)
WARNING_CRITICAL_WITHOUT_CORRECTIVE_ACTION = (
    "Critical severity action has no documented corrective action"
)


@dataclass
class ClosureValidation:
    """Result of checking whether a QA action may be closed."""

    can_close: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "can_close": self.can_close,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


@dataclass
class ClosureOutcome:
    """What happened when closing was attempted.

    ``action`` is the closed copy when ``closed`` is true, otherwise the
    action exactly as it was passed in.
    """

    action: QaAction
    validation: ClosureValidation

    @property
    def closed(self) -> bool:
        return self.validation.can_close


def validate_closure(action: QaAction) -> ClosureValidation:
    """Check the closure rules for ``action``.

    Errors block closure; warnings are for display only.
    """
    errors: list[str] = []
    warnings: list[str] = []

    if action.status == 'complete':
        errors.append(ERROR_ALREADY_COMPLETE)

    if action.evidence_count() == 0:
        errors.append(ERROR_NO_EVIDENCE)

    if action.re_audit_due_date and action.re_audit_results is None:
        errors.append(ERROR_REAUDIT_INCOMPLETE)

    if action.re_audit_results is not None and not action.re_audit_results.passed:
        warnings.append(WARNING_REAUDIT_FAILED)

    has_education = bool(action.linked_education_sessions)

    if 'competency' in action.issue.lower() and not has_education:
        warnings.append(WARNING_COMPETENCY_WITHOUT_EDUCATION)

    if action.ev_education_provided and not has_education:
        warnings.append(WARNING_EDUCATION_NOT_LINKED)

    if action.severity == 'critical' and not action.ev_corrective_action:
        warnings.append(WARNING_CRITICAL_WITHOUT_CORRECTIVE_ACTION)

    validation = ClosureValidation(
        can_close=not errors,
        errors=errors,
        warnings=warnings,
    )

    logger.debug(
        "closure_validated",
        action_id=action.id,
        can_close=validation.can_close,
        error_count=len(errors),
        warning_count=len(warnings),
    )

    return validation


def close_action(
    action: QaAction,
    clock: Optional[Clock] = None,
    user: str = DEFAULT_USER,
) -> ClosureOutcome:
    """Move ``action`` to ``complete`` if the closure gate allows it.

    The input is never modified; a closed copy with ``completed_at`` stamped
    from ``clock`` and the status change attributed to ``user`` in its
    change history is returned on success.
    """
    validation = validate_closure(action)
    if not validation.can_close:
        return ClosureOutcome(action=action, validation=validation)

    # One instant for the history entry and completed_at
    stamp = FixedClock((clock or SystemClock()).now())
    closed = record_change(action, 'status', 'complete', user=user, clock=stamp)
    closed.completed_at = utc_timestamp_iso(stamp.now())
    return ClosureOutcome(action=closed, validation=validation)
