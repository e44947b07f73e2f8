"""Closed-loop compliance workflow engine.

Every function in this package is a pure computation over the records passed
in. Clock and id sources are parameters.
"""

from compliance_loop.engine.dates import (
    normalize_date,
    days_between,
    is_before,
    add_days,
    today_iso,
)
from compliance_loop.engine.dictionaries import (
    canonicalize,
    build_label_map,
    dedupe_labels,
    migrate_legacy_label,
    StructuredDictionaries,
    build_structured_dictionaries,
)
from compliance_loop.engine.duplicates import (
    find_duplicate_qa_action,
    find_duplicate_session,
)
from compliance_loop.engine.due_status import (
    DueStatus,
    evaluate_due_status,
    is_action_overdue,
)
from compliance_loop.engine.bundle import (
    DUE_POLICY,
    due_days_for,
    create_closed_loop_bundle,
)
from compliance_loop.engine.closure import (
    ClosureValidation,
    ClosureOutcome,
    validate_closure,
    close_action,
)
from compliance_loop.engine.workflow import (
    WorkflowStage,
    WorkflowMetrics,
    NextAction,
    CaseProgress,
    build_workflow_stages,
    calculate_workflow_metrics,
    get_next_workflow_action,
    compute_case_progress,
)
from compliance_loop.engine.escalation import (
    EscalationEvent,
    escalations_for_action,
    scan_escalations,
)
from compliance_loop.engine.reminders import (
    Reminder,
    build_reminders,
)
from compliance_loop.engine.audit_trail import (
    DEFAULT_USER,
    record_change,
    get_change_log,
)
from compliance_loop.engine.stats import (
    StatusTally,
    ClosedLoopStats,
    compute_closed_loop_stats,
)

__all__ = [
    # Dates
    "normalize_date",
    "days_between",
    "is_before",
    "add_days",
    "today_iso",
    # Dictionaries
    "canonicalize",
    "build_label_map",
    "dedupe_labels",
    "migrate_legacy_label",
    "StructuredDictionaries",
    "build_structured_dictionaries",
    # Duplicates
    "find_duplicate_qa_action",
    "find_duplicate_session",
    # Due status
    "DueStatus",
    "evaluate_due_status",
    "is_action_overdue",
    # Bundle
    "DUE_POLICY",
    "due_days_for",
    "create_closed_loop_bundle",
    # Closure
    "ClosureValidation",
    "ClosureOutcome",
    "validate_closure",
    "close_action",
    # Workflow
    "WorkflowStage",
    "WorkflowMetrics",
    "NextAction",
    "CaseProgress",
    "build_workflow_stages",
    "calculate_workflow_metrics",
    "get_next_workflow_action",
    "compute_case_progress",
    # Escalation
    "EscalationEvent",
    "escalations_for_action",
    "scan_escalations",
    # Reminders
    "Reminder",
    "build_reminders",
    # Audit trail
    "DEFAULT_USER",
    "record_change",
    "get_change_log",
    # Stats
    "StatusTally",
    "ClosedLoopStats",
    "compute_closed_loop_stats",
]
