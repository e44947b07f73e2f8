"""Tests for the closure gate."""

from datetime import datetime, timezone

import pytest

from compliance_loop.core.clock import FixedClock
from compliance_loop.engine.closure import (
    ERROR_ALREADY_COMPLETE,
    ERROR_NO_EVIDENCE,
    ERROR_REAUDIT_INCOMPLETE,
    WARNING_COMPETENCY_WITHOUT_EDUCATION,
    WARNING_CRITICAL_WITHOUT_CORRECTIVE_ACTION,
    WARNING_EDUCATION_NOT_LINKED,
    WARNING_REAUDIT_FAILED,
    close_action,
    validate_closure,
)
from compliance_loop.models.qa_action import QaAction, ReAuditResult


@pytest.fixture
def ready_action():
    """An action that satisfies every closure rule."""
    return QaAction(
        id="qa_1",
        case_id="CASE-2026-AAAA0001",
        issue="Missed hand hygiene",
        severity="medium",
        ev_policy_reviewed=True,
        re_audit_due_date="2026-02-01",
        re_audit_results=ReAuditResult(passed=True, completed_at="2026-01-30"),
        linked_education_sessions=["edu_1"],
    )


class TestValidateClosure:
    """Tests for validate_closure."""

    def test_ready_action_can_close(self, ready_action):
        result = validate_closure(ready_action)
        assert result.can_close is True
        assert result.errors == []
        assert result.warnings == []

    def test_no_evidence_blocks(self, ready_action):
        action = ready_action.model_copy(update={"ev_policy_reviewed": False})
        result = validate_closure(action)
        assert result.can_close is False
        assert ERROR_NO_EVIDENCE in result.errors

    def test_re_audit_required_but_missing(self):
        action = QaAction(
            id="qa_1",
            ev_policy_reviewed=True,
            re_audit_due_date="2026-02-01",
        )
        result = validate_closure(action)
        assert result.can_close is False
        assert "Re-audit required but not completed" in result.errors
        assert result.errors == [ERROR_REAUDIT_INCOMPLETE]

    def test_no_re_audit_scheduled_does_not_require_results(self):
        action = QaAction(id="qa_1", ev_corrective_action=True)
        assert validate_closure(action).can_close is True

    def test_failed_re_audit_warns_but_allows(self, ready_action):
        action = ready_action.model_copy(
            update={"re_audit_results": ReAuditResult(passed=False)}
        )
        result = validate_closure(action)
        assert result.can_close is True
        assert WARNING_REAUDIT_FAILED in result.warnings

    def test_competency_issue_without_education_warns(self, ready_action):
        action = ready_action.model_copy(
            update={"issue": "Low COMPETENCY on lift transfers", "linked_education_sessions": []}
        )
        result = validate_closure(action)
        assert result.can_close is True
        assert WARNING_COMPETENCY_WITHOUT_EDUCATION in result.warnings

    def test_education_flag_without_link_warns(self, ready_action):
        action = ready_action.model_copy(
            update={"ev_education_provided": True, "linked_education_sessions": []}
        )
        assert WARNING_EDUCATION_NOT_LINKED in validate_closure(action).warnings

    def test_critical_without_corrective_action_warns(self, ready_action):
        action = ready_action.model_copy(update={"severity": "critical"})
        result = validate_closure(action)
        assert result.can_close is True
        assert WARNING_CRITICAL_WITHOUT_CORRECTIVE_ACTION in result.warnings

    def test_errors_accumulate(self):
        action = QaAction(id="qa_1", re_audit_due_date="2026-02-01")
        result = validate_closure(action)
        assert result.errors == [ERROR_NO_EVIDENCE, ERROR_REAUDIT_INCOMPLETE]

    def test_complete_action_cannot_close_again(self, ready_action):
        action = ready_action.model_copy(update={"status": "complete"})
        result = validate_closure(action)
        assert result.can_close is False
        assert ERROR_ALREADY_COMPLETE in result.errors

    def test_to_dict(self, ready_action):
        assert validate_closure(ready_action).to_dict() == {
            "can_close": True,
            "errors": [],
            "warnings": [],
        }


class TestCloseAction:
    """Tests for close_action."""

    def test_closes_copy_and_stamps_completion(self, ready_action):
        clock = FixedClock(datetime(2026, 2, 2, 8, 0, tzinfo=timezone.utc))
        outcome = close_action(ready_action, clock=clock)

        assert outcome.closed is True
        assert outcome.action.status == "complete"
        assert outcome.action.completed_at == "2026-02-02T08:00:00+00:00"
        assert ready_action.status == "open"
        assert ready_action.completed_at == ""

    def test_records_status_change_for_user(self, ready_action):
        clock = FixedClock(datetime(2026, 2, 2, 8, 0, tzinfo=timezone.utc))
        outcome = close_action(ready_action, clock=clock, user="Pat Lee")

        history = outcome.action.change_history
        assert [(c.field, c.old_value, c.new_value, c.user) for c in history] == [
            ("status", "open", "complete", "Pat Lee"),
        ]
        assert history[0].timestamp == outcome.action.completed_at
        assert outcome.action.modified_by == "Pat Lee"
        assert ready_action.change_history == []

    def test_blocked_closure_returns_input_unchanged(self):
        action = QaAction(id="qa_1")
        outcome = close_action(action)
        assert outcome.closed is False
        assert outcome.action is action
        assert outcome.action.status == "open"
