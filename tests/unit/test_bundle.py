"""Tests for closed-loop bundle generation."""

from datetime import datetime, timezone

import pytest

from compliance_loop.core.clock import FixedClock
from compliance_loop.core.errors import IdentifierCollisionError
from compliance_loop.engine.bundle import DUE_POLICY, create_closed_loop_bundle, due_days_for
from compliance_loop.models.case import BundleInput
from tests.helpers import SequenceIdGenerator


@pytest.fixture
def finding():
    return BundleInput(
        template_id="tpl_hand_hygiene",
        template_title="Hand Hygiene Audit",
        finding_label="Missed hand hygiene",
        finding_reason="No sanitizer before patient contact",
        audit_date="2026-01-01",
        session_id="S-100",
        sample_id="sample_3",
        severity="critical",
        unit="Unit 2",
        staff_audited="J. Doe",
        staff_role="CNA",
        owner="Pat Lee",
        ftag_tags=["F880"],
    )


class TestCreateClosedLoopBundle:
    """Tests for create_closed_loop_bundle."""

    def test_critical_finding_due_in_two_days(self, finding, fixed_clock, id_generator):
        """Critical findings are due, and re-audited, two days after creation."""
        bundle = create_closed_loop_bundle(finding, clock=fixed_clock, id_generator=id_generator)

        assert bundle.qa_action.due_date == "2026-01-03"
        assert bundle.qa_action.re_audit_due_date == "2026-01-03"
        assert bundle.re_audit_due_date == "2026-01-03"
        assert bundle.education_draft.linked_qa_action_id == bundle.qa_action.id

    def test_identifier_formats(self, finding, fixed_clock):
        generator = SequenceIdGenerator(["abcdef0123", "11112222", "33334444"])
        bundle = create_closed_loop_bundle(finding, clock=fixed_clock, id_generator=generator)

        assert bundle.case_id == "CASE-2026-ABCDEF01"
        assert bundle.qa_action.id == "qa_11112222"
        assert bundle.education_draft.id == "edu_33334444"

    def test_qa_action_fields(self, finding, fixed_clock, id_generator):
        qa = create_closed_loop_bundle(finding, clock=fixed_clock, id_generator=id_generator).qa_action

        assert qa.status == "open"
        assert qa.severity == "critical"
        assert qa.created_at == "2026-01-01T09:30:00+00:00"
        assert qa.issue == "Missed hand hygiene"
        assert qa.reason == "No sanitizer before patient contact"
        assert qa.topic == "Missed hand hygiene"
        assert qa.sample == "sample_3"
        assert qa.re_audit_template_id == "tpl_hand_hygiene"
        assert qa.ftag_tags == ["F880"]
        assert qa.evidence_count() == 0
        assert qa.summary == "Closed-loop bundle created from finding: Missed hand hygiene"

    def test_education_draft_fields(self, finding, fixed_clock, id_generator):
        bundle = create_closed_loop_bundle(finding, clock=fixed_clock, id_generator=id_generator)
        edu = bundle.education_draft

        assert edu.status == "planned"
        assert edu.case_id == bundle.case_id
        assert edu.audience == "CNA"
        assert edu.instructor == "Pat Lee"
        assert edu.scheduled_date == "2026-01-03"
        assert edu.summary == f"Education draft linked to case {bundle.case_id}"
        assert bundle.qa_action.linked_education_sessions == [edu.id]
        assert bundle.qa_action.linked_edu_session_id == edu.id

    @pytest.mark.parametrize("severity,due", [
        ("critical", "2026-01-03"),
        ("high", "2026-01-08"),
        ("medium", "2026-01-15"),
        ("low", "2026-01-31"),
    ])
    def test_due_policy_table(self, finding, fixed_clock, id_generator, severity, due):
        bundle = create_closed_loop_bundle(
            finding.model_copy(update={"severity": severity}),
            clock=fixed_clock,
            id_generator=id_generator,
        )
        assert bundle.qa_action.due_date == due
        assert bundle.qa_action.re_audit_due_date == due

    def test_default_severity_and_audience(self, fixed_clock, id_generator):
        bundle = create_closed_loop_bundle(
            BundleInput(finding_label="Falls"),
            clock=fixed_clock,
            id_generator=id_generator,
        )
        assert bundle.qa_action.severity == "medium"
        assert bundle.qa_action.due_date == "2026-01-15"
        assert bundle.education_draft.audience == "Nursing"

    def test_does_not_reuse_existing_ids(self, finding, fixed_clock):
        generator = SequenceIdGenerator(["aaaa0000", "bbbb0000", "cccc0000", "dddd0000"])
        bundle = create_closed_loop_bundle(
            finding,
            clock=fixed_clock,
            id_generator=generator,
            existing_ids={"CASE-2026-AAAA0000"},
        )
        assert bundle.case_id == "CASE-2026-BBBB0000"
        assert bundle.qa_action.id == "qa_cccc0000"
        assert bundle.education_draft.id == "edu_dddd0000"

    def test_gives_up_after_repeated_collisions(self, finding, fixed_clock):
        generator = SequenceIdGenerator(["aaaa0000"] * 10)
        with pytest.raises(IdentifierCollisionError) as exc_info:
            create_closed_loop_bundle(
                finding,
                clock=fixed_clock,
                id_generator=generator,
                existing_ids={"CASE-2026-AAAA0000"},
            )
        assert exc_info.value.error_code == "ID_COLLISION"

    def test_naive_clock_is_treated_as_utc(self, finding, id_generator):
        clock = FixedClock(datetime(2026, 6, 30, 23, 0))
        bundle = create_closed_loop_bundle(finding, clock=clock, id_generator=id_generator)
        assert bundle.qa_action.due_date == "2026-07-02"

    def test_aware_clock_uses_utc_date(self, finding, id_generator):
        from datetime import timedelta
        clock = FixedClock(datetime(2026, 1, 1, 1, 0, tzinfo=timezone(timedelta(hours=3))))
        bundle = create_closed_loop_bundle(finding, clock=clock, id_generator=id_generator)
        assert bundle.qa_action.due_date == "2026-01-02"
        assert bundle.case_id.startswith("CASE-2025-")


def test_due_days_for_unknown_severity_uses_medium():
    assert due_days_for("unknown") == DUE_POLICY["medium"] == 14
