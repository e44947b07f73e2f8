"""Tests for workflow reminders."""

from compliance_loop.engine.reminders import build_reminders
from compliance_loop.models.education import EducationSession
from compliance_loop.models.qa_action import QaAction

TODAY = "2026-04-15"


def _action(action_id: str, due_date: str, **overrides) -> QaAction:
    return QaAction(id=action_id, due_date=due_date, issue="Missed hand hygiene", **overrides)


class TestBuildReminders:
    """Tests for build_reminders."""

    def test_overdue_action(self):
        reminders = build_reminders([_action("qa_1", "2026-04-10")], [], TODAY)

        assert len(reminders) == 1
        reminder = reminders[0]
        assert reminder.id == "qa-overdue-qa_1"
        assert reminder.priority == "high"
        assert reminder.link_to == "/qa-actions"
        assert reminder.due_date == "2026-04-10"

    def test_due_soon_action(self):
        reminders = build_reminders([_action("qa_1", "2026-04-17")], [], TODAY)
        assert [r.type for r in reminders] == ["qa-due-soon"]
        assert "2 day(s)" in reminders[0].message

    def test_window_is_configurable(self):
        action = _action("qa_1", "2026-04-20")
        assert build_reminders([action], [], TODAY) == []
        assert len(build_reminders([action], [], TODAY, due_soon_days=5)) == 1

    def test_skips_closed_deleted_and_undated(self):
        actions = [
            _action("qa_1", "2026-04-10", status="complete"),
            _action("qa_2", "2026-04-10", deleted_at="2026-04-11T00:00:00Z"),
            _action("qa_3", ""),
        ]
        assert build_reminders(actions, [], TODAY) == []

    def test_education_scheduled_today(self):
        sessions = [
            EducationSession(id="edu_1", status="planned", scheduled_date=TODAY, topic="Hand hygiene"),
            EducationSession(id="edu_2", status="complete", scheduled_date=TODAY),
            EducationSession(id="edu_3", status="planned", scheduled_date="2026-04-16"),
        ]
        reminders = build_reminders([], sessions, TODAY)

        assert [r.id for r in reminders] == ["edu-today-edu_1"]
        assert reminders[0].link_to == "/education"
        assert reminders[0].message.startswith("Hand hygiene")

    def test_dismissed_reminders_are_filtered(self):
        actions = [_action("qa_1", "2026-04-10"), _action("qa_2", "2026-04-16")]
        reminders = build_reminders(actions, [], TODAY, dismissed=["qa-overdue-qa_1"])
        assert [r.id for r in reminders] == ["qa-soon-qa_2"]

    def test_invalid_reference_date(self):
        assert build_reminders([_action("qa_1", "2026-04-10")], [], "") == []
