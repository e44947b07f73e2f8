"""Workflow reminders for the notification surface."""

from dataclasses import dataclass
from typing import Iterable, Literal, Optional

from compliance_loop.engine.dates import normalize_date
from compliance_loop.engine.due_status import evaluate_due_status
from compliance_loop.models.education import EducationSession
from compliance_loop.models.qa_action import QaAction

ReminderPriority = Literal['low', 'medium', 'high']

DEFAULT_REMINDER_DUE_SOON_DAYS = 3


@dataclass(frozen=True)
class Reminder:
    """A dismissible nudge about an upcoming or overdue item."""

    id: str
    type: str
    priority: ReminderPriority
    title: str
    message: str
    action_label: str
    link_to: str
    item_id: str
    due_date: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "priority": self.priority,
            "title": self.title,
            "message": self.message,
            "action_label": self.action_label,
            "link_to": self.link_to,
            "item_id": self.item_id,
            "due_date": self.due_date,
        }


def build_reminders(
    actions: Iterable[QaAction],
    education_sessions: Iterable[EducationSession],
    today: str,
    due_soon_days: int = DEFAULT_REMINDER_DUE_SOON_DAYS,
    dismissed: Iterable[str] = (),
) -> list[Reminder]:
    """Reminders for overdue and due-soon QA actions and education held today.

    Ids are stable per item so a dismissal keeps applying on later passes.
    """
    today_iso = normalize_date(today)
    if not today_iso:
        return []

    dismissed_ids = set(dismissed)
    reminders: list[Reminder] = []

    for action in actions:
        if action.status == 'complete' or action.deleted_at:
            continue
        if not normalize_date(action.due_date):
            continue

        label = action.issue or 'Action'
        due = evaluate_due_status(today_iso, action.due_date, due_soon_days)
        if due.is_overdue:
            reminders.append(Reminder(
                id=f"qa-overdue-{action.id}",
                type='qa-overdue',
                priority='high',
                title='Overdue QA action',
                message=f"{label} is overdue.",
                action_label='Open QA action',
                link_to='/qa-actions',
                item_id=action.id,
                due_date=action.due_date,
            ))
        elif due.status == 'due-soon':
            reminders.append(Reminder(
                id=f"qa-soon-{action.id}",
                type='qa-due-soon',
                priority='medium',
                title='QA action due soon',
                message=f"{label} is due in {due.days_until} day(s).",
                action_label='Review action',
                link_to='/qa-actions',
                item_id=action.id,
                due_date=action.due_date,
            ))

    for session in education_sessions:
        if session.status == 'planned' and normalize_date(session.scheduled_date) == today_iso:
            reminders.append(Reminder(
                id=f"edu-today-{session.id}",
                type='education-today',
                priority='low',
                title='Education scheduled today',
                message=f"{session.topic or 'Education session'} is scheduled for today.",
                action_label='Open education',
                link_to='/education',
                item_id=session.id,
                due_date=session.scheduled_date,
            ))

    return [r for r in reminders if r.id not in dismissed_ids]
