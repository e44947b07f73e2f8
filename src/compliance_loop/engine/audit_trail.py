"""Change history for QA actions.

Every mutation of a QA action after creation goes through ``record_change``,
which applies the new value and appends who changed what and when.
"""

from copy import deepcopy
from typing import Any, Optional

from pydantic import BaseModel

from compliance_loop.core.clock import Clock, SystemClock, utc_timestamp_iso
from compliance_loop.models.qa_action import ChangeRecord, QaAction

DEFAULT_USER = 'System User'

# Bookkeeping fields that are never tracked themselves
UNTRACKED_FIELDS = frozenset({'id', 'modified_at', 'modified_by', 'change_history'})


def _as_text(value: Any) -> str:
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (list, tuple)):
        return ','.join(_as_text(item) for item in value)
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    return str(value)


def record_change(
    action: QaAction,
    field: str,
    new_value: Any,
    user: str = DEFAULT_USER,
    clock: Optional[Clock] = None,
) -> QaAction:
    """Set ``field`` to ``new_value`` and log the change.

    The input is never modified. When the value is unchanged the same action
    is returned and nothing is logged.

    Raises:
        ValueError: If ``field`` is not a trackable QA action field.
    """
    if field not in QaAction.model_fields or field in UNTRACKED_FIELDS:
        raise ValueError(f"Field '{field}' cannot be changed through the audit trail")

    old_value = getattr(action, field)
    if old_value == new_value:
        return action

    timestamp = utc_timestamp_iso((clock or SystemClock()).now())
    updated = action.model_copy(deep=True)
    setattr(updated, field, deepcopy(new_value))
    updated.modified_at = timestamp
    updated.modified_by = user
    updated.change_history.append(ChangeRecord(
        timestamp=timestamp,
        user=user,
        field=field,
        old_value=_as_text(old_value),
        new_value=_as_text(new_value),
    ))
    return updated


def get_change_log(action: QaAction) -> str:
    """Human-readable change history, one line per change."""
    if not action.change_history:
        return 'No changes recorded'

    return '\n'.join(
        f'[{change.timestamp[:16]}] {change.user} changed {change.field}: '
        f'"{change.old_value}" -> "{change.new_value}"'
        for change in action.change_history
    )
