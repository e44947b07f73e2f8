"""Canonical dictionaries for free-text labels.

Units, owners, staff roles and topics are typed by hand in many places.
Labels that differ only by case or whitespace share one canonical key, and
the shortest spelling seen is kept as the display label.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from compliance_loop.models.education import EducationSession
from compliance_loop.models.qa_action import QaAction

_WHITESPACE = re.compile(r"\s+")


def canonicalize(value: Optional[str]) -> str:
    """Lowercase, trim and collapse internal whitespace."""
    if not value:
        return ""
    return _WHITESPACE.sub(" ", value.strip()).lower()


def build_label_map(values: Iterable[Optional[str]]) -> dict[str, str]:
    """Map canonical key -> display label.

    Blank values are skipped. When several spellings share a key the shortest
    wins; on equal length the first one seen is kept.
    """
    labels: dict[str, str] = {}
    for raw in values:
        if not raw or not raw.strip():
            continue
        label = raw.strip()
        key = canonicalize(label)
        current = labels.get(key)
        if current is None or len(label) < len(current):
            labels[key] = label
    return labels


def dedupe_labels(values: Iterable[Optional[str]]) -> list[str]:
    """Deduplicated display labels, sorted case-insensitively."""
    labels = build_label_map(values).values()
    return sorted(labels, key=lambda label: (label.casefold(), label))


def migrate_legacy_label(value: Optional[str], options: Iterable[str]) -> str:
    """Map a legacy free-text value onto a known option.

    Returns the matching option when one shares the canonical key, otherwise
    the trimmed original. Blank input gives ``""``.
    """
    key = canonicalize(value)
    if not key:
        return ""
    for option in options:
        if canonicalize(option) == key:
            return option
    return value.strip()


@dataclass
class StructuredDictionaries:
    """Canonical pick-lists derived from the current records."""

    units: list[str] = field(default_factory=list)
    owners: list[str] = field(default_factory=list)
    staff_roles: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "units": list(self.units),
            "owners": list(self.owners),
            "staff_roles": list(self.staff_roles),
            "topics": list(self.topics),
        }


def build_structured_dictionaries(
    actions: Iterable[QaAction],
    sessions: Iterable[EducationSession],
) -> StructuredDictionaries:
    """Rebuild the unit/owner/role/topic dictionaries from actions and education sessions."""
    actions = list(actions)
    sessions = list(sessions)

    return StructuredDictionaries(
        units=dedupe_labels([a.unit for a in actions] + [s.unit for s in sessions]),
        owners=dedupe_labels([a.owner for a in actions] + [s.instructor for s in sessions]),
        staff_roles=dedupe_labels(a.staff_role for a in actions),
        topics=dedupe_labels(
            [a.topic for a in actions]
            + [a.issue for a in actions]
            + [s.topic for s in sessions]
        ),
    )
