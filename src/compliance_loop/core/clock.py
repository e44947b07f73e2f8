"""Injectable clock and identifier sources.

Bundle creation and the scanning passes never read the wall clock or a
random source directly; they take one of these instead.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol, runtime_checkable
from uuid import uuid4


@runtime_checkable
class Clock(Protocol):
    """Supplies the current instant."""

    def now(self) -> datetime:
        ...


@runtime_checkable
class IdGenerator(Protocol):
    """Supplies opaque hex tokens used to build record identifiers."""

    def new_token(self) -> str:
        ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


@dataclass(frozen=True)
class FixedClock:
    """Clock pinned to a single instant."""

    instant: datetime

    def now(self) -> datetime:
        return self.instant


class UuidIdGenerator:
    """Random tokens from uuid4."""

    def new_token(self) -> str:
        return uuid4().hex


def utc_date_iso(moment: datetime) -> str:
    """Calendar date of ``moment`` in UTC, as YYYY-MM-DD.

    Naive datetimes are taken to already be UTC.
    """
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date().isoformat()


def utc_timestamp_iso(moment: datetime) -> str:
    """``moment`` as an ISO-8601 UTC timestamp."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat()
