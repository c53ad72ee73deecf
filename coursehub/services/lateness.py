"""
Lateness policy.

Pure functions, no I/O:
- a submission is late only if it arrives strictly after the due date
  (equal timestamps are on time)
- no due date means never late
- days late are counted up (1 second past due is 1 day late)
"""

import enum
import math
from datetime import datetime, timedelta, timezone

ONE_DAY = timedelta(days=1)


class Lateness(str, enum.Enum):
    ON_TIME = "ON_TIME"
    OVERDUE = "OVERDUE"


def as_utc(dt: datetime) -> datetime:
    # SQLite often returns naive datetimes; treat as UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def is_late(now: datetime, due_at: datetime | None) -> bool:
    if due_at is None:
        return False
    return as_utc(now) > as_utc(due_at)


def classify(now: datetime, due_at: datetime | None) -> Lateness:
    return Lateness.OVERDUE if is_late(now, due_at) else Lateness.ON_TIME


def days_late(now: datetime, due_at: datetime | None) -> int:
    if not is_late(now, due_at):
        return 0
    return int(math.ceil((as_utc(now) - as_utc(due_at)) / ONE_DAY))


def late_penalty_multiplier(
    late_days: int,
    percent_per_day: float,
    max_percent: float = 100.0,
) -> float:
    """
    Fraction of the grade kept after the late penalty.

    ``percent_per_day`` is deducted for every day late, capped at
    ``max_percent`` in total.
    """
    if late_days <= 0 or percent_per_day <= 0:
        return 1.0

    deduction = min(late_days * percent_per_day, max_percent)
    return max(0.0, 1.0 - deduction / 100.0)
