"""
Read-only projections over already-fetched collections.

Items can be mappings or plain objects (ORM rows, pydantic models). None of
these helpers raise on odd input: unknown fields read as missing, and missing
values sort before everything else.
"""

from collections.abc import Mapping
from datetime import datetime
from numbers import Number
from typing import Any, Iterable, Sequence

from coursehub.services.lateness import as_utc


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def filter_by_search(items: Iterable, term: str | None, fields: Sequence[str]) -> list:
    needle = (term or "").strip().casefold()
    if not needle:
        return list(items)

    def matches(item) -> bool:
        for name in fields:
            value = _field(item, name)
            if isinstance(value, str) and needle in value.casefold():
                return True
        return False

    return [item for item in items if matches(item)]


def filter_by_status(items: Iterable, status: str | None) -> list:
    wanted = (status or "all").strip().casefold()
    if wanted == "all":
        return list(items)

    def status_of(item) -> str:
        value = _field(item, "status")
        # str enums compare by value
        value = getattr(value, "value", value)
        return str(value).casefold() if value is not None else ""

    return [item for item in items if status_of(item) == wanted]


def _sort_key(value: Any) -> tuple:
    # rank by kind first so mixed types never get compared directly
    if value is None:
        return (0, 0)
    if isinstance(value, datetime):
        return (1, as_utc(value).timestamp())
    if isinstance(value, Number) and not isinstance(value, complex):
        return (1, float(value))
    if isinstance(value, str):
        return (2, value.casefold())
    return (3, str(value))


def sort_by(items: Iterable, field: str, order: str = "asc") -> list:
    """Stable sort on ``field``; ``order`` is "asc" or "desc"."""
    descending = (order or "").strip().lower() == "desc"
    # sorted() is stable in both directions, ties keep their input order
    return sorted(items, key=lambda item: _sort_key(_field(item, field)), reverse=descending)


def summarize(items: Iterable) -> dict:
    items = list(items)
    grades = [g for g in (_field(i, "grade") for i in items) if g is not None]

    def count(status: str) -> int:
        return len(filter_by_status(items, status))

    return {
        "total": len(items),
        "submitted": count("SUBMITTED"),
        "late": sum(1 for i in items if _field(i, "is_late")),
        "graded": count("GRADED"),
        "average_grade": round(sum(grades) / len(grades), 2) if grades else None,
    }
