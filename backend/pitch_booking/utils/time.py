from datetime import date, datetime, timedelta, timezone
from typing import Iterable
from zoneinfo import ZoneInfo

SLOT_MINUTES = 30
FIRST_SLOT = "06:00"
LAST_SLOT = "22:00"


def _build_grid(first: str, last: str, step_minutes: int) -> tuple[str, ...]:
    start = datetime.strptime(first, "%H:%M")
    end = datetime.strptime(last, "%H:%M")
    labels: list[str] = []
    current = start
    while current <= end:
        labels.append(current.strftime("%H:%M"))
        current += timedelta(minutes=step_minutes)
    return tuple(labels)


TIME_SLOTS: tuple[str, ...] = _build_grid(FIRST_SLOT, LAST_SLOT, SLOT_MINUTES)
_TIME_SLOT_SET = frozenset(TIME_SLOTS)


def is_valid_slot(label: str) -> bool:
    return label in _TIME_SLOT_SET


def normalize_slots(labels: Iterable[str]) -> list[str]:
    """Deduplicate slot labels and sort them ascending.

    Zero-padded ``HH:MM`` labels sort chronologically as strings.
    """
    return sorted(set(labels))


def utc_now_naive() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def venue_today(tz_name: str) -> date:
    return datetime.now(ZoneInfo(tz_name)).date()
