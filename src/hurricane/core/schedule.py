from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from datetime import date, timedelta
from typing import Dict, List

SESSIONS = ("morning", "afternoon", "evening")
SESSION_LABELS = {"morning": "Sáng", "afternoon": "Chiều", "evening": "Tối"}


@dataclass(frozen=True)
class ScheduleEntry:
    morning: str = ""
    afternoon: str = ""
    evening: str = ""


def date_key(day: date) -> str:
    return day.strftime("%Y-%m-%d")


def week_dates(anchor: date) -> List[date]:
    """Monday through Sunday of the week containing ``anchor``."""
    monday = anchor - timedelta(days=anchor.weekday())
    return [monday + timedelta(days=i) for i in range(7)]


def shift_week(anchor: date, offset: int) -> date:
    return anchor + timedelta(days=7 * offset)


class WeeklySchedule:
    def __init__(self, entries: Dict[str, ScheduleEntry] | None = None) -> None:
        self.entries: Dict[str, ScheduleEntry] = dict(entries or {})

    def entry(self, day: date | str) -> ScheduleEntry:
        key = day if isinstance(day, str) else date_key(day)
        return self.entries.get(key, ScheduleEntry())

    def set_session(self, day: date | str, session: str, text: str) -> ScheduleEntry:
        if session not in SESSIONS:
            raise KeyError(session)
        key = day if isinstance(day, str) else date_key(day)
        updated = replace(self.entry(key), **{session: text})
        self.entries[key] = updated
        return updated

    def week(self, anchor: date) -> List[tuple[date, ScheduleEntry]]:
        return [(d, self.entry(d)) for d in week_dates(anchor)]

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {key: asdict(entry) for key, entry in self.entries.items()}

    @classmethod
    def from_dict(cls, data: Dict | None) -> "WeeklySchedule":
        entries: Dict[str, ScheduleEntry] = {}
        for key, row in (data or {}).items():
            row = row or {}
            entries[key] = ScheduleEntry(**{s: str(row.get(s, "") or "") for s in SESSIONS})
        return cls(entries)
