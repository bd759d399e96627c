"""Time-of-day intervals for scheduled courses.

A course occupies the half-open interval ``[start, end)`` on one weekday, with
both ends expressed as minutes after midnight. Two intervals overlap only when
they share the weekday and ``a.start < b.end and b.start < a.end``, so a course
ending at 10:00 and another starting at 10:00 do not collide.
"""

from __future__ import annotations

from dataclasses import dataclass
import re

TIME_PATTERN = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")
MINUTES_PER_DAY = 24 * 60


def parse_time_to_minutes(value: str) -> int:
    match = TIME_PATTERN.match(value.strip())
    if match is None:
        raise ValueError("Time must be in HH:MM 24-hour format")
    return int(match.group(1)) * 60 + int(match.group(2))


def normalize_time(value: str) -> str:
    """Return ``value`` zero-padded as ``HH:MM``."""
    minutes = parse_time_to_minutes(value)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class TimeInterval:
    day: str
    start: int
    end: int

    @classmethod
    def from_strings(cls, day: str, start_time: str, end_time: str) -> "TimeInterval":
        return cls(day=day, start=parse_time_to_minutes(start_time), end=parse_time_to_minutes(end_time))


def overlaps(a: TimeInterval, b: TimeInterval) -> bool:
    # Callers guarantee start < end for both intervals.
    return a.day == b.day and a.start < b.end and b.start < a.end


@dataclass(frozen=True)
class CourseSlot:
    """Read-only snapshot of one course, as seen by the detector and the gate."""

    id: int | None
    name: str
    day: str
    start: int
    end: int
    year: int
    trimester: int
    teacher_id: int | None = None
    room_id: int | None = None
    teacher_name: str | None = None
    room_name: str | None = None

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(day=self.day, start=self.start, end=self.end)

    @property
    def scope(self) -> tuple[int, int]:
        return (self.year, self.trimester)
