from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from timetable.services.intervals import CourseSlot, overlaps


class ConflictKind(str, Enum):
    teacher = "teacher"
    room = "room"


@dataclass(frozen=True)
class Conflict:
    kind: ConflictKind
    course_a: CourseSlot
    course_b: CourseSlot
    message: str

    @property
    def key(self) -> tuple[int | None, int | None, str]:
        return (self.course_a.id, self.course_b.id, self.kind.value)


def _format_minutes(value: int) -> str:
    return f"{value // 60:02d}:{value % 60:02d}"


def _describe(kind: ConflictKind, a: CourseSlot, b: CourseSlot) -> str:
    window = (
        f"{a.day} {_format_minutes(max(a.start, b.start))}-{_format_minutes(min(a.end, b.end))}"
    )
    if kind == ConflictKind.teacher:
        teacher = a.teacher_name or f"teacher {a.teacher_id}"
        return f"Teacher conflict: {teacher} teaches {a.name} and {b.name} at the same time ({window})"
    room = a.room_name or f"room {a.room_id}"
    return f"Room conflict: {a.name} and {b.name} are both booked in {room} ({window})"


def detect_conflicts(courses: Sequence[CourseSlot]) -> list[Conflict]:
    """Return every teacher or room clash between pairs of ``courses``.

    Pairs are visited as ``(i, j)`` with ``i < j`` in input order, so the result
    order is fixed by the order of ``courses``. A pair sharing both teacher and
    room yields one conflict of each kind. Courses from different
    (year, trimester) scopes are never paired.
    """
    conflicts: list[Conflict] = []
    n = len(courses)
    for i in range(n):
        first = courses[i]
        for j in range(i + 1, n):
            second = courses[j]
            if first.scope != second.scope:
                continue
            if not overlaps(first.interval, second.interval):
                continue
            if first.teacher_id is not None and first.teacher_id == second.teacher_id:
                conflicts.append(
                    Conflict(
                        kind=ConflictKind.teacher,
                        course_a=first,
                        course_b=second,
                        message=_describe(ConflictKind.teacher, first, second),
                    )
                )
            if first.room_id is not None and first.room_id == second.room_id:
                conflicts.append(
                    Conflict(
                        kind=ConflictKind.room,
                        course_a=first,
                        course_b=second,
                        message=_describe(ConflictKind.room, first, second),
                    )
                )
    return conflicts
