"""Pre-commit admission check for course placements.

Only room double-booking blocks a write. Teacher clashes are left to the
conflict report (see ``timetable.services.conflicts``) and are not gated here.
"""

from __future__ import annotations

from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass
import logging
from threading import Lock
from typing import Iterable, Iterator

from sqlalchemy import select
from sqlalchemy.orm import Session

from timetable.core.exceptions import ResourceNotFoundError, SchedulingConflictError
from timetable.models.course import Course
from timetable.models.room import Room
from timetable.models.teacher import Teacher
from timetable.schemas.course import CourseCreate
from timetable.services import course_repository
from timetable.services.intervals import CourseSlot, overlaps

logger = logging.getLogger(__name__)

SLOT_CONFLICT_REASON = "time slot conflict"


@dataclass(frozen=True)
class Admission:
    accepted: bool
    reason: str | None = None
    conflicting_course_id: int | None = None

    @classmethod
    def accept(cls) -> "Admission":
        return cls(accepted=True)

    @classmethod
    def reject(cls, reason: str, conflicting_course_id: int | None = None) -> "Admission":
        return cls(accepted=False, reason=reason, conflicting_course_id=conflicting_course_id)


def admit(
    candidate: CourseSlot,
    existing_in_scope: Iterable[CourseSlot],
    exclude_id: int | None = None,
) -> Admission:
    """Decide whether ``candidate`` may be stored next to ``existing_in_scope``.

    ``exclude_id`` names the course being edited so it never clashes with its
    own stored version. A candidate without a room is always accepted.
    """
    if candidate.room_id is None:
        return Admission.accept()

    for course in existing_in_scope:
        if exclude_id is not None and course.id == exclude_id:
            continue
        if course.room_id != candidate.room_id or course.day != candidate.day:
            continue
        if course.scope != candidate.scope:
            continue
        if overlaps(candidate.interval, course.interval):
            logger.info(
                "Rejected %s on %s in room %s: overlaps course %s",
                candidate.name,
                candidate.day,
                candidate.room_id,
                course.id,
            )
            return Admission.reject(SLOT_CONFLICT_REASON, conflicting_course_id=course.id)
    return Admission.accept()


class RoomLockRegistry:
    """Per-room locks serializing read-check-write sequences inside one process."""

    def __init__(self) -> None:
        self._locks: dict[int, Lock] = defaultdict(Lock)
        self._guard = Lock()

    def get(self, room_id: int) -> Lock:
        with self._guard:
            return self._locks[room_id]


_room_locks = RoomLockRegistry()


@contextmanager
def room_schedule_guard(db: Session, room_id: int | None) -> Iterator[None]:
    """Hold the room's scheduling lock until the block (and its commit) ends.

    The room row is locked with ``SELECT ... FOR UPDATE`` so concurrent writers
    in other processes queue behind this transaction on backends that honour
    row locks. Within the process a per-room mutex gives the same guarantee on
    SQLite, which ignores ``FOR UPDATE``.
    """
    if room_id is None:
        yield
        return

    lock = _room_locks.get(room_id)
    with lock:
        db.execute(select(Room.id).where(Room.id == room_id).with_for_update()).first()
        yield


def schedule_course(db: Session, draft: CourseCreate, course: Course | None = None) -> Course:
    """Store ``draft`` as a new course, or over ``course`` when editing.

    The room guard is held from the scope snapshot until the commit, so no
    other writer for the same room can commit between the gate check and the
    write. Raises ``SchedulingConflictError`` when the gate rejects the slot.
    """
    _ensure_references(db, draft)
    exclude_id = course.id if course is not None else None
    candidate = course_repository.draft_to_slot(draft, course_id=exclude_id)

    with room_schedule_guard(db, draft.room_id):
        snapshot = course_repository.list_scope_slots(
            db,
            draft.year,
            draft.trimester,
            room_id=draft.room_id,
            day=draft.day,
        )
        decision = admit(candidate, snapshot, exclude_id=exclude_id)
        if not decision.accepted:
            db.rollback()
            raise SchedulingConflictError(decision.reason or SLOT_CONFLICT_REASON, decision.conflicting_course_id)

        if course is None:
            course = course_repository.insert_course(db, draft)
        else:
            course = course_repository.update_course(db, course, draft)
        db.commit()
    db.refresh(course)
    return course


def _ensure_references(db: Session, draft: CourseCreate) -> None:
    if draft.teacher_id is not None and db.get(Teacher, draft.teacher_id) is None:
        raise ResourceNotFoundError("Teacher", draft.teacher_id)
    if draft.room_id is not None and db.get(Room, draft.room_id) is None:
        raise ResourceNotFoundError("Room", draft.room_id)
