"""Storage access for courses, and the mapping between rows and ``CourseSlot``.

This is the only module that translates between the ORM ``Course`` (string
times, ``teacher_id``/``room_id`` columns) and the in-memory ``CourseSlot`` the
conflict detector and the scheduling gate work on.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from timetable.models.course import WEEKDAY_ORDER, Course, Weekday
from timetable.schemas.course import CourseCreate
from timetable.services.intervals import CourseSlot, parse_time_to_minutes


def _day_value(day: Weekday | str) -> str:
    return day.value if isinstance(day, Weekday) else str(day)


def to_slot(course: Course) -> CourseSlot:
    return CourseSlot(
        id=course.id,
        name=course.name,
        day=_day_value(course.day),
        start=parse_time_to_minutes(course.start_time),
        end=parse_time_to_minutes(course.end_time),
        year=course.year,
        trimester=course.trimester,
        teacher_id=course.teacher_id,
        room_id=course.room_id,
        teacher_name=course.teacher_name,
        room_name=course.room_name,
    )


def draft_to_slot(draft: CourseCreate, course_id: int | None = None) -> CourseSlot:
    return CourseSlot(
        id=course_id,
        name=draft.name,
        day=_day_value(draft.day),
        start=parse_time_to_minutes(draft.start_time),
        end=parse_time_to_minutes(draft.end_time),
        year=draft.year,
        trimester=draft.trimester,
        teacher_id=draft.teacher_id,
        room_id=draft.room_id,
    )


def list_courses(
    db: Session,
    *,
    year: int | None = None,
    trimester: int | None = None,
    room_id: int | None = None,
    teacher_id: int | None = None,
    day: Weekday | None = None,
) -> list[Course]:
    """Return courses matching every given filter exactly, ordered by id."""
    statement = select(Course)
    if year is not None:
        statement = statement.where(Course.year == year)
    if trimester is not None:
        statement = statement.where(Course.trimester == trimester)
    if room_id is not None:
        statement = statement.where(Course.room_id == room_id)
    if teacher_id is not None:
        statement = statement.where(Course.teacher_id == teacher_id)
    if day is not None:
        statement = statement.where(Course.day == day)
    return list(db.execute(statement.order_by(Course.id)).unique().scalars())


def list_scope_slots(
    db: Session,
    year: int,
    trimester: int,
    *,
    room_id: int | None = None,
    day: Weekday | None = None,
) -> list[CourseSlot]:
    return [to_slot(course) for course in list_courses(db, year=year, trimester=trimester, room_id=room_id, day=day)]


def timetable_order(courses: list[Course]) -> list[Course]:
    return sorted(courses, key=lambda course: (WEEKDAY_ORDER[Weekday(course.day)], course.start_time, course.id))


def get_course(db: Session, course_id: int) -> Course | None:
    return db.get(Course, course_id)


def find_course_by_name(db: Session, name: str, year: int, trimester: int) -> Course | None:
    statement = (
        select(Course)
        .where(Course.name == name, Course.year == year, Course.trimester == trimester)
        .order_by(Course.id)
    )
    return db.execute(statement).unique().scalars().first()


def insert_course(db: Session, draft: CourseCreate) -> Course:
    course = Course(**draft.model_dump())
    db.add(course)
    db.flush()
    return course


def update_course(db: Session, course: Course, draft: CourseCreate) -> Course:
    values: dict[str, Any] = draft.model_dump()
    for key, value in values.items():
        setattr(course, key, value)
    db.flush()
    return course


def delete_course(db: Session, course: Course) -> None:
    db.delete(course)
    db.flush()


def count_courses(
    db: Session,
    *,
    teacher_id: int | None = None,
    room_id: int | None = None,
    year: int | None = None,
    trimester: int | None = None,
) -> int:
    statement = select(func.count(Course.id))
    if teacher_id is not None:
        statement = statement.where(Course.teacher_id == teacher_id)
    if room_id is not None:
        statement = statement.where(Course.room_id == room_id)
    if year is not None:
        statement = statement.where(Course.year == year)
    if trimester is not None:
        statement = statement.where(Course.trimester == trimester)
    return int(db.execute(statement).scalar_one())
