"""Seed default accounts, teachers, rooms and a few sample courses.

Run:
  PYTHONPATH=backend python scripts/seed_demo_data.py
"""

from __future__ import annotations

from sqlalchemy import select

from timetable.core.exceptions import AppError
from timetable.db.base import Base
from timetable.db.bootstrap import seed_default_academic_year, seed_default_users
from timetable.db.session import SessionLocal, engine
from timetable.models.room import Room
from timetable.models.teacher import Teacher
from timetable.schemas.course import CourseCreate
from timetable.services import course_repository
from timetable.services.scheduling import schedule_course

DEMO_TEACHERS = [
    {"name": "Dr. Smith", "department": "Computer Science", "email": "smith@university.edu"},
    {"name": "Prof. Johnson", "department": "Mathematics", "email": "johnson@university.edu"},
    {"name": "Dr. Williams", "department": "Physics", "email": "williams@university.edu"},
]

DEMO_ROOMS = [
    {"name": "A101", "building": "Building A", "capacity": 30, "room_type": "Lecture Hall"},
    {"name": "B205", "building": "Building B", "capacity": 25, "room_type": "Computer Lab"},
    {"name": "C301", "building": "Building C", "capacity": 40, "room_type": "Lecture Hall"},
]

DEMO_COURSES = [
    ("Introduction to Programming", "Dr. Smith", "A101", "Monday", "09:00", "10:30"),
    ("Calculus I", "Prof. Johnson", "C301", "Tuesday", "14:00", "15:30"),
    ("Physics Fundamentals", "Dr. Williams", "B205", "Wednesday", "11:00", "12:30"),
]

DEMO_YEAR = 2026
DEMO_TRIMESTER = 1


def _upsert_by_name(session, model, values: dict):
    existing = session.execute(select(model).where(model.name == values["name"])).scalars().first()
    if existing is None:
        existing = model(**values)
        session.add(existing)
    else:
        for key, value in values.items():
            setattr(existing, key, value)
    session.flush()
    return existing


def main() -> None:
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        created_users = seed_default_users(session)
        seed_default_academic_year(session, DEMO_YEAR)
        teachers = {item["name"]: _upsert_by_name(session, Teacher, item) for item in DEMO_TEACHERS}
        rooms = {item["name"]: _upsert_by_name(session, Room, item) for item in DEMO_ROOMS}
        session.commit()

        for name, teacher_name, room_name, day, start_time, end_time in DEMO_COURSES:
            draft = CourseCreate(
                name=name,
                teacher_id=teachers[teacher_name].id,
                room_id=rooms[room_name].id,
                day=day,
                start_time=start_time,
                end_time=end_time,
                year=DEMO_YEAR,
                trimester=DEMO_TRIMESTER,
            )
            existing = course_repository.find_course_by_name(session, name, DEMO_YEAR, DEMO_TRIMESTER)
            try:
                schedule_course(session, draft, existing)
            except AppError as exc:
                print(f"Skipped {name}: {exc.message}")

    print("Seed complete.")
    if created_users:
        print("Default accounts created: admin/admin123, editor/editor123, viewer/viewer123")


if __name__ == "__main__":
    main()
