from __future__ import annotations

import csv
from dataclasses import dataclass, field
import io
import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session

from timetable.core.exceptions import AppError
from timetable.models.course import Weekday
from timetable.models.room import Room
from timetable.models.teacher import Teacher
from timetable.schemas.course import CourseCreate
from timetable.schemas.teacher import TeacherImportRow
from timetable.services import course_repository
from timetable.services.scheduling import schedule_course

logger = logging.getLogger(__name__)

TEACHER_COLUMNS = ("name", "department", "email", "phone")
COURSE_COLUMNS = ("name", "teacher_name", "room_name", "day", "start_time", "end_time", "year", "trimester")
EXTRA_FIELDS_KEY = "__extra__"

TEACHERS_TEMPLATE = (
    "name,department,email,phone\n"
    '"Dr. John Smith","Computer Science","john.smith@university.edu","555-1234"\n'
    '"Prof. Jane Doe","Mathematics","jane.doe@university.edu","555-5678"\n'
)
COURSES_TEMPLATE = (
    "name,teacher_name,room_name,day,start_time,end_time,year,trimester\n"
    '"Introduction to Programming","Dr. Smith","A101","Monday","09:00","10:30",2024,1\n'
    '"Advanced Mathematics","Prof. Johnson","B205","Tuesday","14:00","15:30",2024,1\n'
)


class ImportValidationError(AppError):
    """Raised when any row of an uploaded file fails validation; nothing is written."""
    def __init__(self, errors: list[dict[str, Any]], total: int):
        super().__init__(
            "Validation errors found",
            status_code=400,
            details={"errors": errors, "processed": 0, "total": total},
        )


@dataclass
class ImportSummary:
    total: int
    created: int = 0
    updated: int = 0
    errors: list[dict[str, Any]] = field(default_factory=list)

    @property
    def processed(self) -> int:
        return self.created + self.updated

    def as_dict(self) -> dict[str, Any]:
        return {
            "message": "Import completed",
            "processed": self.processed,
            "created": self.created,
            "updated": self.updated,
            "errors": self.errors,
            "total": self.total,
        }


@dataclass(frozen=True)
class CourseRow:
    line: int
    name: str
    teacher_name: str
    room_name: str
    day: Weekday
    start_time: str
    end_time: str
    year: int
    trimester: int


def read_rows(content: bytes) -> list[dict[str, str]]:
    """Decode an uploaded file into stripped rows keyed by header name.

    Rows carrying more values than the header are rejected with their line.
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise AppError("CSV file must be UTF-8 encoded", status_code=400) from exc

    reader = csv.DictReader(io.StringIO(text), restkey=EXTRA_FIELDS_KEY)
    rows: list[dict[str, str]] = []
    errors: list[dict[str, Any]] = []
    for line, row in enumerate(reader, start=1):
        if row.get(EXTRA_FIELDS_KEY):
            errors.append({"line": line, "error": "Row has more values than the header"})
            continue
        rows.append(
            {(key or "").strip(): (value or "").strip() for key, value in row.items() if key != EXTRA_FIELDS_KEY}
        )
    if errors:
        raise ImportValidationError(errors, total=len(rows) + len(errors))
    return rows


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "__root__")
    message = str(error.get("msg", "Invalid value")).removeprefix("Value error, ")
    return f"{location}: {message}" if location else message


def parse_teacher_rows(rows: list[dict[str, str]]) -> list[tuple[int, TeacherImportRow]]:
    parsed: list[tuple[int, TeacherImportRow]] = []
    errors: list[dict[str, Any]] = []
    for line, row in enumerate(rows, start=1):
        if not row.get("name"):
            errors.append({"line": line, "error": "Name is required"})
            continue
        try:
            parsed.append((line, TeacherImportRow(**{column: row.get(column) or None for column in TEACHER_COLUMNS})))
        except ValidationError as exc:
            errors.append({"line": line, "error": _first_error(exc)})
    if errors:
        raise ImportValidationError(errors, total=len(rows))
    return parsed


def parse_course_rows(rows: list[dict[str, str]]) -> list[CourseRow]:
    parsed: list[CourseRow] = []
    errors: list[dict[str, Any]] = []
    for line, row in enumerate(rows, start=1):
        missing = [column for column in COURSE_COLUMNS if not row.get(column)]
        if missing:
            errors.append({"line": line, "error": f"Missing required fields: {', '.join(missing)}"})
            continue
        try:
            # Teacher and room ids are resolved later; validate the slot itself now.
            draft = CourseCreate(
                name=row["name"],
                day=row["day"],
                start_time=row["start_time"],
                end_time=row["end_time"],
                year=row["year"],
                trimester=row["trimester"],
            )
        except ValidationError as exc:
            errors.append({"line": line, "error": _first_error(exc)})
            continue
        parsed.append(
            CourseRow(
                line=line,
                name=draft.name,
                teacher_name=row["teacher_name"],
                room_name=row["room_name"],
                day=draft.day,
                start_time=draft.start_time,
                end_time=draft.end_time,
                year=draft.year,
                trimester=draft.trimester,
            )
        )
    if errors:
        raise ImportValidationError(errors, total=len(rows))
    return parsed


def import_teachers(db: Session, content: bytes) -> ImportSummary:
    """Create or update teachers by exact name."""
    rows = read_rows(content)
    parsed = parse_teacher_rows(rows)
    summary = ImportSummary(total=len(parsed))
    for line, payload in parsed:
        existing = db.execute(
            select(Teacher).where(Teacher.name == payload.name).order_by(Teacher.id)
        ).scalars().first()
        if existing is None:
            db.add(Teacher(**payload.model_dump()))
            summary.created += 1
        else:
            existing.department = payload.department
            existing.email = payload.email
            existing.phone = payload.phone
            summary.updated += 1
        db.commit()
    logger.info("Teacher import finished: %s created, %s updated", summary.created, summary.updated)
    return summary


def import_courses(db: Session, content: bytes) -> ImportSummary:
    """Create or update courses keyed by (name, year, trimester).

    Each row goes through the scheduling gate on its own; a rejected or
    unresolvable row is reported in ``errors`` and the remaining rows continue.
    """
    rows = read_rows(content)
    parsed = parse_course_rows(rows)
    summary = ImportSummary(total=len(parsed))
    for row in parsed:
        teacher = _find_by_name(db, Teacher, row.teacher_name)
        if teacher is None:
            _record_row_error(summary, row.line, f"Teacher not found: {row.teacher_name}")
            continue
        room = _find_by_name(db, Room, row.room_name)
        if room is None:
            _record_row_error(summary, row.line, f"Room not found: {row.room_name}")
            continue

        existing = course_repository.find_course_by_name(db, row.name, row.year, row.trimester)
        draft = CourseCreate(
            name=row.name,
            teacher_id=teacher.id,
            room_id=room.id,
            day=row.day,
            start_time=row.start_time,
            end_time=row.end_time,
            year=row.year,
            trimester=row.trimester,
        )
        try:
            schedule_course(db, draft, existing)
        except AppError as exc:
            _record_row_error(summary, row.line, exc.message)
            continue
        if existing is None:
            summary.created += 1
        else:
            summary.updated += 1
    logger.info(
        "Course import finished: %s created, %s updated, %s failed",
        summary.created,
        summary.updated,
        len(summary.errors),
    )
    return summary


def _find_by_name(db: Session, model: type[Teacher] | type[Room], name: str) -> Teacher | Room | None:
    return db.execute(select(model).where(model.name == name).order_by(model.id)).scalars().first()


def _record_row_error(summary: ImportSummary, line: int, message: str) -> None:
    logger.warning("Import row %s skipped: %s", line, message)
    summary.errors.append({"line": line, "error": message})
