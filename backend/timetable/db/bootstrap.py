from __future__ import annotations

import logging

from sqlalchemy import inspect, select
from sqlalchemy.engine import Connection
from sqlalchemy.orm import Session

from timetable.core.config import get_settings
from timetable.core.security import get_password_hash
from timetable.db.base import Base
from timetable.db.session import SessionLocal, engine
import timetable.models  # noqa: F401
from timetable.models.academic_year import AcademicYear
from timetable.models.user import User, UserRole

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "users": {"id", "username", "hashed_password", "role"},
    "teachers": {"id", "name", "department", "email", "phone"},
    "rooms": {"id", "name", "building", "capacity", "room_type"},
    "courses": {
        "id",
        "name",
        "teacher_id",
        "room_id",
        "day",
        "start_time",
        "end_time",
        "year",
        "trimester",
    },
    "academic_years": {"id", "year", "is_active"},
}

DEFAULT_USERS: tuple[tuple[str, str, UserRole], ...] = (
    ("admin", "admin123", UserRole.admin),
    ("editor", "editor123", UserRole.editor),
    ("viewer", "viewer123", UserRole.readonly),
)


def find_schema_gaps(connection: Connection) -> tuple[list[str], dict[str, list[str]]]:
    """Return tables, then per-table columns, that ``REQUIRED_COLUMNS`` expects but the database lacks."""
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing_tables = sorted(name for name in REQUIRED_COLUMNS if name not in table_names)
    missing_columns: dict[str, list[str]] = {}
    for table_name, required in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        if required - existing:
            missing_columns[table_name] = sorted(required - existing)
    return missing_tables, missing_columns


def _assert_required_columns() -> None:
    with engine.begin() as connection:
        missing_tables, missing_columns = find_schema_gaps(connection)
    if missing_tables:
        raise RuntimeError(f"Missing required tables: {', '.join(missing_tables)}")
    if missing_columns:
        flat = [f"{table}.{column}" for table, columns in missing_columns.items() for column in columns]
        raise RuntimeError(f"Missing required columns: {', '.join(flat)}")


def seed_default_academic_year(db: Session, year: int) -> bool:
    if db.execute(select(AcademicYear.id).limit(1)).first() is not None:
        return False
    db.add(AcademicYear(year=year, is_active=True))
    return True


def seed_default_users(db: Session) -> list[str]:
    created: list[str] = []
    for username, password, role in DEFAULT_USERS:
        existing = db.execute(select(User).where(User.username == username)).scalar_one_or_none()
        if existing is not None:
            continue
        db.add(User(username=username, hashed_password=get_password_hash(password), role=role))
        created.append(username)
    return created


def seed_defaults(db: Session) -> None:
    settings = get_settings()
    if seed_default_academic_year(db, settings.default_academic_year):
        logger.info("Seeded default academic year %s", settings.default_academic_year)
    if settings.seed_default_users:
        created = seed_default_users(db)
        if created:
            logger.warning("Seeded default accounts %s; change their passwords", ", ".join(created))
    db.commit()


def ensure_runtime_schema_compatibility() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        _assert_required_columns()
        with SessionLocal() as db:
            seed_defaults(db)
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Runtime schema bootstrap failed")
        raise RuntimeError("Runtime schema bootstrap failed") from exc
