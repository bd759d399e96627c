from __future__ import annotations

from datetime import datetime, timezone
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from timetable.db.bootstrap import find_schema_gaps
from timetable.db.session import engine

router = APIRouter()
logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/health/live")
def health_live() -> dict:
    return {"status": "ok", "timestamp": _now()}


@router.get("/health/ready")
def health_ready() -> JSONResponse:
    """Report whether the database answers and carries every table the API needs."""
    database = {"ok": True, "schema_ok": False, "missing_tables": [], "missing_columns": {}, "error": None}
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
            database["missing_tables"], database["missing_columns"] = find_schema_gaps(connection)
    except SQLAlchemyError as exc:
        logger.warning("Readiness probe could not reach the database: %s", exc)
        database["ok"] = False
        database["error"] = str(exc)
    else:
        database["schema_ok"] = not database["missing_tables"] and not database["missing_columns"]

    ready = database["ok"] and database["schema_ok"]
    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ok" if ready else "degraded", "timestamp": _now(), "database": database},
    )
