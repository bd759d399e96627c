from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from timetable.api.routes import (
    academic_years,
    auth,
    conflicts,
    courses,
    health,
    imports,
    rooms,
    stats,
    teachers,
    users,
)
from timetable.core.config import get_settings
from timetable.core.exceptions import AppError
from timetable.core.middleware import (
    RequestLoggingMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
)
from timetable.db.bootstrap import ensure_runtime_schema_compatibility

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    ensure_runtime_schema_compatibility()
    yield


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "details": exc.details},
    )


app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_exception_handler(AppError, app_error_handler)

app.add_middleware(RequestSizeLimitMiddleware, max_bytes=settings.max_request_size_bytes)
app.add_middleware(SecurityHeadersMiddleware, settings=settings)
app.add_middleware(RequestLoggingMiddleware, slow_threshold_ms=settings.slow_request_threshold_ms)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
app.include_router(auth.router, prefix=f"{settings.api_prefix}/auth", tags=["auth"])
app.include_router(users.router, prefix=f"{settings.api_prefix}/users", tags=["users"])
app.include_router(teachers.router, prefix=f"{settings.api_prefix}/teachers", tags=["teachers"])
app.include_router(rooms.router, prefix=f"{settings.api_prefix}/rooms", tags=["rooms"])
app.include_router(courses.router, prefix=f"{settings.api_prefix}/courses", tags=["courses"])
app.include_router(conflicts.router, prefix=f"{settings.api_prefix}/conflicts", tags=["conflicts"])
app.include_router(academic_years.router, prefix=f"{settings.api_prefix}/academic-years", tags=["academic-years"])
app.include_router(stats.router, prefix=f"{settings.api_prefix}/stats", tags=["stats"])
app.include_router(imports.router, prefix=f"{settings.api_prefix}/import", tags=["import"])
