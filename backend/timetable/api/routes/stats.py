from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from timetable.api.deps import get_db, require_read
from timetable.models.room import Room
from timetable.models.teacher import Teacher
from timetable.models.user import User
from timetable.schemas.stats import StatsOut
from timetable.services import course_repository
from timetable.services.conflicts import detect_conflicts

router = APIRouter()


@router.get("/", response_model=StatsOut)
def get_stats(
    year: int | None = Query(default=None),
    trimester: int | None = Query(default=None),
    current_user: User = Depends(require_read),
    db: Session = Depends(get_db),
) -> StatsOut:
    scoped = year is not None and trimester is not None
    total_conflicts = None
    if scoped:
        total_courses = course_repository.count_courses(db, year=year, trimester=trimester)
        total_conflicts = len(detect_conflicts(course_repository.list_scope_slots(db, year, trimester)))
    else:
        total_courses = course_repository.count_courses(db)
    return StatsOut(
        total_courses=total_courses,
        total_teachers=db.execute(select(func.count(Teacher.id))).scalar_one(),
        total_rooms=db.execute(select(func.count(Room.id))).scalar_one(),
        total_users=db.execute(select(func.count(User.id))).scalar_one(),
        total_conflicts=total_conflicts,
    )
