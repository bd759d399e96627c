from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from timetable.api.deps import get_db, require_read
from timetable.models.user import User
from timetable.schemas.conflict import ConflictOut
from timetable.schemas.course import CourseOut
from timetable.services import course_repository
from timetable.services.conflicts import detect_conflicts

router = APIRouter()


@router.get("/", response_model=list[ConflictOut])
def list_conflicts(
    year: int = Query(...),
    trimester: int = Query(...),
    current_user: User = Depends(require_read),
    db: Session = Depends(get_db),
) -> list[ConflictOut]:
    courses = course_repository.list_courses(db, year=year, trimester=trimester)
    by_id = {course.id: course for course in courses}
    conflicts = detect_conflicts([course_repository.to_slot(course) for course in courses])
    return [
        ConflictOut(
            kind=conflict.kind.value,
            course_a=CourseOut.model_validate(by_id[conflict.course_a.id]),
            course_b=CourseOut.model_validate(by_id[conflict.course_b.id]),
            message=conflict.message,
        )
        for conflict in conflicts
    ]
