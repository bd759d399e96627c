from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from timetable.api.deps import get_db, require_edit, require_read
from timetable.core.exceptions import ResourceNotFoundError
from timetable.models.course import Weekday
from timetable.models.user import User
from timetable.schemas.course import CourseCreate, CourseOut, CourseUpdate
from timetable.services import course_repository
from timetable.services.scheduling import schedule_course

router = APIRouter()


@router.get("/", response_model=list[CourseOut])
def list_courses(
    year: int | None = Query(default=None),
    trimester: int | None = Query(default=None),
    teacher_id: int | None = Query(default=None),
    room_id: int | None = Query(default=None),
    day: Weekday | None = Query(default=None),
    current_user: User = Depends(require_read),
    db: Session = Depends(get_db),
) -> list[CourseOut]:
    courses = course_repository.list_courses(
        db,
        year=year,
        trimester=trimester,
        teacher_id=teacher_id,
        room_id=room_id,
        day=day,
    )
    return course_repository.timetable_order(courses)


@router.get("/{course_id}", response_model=CourseOut)
def get_course(
    course_id: int,
    current_user: User = Depends(require_read),
    db: Session = Depends(get_db),
) -> CourseOut:
    course = course_repository.get_course(db, course_id)
    if course is None:
        raise ResourceNotFoundError("Course", course_id)
    return course


@router.post("/", response_model=CourseOut, status_code=status.HTTP_201_CREATED)
def create_course(
    payload: CourseCreate,
    current_user: User = Depends(require_edit),
    db: Session = Depends(get_db),
) -> CourseOut:
    return schedule_course(db, payload)


@router.put("/{course_id}", response_model=CourseOut)
def update_course(
    course_id: int,
    payload: CourseUpdate,
    current_user: User = Depends(require_edit),
    db: Session = Depends(get_db),
) -> CourseOut:
    course = course_repository.get_course(db, course_id)
    if course is None:
        raise ResourceNotFoundError("Course", course_id)
    return schedule_course(db, payload, course)


@router.delete("/{course_id}")
def delete_course(
    course_id: int,
    current_user: User = Depends(require_edit),
    db: Session = Depends(get_db),
) -> dict:
    course = course_repository.get_course(db, course_id)
    if course is None:
        raise ResourceNotFoundError("Course", course_id)
    course_repository.delete_course(db, course)
    db.commit()
    return {"message": "Course deleted successfully"}
