from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from timetable.api.deps import get_db, require_edit, require_read
from timetable.core.exceptions import ResourceInUseError, ResourceNotFoundError
from timetable.models.course import Course
from timetable.models.teacher import Teacher
from timetable.models.user import User
from timetable.schemas.teacher import TeacherCreate, TeacherOut, TeacherUpdate
from timetable.services.course_repository import count_courses

router = APIRouter()


def _teacher_out(teacher: Teacher, course_count: int) -> TeacherOut:
    return TeacherOut.model_validate(
        {
            "id": teacher.id,
            "name": teacher.name,
            "department": teacher.department,
            "email": teacher.email,
            "phone": teacher.phone,
            "course_count": course_count,
        }
    )


@router.get("/", response_model=list[TeacherOut])
def list_teachers(current_user: User = Depends(require_read), db: Session = Depends(get_db)) -> list[TeacherOut]:
    rows = db.execute(
        select(Teacher, func.count(Course.id))
        .outerjoin(Course, Course.teacher_id == Teacher.id)
        .group_by(Teacher.id)
        .order_by(Teacher.name)
    ).all()
    return [_teacher_out(teacher, course_count) for teacher, course_count in rows]


@router.get("/{teacher_id}", response_model=TeacherOut)
def get_teacher(
    teacher_id: int,
    current_user: User = Depends(require_read),
    db: Session = Depends(get_db),
) -> TeacherOut:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise ResourceNotFoundError("Teacher", teacher_id)
    return _teacher_out(teacher, count_courses(db, teacher_id=teacher.id))


@router.post("/", response_model=TeacherOut, status_code=status.HTTP_201_CREATED)
def create_teacher(
    payload: TeacherCreate,
    current_user: User = Depends(require_edit),
    db: Session = Depends(get_db),
) -> TeacherOut:
    teacher = Teacher(**payload.model_dump())
    db.add(teacher)
    db.commit()
    db.refresh(teacher)
    return _teacher_out(teacher, 0)


@router.put("/{teacher_id}", response_model=TeacherOut)
def update_teacher(
    teacher_id: int,
    payload: TeacherUpdate,
    current_user: User = Depends(require_edit),
    db: Session = Depends(get_db),
) -> TeacherOut:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise ResourceNotFoundError("Teacher", teacher_id)
    for key, value in payload.model_dump().items():
        setattr(teacher, key, value)
    db.commit()
    db.refresh(teacher)
    return _teacher_out(teacher, count_courses(db, teacher_id=teacher.id))


@router.delete("/{teacher_id}")
def delete_teacher(
    teacher_id: int,
    current_user: User = Depends(require_edit),
    db: Session = Depends(get_db),
) -> dict:
    teacher = db.get(Teacher, teacher_id)
    if teacher is None:
        raise ResourceNotFoundError("Teacher", teacher_id)
    assigned = count_courses(db, teacher_id=teacher_id)
    if assigned > 0:
        raise ResourceInUseError("Cannot delete teacher with assigned courses", course_count=assigned)
    db.delete(teacher)
    db.commit()
    return {"message": "Teacher deleted successfully"}
