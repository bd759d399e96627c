from typing import Literal

from pydantic import BaseModel

from timetable.schemas.course import CourseOut


class ConflictOut(BaseModel):
    kind: Literal["teacher", "room"]
    course_a: CourseOut
    course_b: CourseOut
    message: str
