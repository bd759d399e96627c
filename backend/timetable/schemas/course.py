from pydantic import BaseModel, Field, field_validator, model_validator

from timetable.models.course import Weekday
from timetable.services.intervals import normalize_time, parse_time_to_minutes

MIN_YEAR = 2000
MAX_YEAR = 2100
MIN_TRIMESTER = 1
MAX_TRIMESTER = 4
INTENSIVE_TRIMESTER = 4


class CourseBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    teacher_id: int | None = None
    room_id: int | None = None
    day: Weekday
    start_time: str
    end_time: str
    year: int = Field(ge=MIN_YEAR, le=MAX_YEAR)
    trimester: int = Field(ge=MIN_TRIMESTER, le=MAX_TRIMESTER)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Course name is required")
        return trimmed

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        return normalize_time(value)

    @model_validator(mode="after")
    def validate_order(self) -> "CourseBase":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self


class CourseCreate(CourseBase):
    pass


class CourseUpdate(CourseBase):
    pass


class CourseOut(CourseBase):
    id: int
    teacher_name: str | None = None
    room_name: str | None = None
    room_building: str | None = None

    model_config = {"from_attributes": True}
