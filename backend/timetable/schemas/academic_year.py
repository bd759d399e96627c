from datetime import datetime

from pydantic import BaseModel, Field

from timetable.schemas.course import MAX_YEAR, MIN_YEAR


class AcademicYearCreate(BaseModel):
    year: int = Field(ge=MIN_YEAR, le=MAX_YEAR)
    is_active: bool = False


class AcademicYearOut(BaseModel):
    id: int
    year: int
    is_active: bool
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
