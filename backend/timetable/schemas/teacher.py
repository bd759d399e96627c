from pydantic import BaseModel, EmailStr, Field, field_validator


class TeacherBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    department: str | None = Field(default=None, max_length=200)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Teacher name is required")
        return trimmed

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        trimmed = str(value).strip()
        return trimmed or None

    @field_validator("department", "phone")
    @classmethod
    def normalize_optional(cls, value: str | None) -> str | None:
        if value is None:
            return None
        trimmed = value.strip()
        return trimmed or None


class TeacherCreate(TeacherBase):
    pass


class TeacherUpdate(TeacherBase):
    pass


class TeacherOut(TeacherBase):
    id: int
    # Imported rows may carry contact text that is not an address.
    email: str | None = None
    course_count: int = 0

    model_config = {"from_attributes": True}


class TeacherImportRow(TeacherBase):
    """Teacher row from a CSV upload; contact fields are stored as given."""

    email: str | None = Field(default=None, max_length=255)
