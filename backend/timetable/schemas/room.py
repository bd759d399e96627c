from pydantic import BaseModel, Field, field_validator


class RoomBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    building: str | None = Field(default=None, max_length=200)
    capacity: int | None = Field(default=None, ge=1, le=10000)
    room_type: str | None = Field(default=None, max_length=100)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, value: str) -> str:
        trimmed = value.strip()
        if not trimmed:
            raise ValueError("Room name is required")
        return trimmed


class RoomCreate(RoomBase):
    pass


class RoomUpdate(RoomBase):
    pass


class RoomOut(RoomBase):
    id: int
    course_count: int = 0

    model_config = {"from_attributes": True}
