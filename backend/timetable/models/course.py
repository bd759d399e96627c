from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from timetable.db.base import Base
from timetable.models.room import Room
from timetable.models.teacher import Teacher


class Weekday(str, Enum):
    monday = "Monday"
    tuesday = "Tuesday"
    wednesday = "Wednesday"
    thursday = "Thursday"
    friday = "Friday"
    saturday = "Saturday"
    sunday = "Sunday"


WEEKDAY_ORDER = {day: index for index, day in enumerate(Weekday)}


class Course(Base):
    __tablename__ = "courses"
    __table_args__ = (
        Index("ix_courses_year_trimester", "year", "trimester"),
        Index("ix_courses_day_time", "day", "start_time", "end_time"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    teacher_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("teachers.id", ondelete="SET NULL"), index=True, nullable=True
    )
    room_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("rooms.id", ondelete="SET NULL"), index=True, nullable=True
    )
    day: Mapped[Weekday] = mapped_column(
        SAEnum(Weekday, name="weekday", values_callable=lambda members: [item.value for item in members]),
        nullable=False,
    )
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    trimester: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    teacher: Mapped[Teacher | None] = relationship(lazy="joined")
    room: Mapped[Room | None] = relationship(lazy="joined")

    @property
    def teacher_name(self) -> str | None:
        return self.teacher.name if self.teacher is not None else None

    @property
    def room_name(self) -> str | None:
        return self.room.name if self.room is not None else None

    @property
    def room_building(self) -> str | None:
        return self.room.building if self.room is not None else None
