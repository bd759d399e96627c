from pydantic import BaseModel


class StatsOut(BaseModel):
    total_courses: int
    total_teachers: int
    total_rooms: int
    total_users: int
    total_conflicts: int | None = None
