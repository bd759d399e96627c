from fastapi import APIRouter, Depends, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from timetable.api.deps import get_db, require_edit, require_read
from timetable.core.exceptions import ResourceInUseError, ResourceNotFoundError
from timetable.models.course import Course
from timetable.models.room import Room
from timetable.models.user import User
from timetable.schemas.room import RoomCreate, RoomOut, RoomUpdate
from timetable.services.course_repository import count_courses

router = APIRouter()


def _room_out(room: Room, course_count: int) -> RoomOut:
    return RoomOut.model_validate(
        {
            "id": room.id,
            "name": room.name,
            "building": room.building,
            "capacity": room.capacity,
            "room_type": room.room_type,
            "course_count": course_count,
        }
    )


@router.get("/", response_model=list[RoomOut])
def list_rooms(current_user: User = Depends(require_read), db: Session = Depends(get_db)) -> list[RoomOut]:
    rows = db.execute(
        select(Room, func.count(Course.id))
        .outerjoin(Course, Course.room_id == Room.id)
        .group_by(Room.id)
        .order_by(Room.name)
    ).all()
    return [_room_out(room, course_count) for room, course_count in rows]


@router.get("/{room_id}", response_model=RoomOut)
def get_room(
    room_id: int,
    current_user: User = Depends(require_read),
    db: Session = Depends(get_db),
) -> RoomOut:
    room = db.get(Room, room_id)
    if room is None:
        raise ResourceNotFoundError("Room", room_id)
    return _room_out(room, count_courses(db, room_id=room.id))


@router.post("/", response_model=RoomOut, status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomCreate,
    current_user: User = Depends(require_edit),
    db: Session = Depends(get_db),
) -> RoomOut:
    room = Room(**payload.model_dump())
    db.add(room)
    db.commit()
    db.refresh(room)
    return _room_out(room, 0)


@router.put("/{room_id}", response_model=RoomOut)
def update_room(
    room_id: int,
    payload: RoomUpdate,
    current_user: User = Depends(require_edit),
    db: Session = Depends(get_db),
) -> RoomOut:
    room = db.get(Room, room_id)
    if room is None:
        raise ResourceNotFoundError("Room", room_id)
    for key, value in payload.model_dump().items():
        setattr(room, key, value)
    db.commit()
    db.refresh(room)
    return _room_out(room, count_courses(db, room_id=room.id))


@router.delete("/{room_id}")
def delete_room(
    room_id: int,
    current_user: User = Depends(require_edit),
    db: Session = Depends(get_db),
) -> dict:
    room = db.get(Room, room_id)
    if room is None:
        raise ResourceNotFoundError("Room", room_id)
    scheduled = count_courses(db, room_id=room_id)
    if scheduled > 0:
        raise ResourceInUseError("Cannot delete room with scheduled courses", course_count=scheduled)
    db.delete(room)
    db.commit()
    return {"message": "Room deleted successfully"}
