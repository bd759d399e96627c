from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from timetable.api.deps import get_db, require_edit, require_read
from timetable.core.exceptions import ResourceNotFoundError
from timetable.models.academic_year import AcademicYear
from timetable.models.user import User
from timetable.schemas.academic_year import AcademicYearCreate, AcademicYearOut

router = APIRouter()


@router.get("/", response_model=list[AcademicYearOut])
def list_academic_years(
    current_user: User = Depends(require_read),
    db: Session = Depends(get_db),
) -> list[AcademicYearOut]:
    return list(db.execute(select(AcademicYear).order_by(AcademicYear.year)).scalars())


@router.post("/", response_model=AcademicYearOut, status_code=status.HTTP_201_CREATED)
def create_academic_year(
    payload: AcademicYearCreate,
    current_user: User = Depends(require_edit),
    db: Session = Depends(get_db),
) -> AcademicYearOut:
    existing = db.execute(select(AcademicYear).where(AcademicYear.year == payload.year)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Academic year already exists")
    academic_year = AcademicYear(year=payload.year, is_active=payload.is_active)
    db.add(academic_year)
    db.commit()
    db.refresh(academic_year)
    return academic_year


@router.delete("/{year}")
def delete_academic_year(
    year: int,
    current_user: User = Depends(require_edit),
    db: Session = Depends(get_db),
) -> dict:
    academic_year = db.execute(select(AcademicYear).where(AcademicYear.year == year)).scalar_one_or_none()
    if academic_year is None:
        raise ResourceNotFoundError("Academic year", year)
    db.delete(academic_year)
    db.commit()
    return {"message": "Academic year deleted successfully"}
