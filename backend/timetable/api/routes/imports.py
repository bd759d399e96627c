from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from timetable.api.deps import get_db, require_edit, require_read
from timetable.models.user import User
from timetable.schemas.imports import ImportResult
from timetable.services.csv_import import COURSES_TEMPLATE, TEACHERS_TEMPLATE, import_courses, import_teachers

router = APIRouter()

CSV_CONTENT_TYPES = {"text/csv", "application/vnd.ms-excel"}


def _read_csv_upload(upload: UploadFile) -> bytes:
    filename = (upload.filename or "").lower()
    if upload.content_type not in CSV_CONTENT_TYPES and not filename.endswith(".csv"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only CSV files are allowed")
    return upload.file.read()


def _csv_attachment(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/teachers", response_model=ImportResult)
def upload_teachers(
    csvFile: UploadFile = File(...),
    current_user: User = Depends(require_edit),
    db: Session = Depends(get_db),
) -> ImportResult:
    summary = import_teachers(db, _read_csv_upload(csvFile))
    return ImportResult.model_validate(summary.as_dict())


@router.post("/courses", response_model=ImportResult)
def upload_courses(
    csvFile: UploadFile = File(...),
    current_user: User = Depends(require_edit),
    db: Session = Depends(get_db),
) -> ImportResult:
    summary = import_courses(db, _read_csv_upload(csvFile))
    return ImportResult.model_validate(summary.as_dict())


@router.get("/teachers/template")
def teachers_template(current_user: User = Depends(require_read)) -> Response:
    return _csv_attachment(TEACHERS_TEMPLATE, "teachers_template.csv")


@router.get("/courses/template")
def courses_template(current_user: User = Depends(require_read)) -> Response:
    return _csv_attachment(COURSES_TEMPLATE, "courses_template.csv")
