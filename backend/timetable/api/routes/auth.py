from datetime import timedelta
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from timetable.api.deps import get_current_user, get_db
from timetable.core.config import get_settings
from timetable.core.security import create_access_token, verify_password
from timetable.models.user import User
from timetable.schemas.user import Token, UserLogin, UserOut
from timetable.services.rate_limit import enforce_rate_limit, reset_rate_limit

settings = get_settings()
router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=Token)
def login(payload: UserLogin, request: Request, db: Session = Depends(get_db)) -> Token:
    enforce_rate_limit(
        request,
        username=payload.username,
        limit=settings.auth_rate_limit_login_max_requests,
        window_seconds=settings.auth_rate_limit_window_seconds,
    )
    user = db.execute(select(User).where(User.username == payload.username)).scalar_one_or_none()
    if user is None or not verify_password(payload.password, user.hashed_password):
        logger.info("Failed login for %s", payload.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")

    reset_rate_limit(request, username=payload.username)
    access_token = create_access_token(
        user.id,
        expires_delta=timedelta(minutes=settings.access_token_expire_minutes),
        role=user.role.value,
    )
    return Token(access_token=access_token, token_type="bearer", user=UserOut.model_validate(user))


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)) -> UserOut:
    return current_user
