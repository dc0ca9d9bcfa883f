# quotebook/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.orm import Session

from quotebook.auth.deps import ACCESS_COOKIE, get_current_user
from quotebook.auth.jwt import create_access_token
from quotebook.auth.passwords import verify_password
from quotebook.core.logging_config import logger
from quotebook.core.settings import settings
from quotebook.db import get_db
from quotebook.models.user import User
from quotebook.schemas.auth import LoginRequest, TokenResponse, UserOut

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    username = payload.username.strip()
    user = db.scalars(select(User).where(User.username == username)).first()
    if not user or not user.is_active or not verify_password(payload.password, user.password_hash):
        logger.info("login_failed", username=username)
        raise HTTPException(status_code=401, detail="Invalid username or password")

    token = create_access_token(user_id=user.id, username=user.username)
    logger.info("login_succeeded", user_id=user.id)

    resp = JSONResponse(TokenResponse(access_token=token).model_dump())
    resp.set_cookie(
        key=ACCESS_COOKIE,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
        max_age=60 * 60 * settings.JWT_EXP_HOURS,
        path="/",
    )
    return resp


@router.post("/logout")
def logout():
    resp = JSONResponse({"success": True})
    resp.delete_cookie(ACCESS_COOKIE, path="/")
    return resp


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return UserOut.model_validate(user)
