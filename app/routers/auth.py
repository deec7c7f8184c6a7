import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select

from app.db.db import get_session
from app.models.admin import Admin
from app.schemas.auth_schemas import AdminLoginRequest, AdminProfile, RefreshTokenRequest, TokenResponse
from app.utils.auth_helper import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    require_admin,
    verify_password,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def issue_tokens(session: Session, admin: Admin) -> TokenResponse:
    access_token = create_access_token(admin)
    refresh_token = create_refresh_token(admin)

    admin.refresh_token = refresh_token
    admin.last_login = datetime.now(timezone.utc)

    try:
        session.add(admin)
        session.commit()
        session.refresh(admin)
    except Exception:
        session.rollback()
        raise HTTPException(500, "Failed to issue tokens")

    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        admin=AdminProfile(
            id=admin.id,
            username=admin.username,
            email=admin.email,
            full_name=admin.full_name,
            role=admin.role.value,
        ),
    )


@router.post("/login", response_model=TokenResponse)
def login(payload: AdminLoginRequest, session: Session = Depends(get_session)):
    admin = session.exec(select(Admin).where(Admin.email == payload.email)).first()

    if not admin or not admin.is_active:
        logger.warning("Login refused for %s: unknown or inactive admin", payload.email)
        raise HTTPException(status_code=401, detail="Invalid credentials or inactive admin")

    if not verify_password(payload.password, admin.password_hash):
        logger.warning("Login refused for %s: bad password", payload.email)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    return issue_tokens(session, admin)


@router.post("/refresh-token", response_model=TokenResponse)
def refresh_access_token(payload: RefreshTokenRequest, session: Session = Depends(get_session)):
    claims = decode_refresh_token(payload.refresh_token)
    admin = session.get(Admin, int(claims["sub"]))

    # Only the most recently issued refresh token is honoured
    if not admin or not admin.is_active or admin.refresh_token != payload.refresh_token:
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    return issue_tokens(session, admin)


@router.post("/logout")
def logout(session: Session = Depends(get_session), admin: Admin = Depends(require_admin)):
    admin.refresh_token = None

    try:
        session.add(admin)
        session.commit()
    except Exception:
        session.rollback()
        raise HTTPException(500, "Failed to log out")

    return {"ok": True, "message": "Logged out successfully"}
