"""
routers/auth.py — Session Login & Logout

Email/password login that sets the signed session cookie every other
route relies on (clients send it back with credentials included).

Business Rules:
- Email normalized to lowercase on login
- Deactivated accounts cannot log in
- Wrong email and wrong password return the same 401

Called by: main.py (router mount)
Depends on: dependencies, models, utils/passwords
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_user
from ..models import User
from ..schemas.auth import LoginRequest
from ..utils.passwords import verify_password

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
async def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    user = db.query(User).filter_by(email=payload.email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        log.warning("Failed login for %s", payload.email)
        raise HTTPException(401, "Invalid email or password")
    if not user.is_active:
        raise HTTPException(403, "Account deactivated — contact admin")

    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    request.session["user_id"] = user.id
    return {"ok": True, "userId": user.id, "role": user.role}


@router.post("/logout")
async def logout(request: Request):
    request.session.clear()
    return {"ok": True}


@router.get("/status")
async def auth_status(request: Request, db: Session = Depends(get_db)):
    user = get_user(request, db)
    if not user:
        return {"authenticated": False}
    return {
        "authenticated": True,
        "userId": user.id,
        "email": user.email,
        "role": user.role,
        "name": user.full_name,
    }
