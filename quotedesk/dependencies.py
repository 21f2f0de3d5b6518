"""
dependencies.py — Shared FastAPI Dependencies

Reusable dependency functions for session authentication and role checks.
All routers import from here instead of defining their own auth logic.

Business Rules:
- get_user returns None if not logged in (non-throwing)
- require_user raises 401 if not logged in, 403 if deactivated
- require_supplier raises 403 unless the user has a supplier profile
- require_buyer raises 403 unless the user has a buyer profile
- Auth rides on the signed session cookie; there is no token refresh

Called by: all routers
Depends on: models, database
"""

import logging

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from .database import get_db
from .models import Buyer, Supplier, User

log = logging.getLogger(__name__)


# ── Authentication ────────────────────────────────────────────────────


def get_user(request: Request, db: Session) -> User | None:
    """Return current user from session, or None if not logged in."""
    uid = request.session.get("user_id")
    if not uid:
        return None
    return db.get(User, uid)


def require_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Dependency: raises 401 if no authenticated user, 403 if deactivated."""
    user = get_user(request, db)
    if not user:
        raise HTTPException(401, "Not authenticated")
    if not user.is_active:
        request.session.clear()
        raise HTTPException(403, "Account deactivated — contact admin")
    return user


# ── Roles ─────────────────────────────────────────────────────────────


def require_supplier(
    user: User = Depends(require_user), db: Session = Depends(get_db)
) -> Supplier:
    """Dependency: the supplier profile of the logged-in user."""
    supplier = db.query(Supplier).filter_by(user_id=user.id).first()
    if user.role not in ("supplier", "admin") or not supplier:
        raise HTTPException(403, "Supplier access required")
    return supplier


def require_buyer(
    user: User = Depends(require_user), db: Session = Depends(get_db)
) -> Buyer:
    """Dependency: the buyer profile of the logged-in user."""
    buyer = db.query(Buyer).filter_by(user_id=user.id).first()
    if user.role not in ("buyer", "admin") or not buyer:
        raise HTTPException(403, "Buyer access required")
    return buyer
