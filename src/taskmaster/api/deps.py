"""Shared request dependencies."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..models import User
from ..services import auth_service
from ..services.auth_service import AuthFailure


def get_bearer_token(authorization: Optional[str] = Header(None)) -> Optional[str]:
    if not authorization:
        return None
    return authorization.replace("Bearer ", "").strip()


def require_user(
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> User:
    """Reject the request unless the bearer token belongs to a live session."""

    try:
        return auth_service.current_user(db, token)
    except AuthFailure as exc:
        raise HTTPException(
            status_code=exc.status_code,
            detail=exc.detail,
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
