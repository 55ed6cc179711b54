"""Login, logout and current-user endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...models import User
from ...schemas import LoginRequest, SessionRead, UserRead
from ...services import auth_service
from ...services.auth_service import AuthFailure
from ..deps import get_bearer_token, require_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=SessionRead,
    summary="Log in with username and PIN",
    responses={
        200: {
            "description": "Session opened",
            "content": {
                "application/json": {
                    "example": {
                        "token": "Jc1v0Yl7Qm3s3m2s0ZrT1fPq9k1oQy3c0b7uQ2aXq6E",
                        "user": {
                            "id": "0b6a3a4e-6f0e-4b55-9d6b-7c1c1d2f6a10",
                            "username": "admin",
                            "name": "Administrator",
                            "email": "admin@taskmaster.local",
                        },
                    }
                }
            },
        },
        401: {"description": "Unknown username or wrong PIN"},
    },
)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> SessionRead:
    """Open a session; send the token as ``Authorization: Bearer <token>``."""

    try:
        user_session = auth_service.login(db, username=payload.username, pin=payload.pin)
        db.commit()
        return SessionRead(token=user_session.token, user=UserRead.model_validate(user_session.user))
    except AuthFailure as exc:
        db.rollback()
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, summary="Close the current session")
def logout(
    token: Optional[str] = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> Response:
    if token:
        auth_service.logout(db, token)
        db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserRead, summary="Current user")
def me(user: User = Depends(require_user)) -> User:
    return user
