"""PIN login and explicit user sessions."""

from __future__ import annotations

import hashlib
import logging
import secrets
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import User, UserSession
from . import store

logger = logging.getLogger(__name__)


class AuthFailure(Exception):
    """Raised when credentials or a session token are not accepted."""

    def __init__(self, detail: str, status_code: int = 401) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


def hash_pin(pin: str) -> str:
    return hashlib.sha256(pin.encode()).hexdigest()


def create_user(session: Session, *, username: str, pin: str, name: str, email: str) -> User:
    existing = session.execute(select(User).where(User.username == username)).scalar_one_or_none()
    if existing is not None:
        raise AuthFailure(f"Username {username} is taken", status_code=409)
    return store.create_record(
        session,
        "users",
        {"username": username, "pin_hash": hash_pin(pin), "name": name, "email": email},
    )


def login(session: Session, *, username: str, pin: str) -> UserSession:
    """Open a session for the user whose username and PIN both match."""

    stmt = select(User).where(User.username == username, User.pin_hash == hash_pin(pin))
    user = session.execute(stmt).scalar_one_or_none()
    if user is None:
        raise AuthFailure("Invalid username or PIN")

    user_session = UserSession(token=secrets.token_urlsafe(32), user=user)
    session.add(user_session)
    session.flush()
    logger.info("user %s logged in", user.username)
    return user_session


def logout(session: Session, token: str) -> None:
    user_session = session.get(UserSession, token)
    if user_session is not None:
        session.delete(user_session)
        session.flush()


def current_user(session: Session, token: Optional[str]) -> User:
    """Resolve a bearer token to its user; no session means not authenticated."""

    if not token:
        raise AuthFailure("Missing Authorization header")
    user_session = session.get(UserSession, token)
    if user_session is None:
        raise AuthFailure("Invalid token")
    return user_session.user
