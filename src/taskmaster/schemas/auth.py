"""Login and session schemas."""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    pin: str = Field(..., min_length=1)


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    name: str
    email: str


class SessionRead(BaseModel):
    """Bearer token issued on login, valid until logout."""

    token: str
    user: UserRead
