from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Request bodies
#
# Fields are deliberately loose: presence and type checks happen in the
# directory engine so that every failure yields the same
# "All fields are required!" message instead of a 422.
# ---------------------------------------------------------------------------

class UserCreateInput(BaseModel):
    username: Any = None
    password: Any = None
    roles: Any = None


class UserUpdateInput(BaseModel):
    id: Any = None
    username: Any = None
    roles: Any = None
    active: Any = None
    password: Any = None


class UserDeleteInput(BaseModel):
    id: Any = None


class LoginInput(BaseModel):
    username: Any = None
    password: Any = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class UserRead(BaseModel):
    """A user record as clients see it; the password digest is never included."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    roles: List[str] = Field(default_factory=list)
    active: bool


class MessageResponse(BaseModel):
    message: str


class LoginResponse(BaseModel):
    message: str
    user: UserRead


class ServiceInfo(BaseModel):
    status: str
    service: str
    version: str
