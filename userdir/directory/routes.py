from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db_session
from ..schemas import (
    MessageResponse,
    UserCreateInput,
    UserDeleteInput,
    UserRead,
    UserUpdateInput,
)
from . import engine

# Authorization sits in front of these routes and is wired by the deployment.
router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserRead])
def list_users(session: Session = Depends(get_db_session)) -> List[UserRead]:
    return engine.list_users(session)


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    body: Optional[UserCreateInput] = None,
    session: Session = Depends(get_db_session),
) -> MessageResponse:
    user = engine.create_user(session, body or UserCreateInput())
    return MessageResponse(message=f"New User {user.username} has been Registered!")


# ---------------------------------------------------------------------------
# Update / delete — the id travels in the body; the path form only fills it
# in when the body leaves it out.
# ---------------------------------------------------------------------------

def _update(session: Session, body: UserUpdateInput) -> MessageResponse:
    user = engine.update_user(session, body)
    return MessageResponse(message=f"{user.username} updated!")


@router.patch("", response_model=MessageResponse)
def update_user(
    body: Optional[UserUpdateInput] = None,
    session: Session = Depends(get_db_session),
) -> MessageResponse:
    return _update(session, body or UserUpdateInput())


@router.patch("/{user_id}", response_model=MessageResponse)
def update_user_by_path(
    user_id: str,
    body: Optional[UserUpdateInput] = None,
    session: Session = Depends(get_db_session),
) -> MessageResponse:
    body = body or UserUpdateInput()
    if body.id is None:
        body.id = user_id
    return _update(session, body)


@router.delete("", response_model=str)
def delete_user(
    body: Optional[UserDeleteInput] = None,
    session: Session = Depends(get_db_session),
) -> str:
    return engine.delete_user(session, body or UserDeleteInput())


@router.delete("/{user_id}", response_model=str)
def delete_user_by_path(
    user_id: str,
    body: Optional[UserDeleteInput] = None,
    session: Session = Depends(get_db_session),
) -> str:
    body = body or UserDeleteInput()
    if body.id is None:
        body.id = user_id
    return engine.delete_user(session, body)
