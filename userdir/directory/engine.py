"""
directory/engine.py — User lifecycle rules
===========================================

List, create, update and delete over ``User`` rows:

1. Usernames are unique under case-insensitive comparison. The check here
   produces the friendly message; the unique index on ``username_key``
   catches writers that race past it.
2. Passwords are stored as bcrypt digests and never leave this module.
3. A user that still owns notes cannot be deleted.

Every function takes the caller's session and raises a ``DirectoryError``
subclass on failure; the caller's ``db_session`` rolls back.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth.core import hash_password, username_key
from ..config import settings
from ..errors import (
    ConflictError,
    DeleteBlockedError,
    NotFoundError,
    ValidationError,
)
from ..models import Note, User
from ..schemas import UserCreateInput, UserDeleteInput, UserRead, UserUpdateInput

logger = logging.getLogger("userdir.directory")

MSG_FIELDS_REQUIRED = "All fields are required!"
MSG_NO_USERS = "No users found!"
MSG_USERNAME_TAKEN = "Username Already Registered!"
MSG_INVALID_USER_DATA = "Invalid user data received!"
MSG_UPDATE_NOT_FOUND = "user not found!"
MSG_DUPLICATE_USERNAME = "Duplicate username!"
MSG_ID_REQUIRED = "User ID Required!"
MSG_HAS_NOTES = "User with notes Can't be Deleted!"
MSG_DELETE_NOT_FOUND = "User not Found!"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _is_filled_str(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _clean_roles(roles: Any) -> Optional[List[str]]:
    """Return the roles as a de-duplicated list, or None if not a usable list."""
    if not isinstance(roles, list) or not roles:
        return None
    if not all(_is_filled_str(r) for r in roles):
        return None
    return list(dict.fromkeys(roles))


def find_by_username(session: Session, username: str) -> Optional[User]:
    return session.execute(
        select(User).where(User.username_key == username_key(username))
    ).scalar_one_or_none()


def user_has_notes(session: Session, user_id: str) -> bool:
    note_id = session.execute(
        select(Note.id).where(Note.user == user_id).limit(1)
    ).scalar_one_or_none()
    return note_id is not None


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def list_users(session: Session) -> List[UserRead]:
    users = session.execute(select(User).order_by(User.created_at)).scalars().all()
    if not users:
        raise ValidationError(MSG_NO_USERS)
    return [UserRead.model_validate(u) for u in users]


def create_user(session: Session, body: UserCreateInput) -> User:
    if not _is_filled_str(body.username) or not _is_filled_str(body.password):
        raise ValidationError(MSG_FIELDS_REQUIRED)

    if find_by_username(session, body.username):
        raise ConflictError(MSG_USERNAME_TAKEN)

    user = User(
        username=body.username,
        username_key=username_key(body.username),
        password=hash_password(body.password),
        roles=_clean_roles(body.roles) or [settings.default_role],
        active=True,
    )
    session.add(user)
    try:
        session.flush()
    except IntegrityError:
        session.rollback()
        if find_by_username(session, body.username):
            raise ConflictError(MSG_USERNAME_TAKEN)
        raise ValidationError(MSG_INVALID_USER_DATA)

    logger.info("User created id=%s username=%s", user.id, user.username)
    return user


def update_user(session: Session, body: UserUpdateInput) -> User:
    roles = _clean_roles(body.roles)
    if (
        not _is_filled_str(body.id)
        or not _is_filled_str(body.username)
        or roles is None
        or not isinstance(body.active, bool)
    ):
        raise ValidationError(MSG_FIELDS_REQUIRED)

    user_id = body.id
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError(MSG_UPDATE_NOT_FOUND)

    # The record being updated may keep its own name.
    duplicate = find_by_username(session, body.username)
    if duplicate is not None and duplicate.id != user_id:
        raise ConflictError(MSG_DUPLICATE_USERNAME)

    user.username = body.username
    user.username_key = username_key(body.username)
    user.roles = roles
    user.active = body.active

    if _is_filled_str(body.password):
        user.password = hash_password(body.password)

    try:
        session.flush()
    except IntegrityError:
        session.rollback()
        raise ConflictError(MSG_DUPLICATE_USERNAME)

    logger.info("User updated id=%s username=%s", user.id, user.username)
    return user


def delete_user(session: Session, body: UserDeleteInput) -> str:
    """Delete a user and return the confirmation text."""
    if not _is_filled_str(body.id):
        raise ValidationError(MSG_ID_REQUIRED)

    user_id = body.id
    if user_has_notes(session, user_id):
        raise DeleteBlockedError(MSG_HAS_NOTES)

    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError(MSG_DELETE_NOT_FOUND)

    username = user.username
    session.delete(user)
    try:
        session.flush()
    except IntegrityError:
        # A note was attached after the check; the foreign key refuses the delete.
        session.rollback()
        raise DeleteBlockedError(MSG_HAS_NOTES)

    logger.info("User deleted id=%s username=%s", user_id, username)
    return f"Username {username} with ID {user_id} has been Deleted!"
