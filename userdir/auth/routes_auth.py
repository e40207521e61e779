import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response
from slowapi import Limiter
from sqlalchemy.orm import Session

from .core import verify_password
from ..config import Settings, settings as default_settings
from ..database import get_db_session
from ..directory.engine import MSG_FIELDS_REQUIRED, find_by_username
from ..errors import UnauthorizedError, ValidationError
from ..rate_limit import apply_rate_limit_headers
from ..schemas import LoginInput, LoginResponse, UserRead

logger = logging.getLogger("userdir.auth")


def build_auth_router(limiter: Limiter, cfg: Optional[Settings] = None) -> APIRouter:
    """
    Login routes, throttled by ``limiter``.

    Built per application so the limit is bound to that app's limiter
    instance rather than a module-level one.
    """
    cfg = cfg or default_settings
    router = APIRouter(prefix="/auth", tags=["auth"])

    @router.post("", response_model=LoginResponse)
    @limiter.limit(cfg.login_rate_limit)
    def login(
        request: Request,
        response: Response,
        body: Optional[LoginInput] = None,
        session: Session = Depends(get_db_session),
    ) -> LoginResponse:
        apply_rate_limit_headers(request, response)
        body = body or LoginInput()

        credentials = (body.username, body.password)
        if not all(isinstance(v, str) and v for v in credentials):
            raise ValidationError(MSG_FIELDS_REQUIRED)

        user = find_by_username(session, body.username)
        if user is None or not user.active:
            logger.info("Login refused for %s: unknown or inactive", body.username)
            raise UnauthorizedError("Unauthorized")
        if not verify_password(body.password, user.password):
            logger.info("Login refused for %s: bad password", body.username)
            raise UnauthorizedError("Unauthorized")

        return LoginResponse(message="Login successful!", user=UserRead.model_validate(user))

    return router
