from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

from .auth.routes_auth import build_auth_router
from .config import Settings, settings as default_settings
from .database import init_db
from .directory.routes import router as users_router
from .errors import register_error_handlers
from .rate_limit import create_login_limiter, login_limit_exceeded_handler
from .schemas import ServiceInfo
from .telemetry.logger import configure_logging

SERVICE_NAME = "userdir"
SERVICE_VERSION = "0.1.0"

log = logging.getLogger("userdir")


def create_app(cfg: Optional[Settings] = None) -> FastAPI:
    """Build the application: logging, tables, limiter, error handlers, routes."""
    cfg = cfg or default_settings
    configure_logging(cfg)
    init_db()

    app = FastAPI(
        title="User Directory",
        version=SERVICE_VERSION,
        description=(
            "User records (list, create, update, delete) with case-insensitive "
            "username uniqueness, bcrypt credentials and a throttled login check."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Rate limiting — one limiter per app instance
    limiter = create_login_limiter(cfg)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, login_limit_exceeded_handler)

    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.allow_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["RateLimit-Limit", "RateLimit-Remaining", "RateLimit-Reset", "RateLimit-Policy", "Retry-After"],
    )

    app.include_router(build_auth_router(limiter, cfg))
    app.include_router(users_router)

    @app.get("/", response_model=ServiceInfo, tags=["meta"])
    def root() -> ServiceInfo:
        return ServiceInfo(status="ok", service=SERVICE_NAME, version=SERVICE_VERSION)

    @app.get("/health", tags=["meta"])
    def health() -> dict:
        return {"status": "healthy"}

    log.info("Application ready (environment=%s)", cfg.environment)
    return app


app = create_app()
