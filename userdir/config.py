from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="USERDIR_")

    # Database
    database_url: str = "sqlite:///./userdir.db"
    log_sql: bool = False

    # Server
    environment: str = "development"
    log_level: str = "info"
    log_format: str = "json"  # json | text
    allow_cors_origins: List[str] = ["*"]

    # Audit log (rate-limit rejections)
    log_dir: str = "logs"
    audit_log_file: str = "errLog.log"

    # Rate limiting
    login_rate_limit: str = "5/minute"
    rate_limit_enabled: bool = True

    # Users
    bcrypt_rounds: int = 10
    default_role: str = "Employee"

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        """bcrypt only accepts cost factors between 4 and 31."""
        if not 4 <= v <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31.")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'.")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()


# Module-level singleton for convenience
settings = get_settings()
