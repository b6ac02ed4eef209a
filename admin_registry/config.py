import logging
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseSettings):
    # Runtime environment
    environment: str = "development"

    # Extension points
    admin_path_prefix: str = "/admin"
    default_order_policy: Literal["append", "first"] = "append"
    default_order_step: int = 10
    modules_package: str = "admin_registry.modules"

    # HTTP read surface
    api_prefix: str = "/api/v1"

    # Logging
    log_level: str = "INFO"
    structured_logging: bool = True

    model_config = SettingsConfigDict(
        env_prefix="ADMIN_REGISTRY_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("admin_path_prefix", "api_prefix")
    @classmethod
    def validate_path_prefix(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized.startswith("/"):
            raise ValueError("path prefixes must start with '/'")
        normalized = normalized.rstrip("/")
        if not normalized:
            raise ValueError("path prefixes must not be the bare root '/'")
        return normalized

    @field_validator("default_order_step")
    @classmethod
    def validate_order_step(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("DEFAULT_ORDER_STEP must be a positive integer")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in _LOG_LEVELS:
            allowed = ", ".join(sorted(_LOG_LEVELS))
            raise ValueError(f"LOG_LEVEL must be one of: {allowed}")
        return normalized

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)


settings = Settings()
