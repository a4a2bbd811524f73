"""Application configuration."""

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Development mode exposes exception text in 500 responses
    dev_mode: bool = True

    app_title: str = "apikit"

    # Pagination
    default_limit: int = 100
    limit_param: str = "limit"
    page_param: str = "page"

    # Form requests: "propagate" (FastAPI 422 detail) or "json" (errors envelope)
    validation_failure_mode: str = "propagate"

    # Request tracing
    request_id_header: str = "x-request-id"

    # Logging
    log_level: str = "info"

    @model_validator(mode="after")
    def _validate_values(self) -> "Settings":
        if self.default_limit < 1:
            raise ValueError("DEFAULT_LIMIT must be a positive integer")
        if self.validation_failure_mode not in {"propagate", "json"}:
            raise ValueError(
                "VALIDATION_FAILURE_MODE must be one of: propagate, json"
            )
        return self

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
