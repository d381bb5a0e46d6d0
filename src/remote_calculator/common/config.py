"""Runtime configuration read from the environment or a .env file."""
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Calculator client settings.

    Every field can be overridden with a ``CALCULATOR_`` prefixed environment
    variable, e.g. ``CALCULATOR_API_BASE_URL=http://calc.internal:8080``.
    """

    model_config = SettingsConfigDict(env_prefix="CALCULATOR_", env_file=".env", extra="ignore")

    api_base_url: str = Field(default="http://localhost:5000", description="Base address of the calculation service")
    request_timeout: float = Field(default=5.0, gt=0, description="Timeout in seconds for a single request")
    log_level: str = Field(default="INFO", description="Level of the package logger")

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so endpoint paths can be appended."""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"api_base_url must be an http(s) URL: {v!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    return Settings()
