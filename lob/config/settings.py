"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables (and an optional
``.env`` file). The settings object is built once at startup and handed
to the components that need it, so nothing else reads the environment.

Three values are required for an upload: the access key, the secret key
and the bucket name. They default to empty strings so the settings can
always be constructed; ``verify_env_variables`` is what enforces them.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Checked in this order; the first missing one is reported.
REQUIRED_ENV_VARIABLES = ("AWS_ACCESS_KEY", "AWS_SECRET_KEY", "FOG_DIRECTORY")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigurationError(Exception):
    """Raised when a required environment variable is absent."""
    pass


class Settings(BaseSettings):
    """
    Uploader settings loaded from environment variables.

    Field names map to environment variables case-insensitively,
    e.g. ``aws_access_key`` is read from ``AWS_ACCESS_KEY``.
    """

    # Required
    aws_access_key: str = Field(
        default="",
        description="Access key ID for the object storage service"
    )
    aws_secret_key: str = Field(
        default="",
        description="Secret access key for the object storage service"
    )
    fog_directory: str = Field(
        default="",
        description="Destination bucket name. Created on first upload if absent."
    )

    # Optional
    aws_region: str = Field(
        default="us-east-1",
        description="Region used when the bucket has to be created"
    )
    aws_endpoint_url: Optional[str] = Field(
        default=None,
        description="Endpoint for S3-compatible services (R2, MinIO). Defaults to AWS."
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        """Accept any case; logging.basicConfig would reject an unknown name."""
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level

    @property
    def required_env_variables(self) -> list[str]:
        """Names of the environment variables an upload cannot run without."""
        return list(REQUIRED_ENV_VARIABLES)

    def verify_env_variables(self) -> None:
        """
        Fail fast on the first missing required variable.

        Variables are checked in the order of ``REQUIRED_ENV_VARIABLES``,
        so with nothing but the bucket set the access key is reported.
        Empty values count as missing.
        """
        for name in self.required_env_variables:
            if not getattr(self, name.lower()):
                raise ConfigurationError(f"{name} environment variable required")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    For tests, call get_settings.cache_clear() to reset.
    """
    return Settings()
