"""
Application configuration using Pydantic settings.

Credentials and the target bucket come from environment variables
and are validated before any upload begins.
"""

from .settings import ConfigurationError, REQUIRED_ENV_VARIABLES, Settings, get_settings

__all__ = ["ConfigurationError", "REQUIRED_ENV_VARIABLES", "Settings", "get_settings"]
