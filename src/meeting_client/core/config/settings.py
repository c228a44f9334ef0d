"""Main client settings and configuration management.

This module composes the settings from the different modules (app, http,
storage) into a single, accessible `Settings` class.

It loads settings from environment variables and .env files, validates them,
and provides a single `settings` object for use throughout the package.

Environment Support:
- Development: Uses .env or .env.development
- Test: Uses .env.test, forces the in-memory credential store
- Staging: Uses .env.staging
- Production: Uses .env.production
"""

import logging
import os
from pathlib import Path

from pydantic_settings import SettingsConfigDict

from .app import AppSettings
from .http import HttpSettings
from .storage import StorageSettings

logger = logging.getLogger(__name__)


class Settings(AppSettings, HttpSettings, StorageSettings):
    """The main settings class that aggregates all client configuration.

    It inherits from all the specialized settings classes, providing a unified
    interface to all configuration parameters.

    Usage:
        - Access settings via the singleton instance `settings`, or build a
          fresh one with `create_settings()` when wiring a client by hand.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._set_environment_defaults(self.APP_ENV)

    def _set_environment_defaults(self, env: str) -> None:
        """Set environment-specific default values.

        Args:
            env: Environment name
        """
        if env == "test":
            # Tests must never touch a real credential file or Redis.
            self.CREDENTIAL_STORE = "memory"

        if env == "development":
            self.DEBUG = True

        logger.debug("Client configured for %s environment", env)

    def validate_required_fields(self) -> None:
        """Validates that the fields the client cannot run without are set.

        Raises:
            ValueError: If a required field is missing or empty.
        """
        required_fields = ["API_BASE_URL", "REFRESH_PATH", "LOGIN_REDIRECT_PATH"]

        missing_fields = [field for field in required_fields if not getattr(self, field, None)]
        if missing_fields:
            error_msg = f"Missing required environment variables: {', '.join(missing_fields)}"
            logger.error(error_msg)
            raise ValueError(error_msg)

        if self.DEFAULT_LANGUAGE not in self.SUPPORTED_LANGUAGES:
            raise ValueError(
                f"DEFAULT_LANGUAGE {self.DEFAULT_LANGUAGE!r} is not one of {self.SUPPORTED_LANGUAGES}"
            )


def create_settings(**overrides) -> Settings:
    """Create settings instance with environment-specific configuration.

    Args:
        **overrides: Explicit values that win over the environment.

    Returns:
        Settings: Configured settings instance
    """
    env = os.getenv("APP_ENV", "development")

    env_files = {
        "development": ".env",
        "test": ".env.test",
        "staging": ".env.staging",
        "production": ".env.production",
    }

    env_file = env_files.get(env, ".env")

    if env != "development" and Path(env_file).exists():
        logger.info("Loading environment configuration from %s", env_file)
        settings_instance = Settings(_env_file=env_file, **overrides)
    else:
        settings_instance = Settings(**overrides)

    settings_instance.validate_required_fields()
    return settings_instance


# Create a singleton instance of the settings to be used across the package.
settings = create_settings()
