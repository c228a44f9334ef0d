"""
Application-wide settings.
"""
from typing import List, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """
    Defines general settings such as the project name, environment, logging
    and language preferences.

    Security Note:
        - LOG_JSON should stay enabled outside development so structured logs
          can be shipped without leaking multi-line console output.
        - Tokens are never part of the configuration; they live in the
          credential store selected by StorageSettings.
    """
    PROJECT_NAME: str = "meeting-client"
    VERSION: str = "0.1.0"
    APP_ENV: str = "development"
    DEBUG: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    DEFAULT_LANGUAGE: str = "en"
    SUPPORTED_LANGUAGES: Union[str, List[str]] = ["en", "ko"]

    @field_validator("SUPPORTED_LANGUAGES", mode="before")
    @classmethod
    def assemble_languages(cls, v: Union[str, List[str]]) -> List[str]:
        """
        Splits a comma-separated string of language codes into a list.

        Args:
            v: Input value as a string or list of language codes.

        Returns:
            List of stripped language codes.
        """
        if isinstance(v, str):
            return [i.strip() for i in v.split(",") if i.strip()]
        return v
