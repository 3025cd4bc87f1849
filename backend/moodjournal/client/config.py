"""
Mood Journal Client — Configuration
=====================================

Settings for code that talks to the backend, read from `JOURNAL_*`
environment variables (or .env). Kept apart from the server settings so a
client never loads database or signing configuration.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    # Empty means "not configured"; every call then fails with ConfigurationError.
    backend_url: str = Field(default="", description="Base URL of the journal backend")

    # Storage layout written by the auth library.
    token_key: str = Field(default="bearer_token")
    session_key: str = Field(default="auth_session")
    session_token_field: str = Field(default="token")

    # Seconds; None keeps httpx's default timeout.
    timeout: Optional[float] = Field(default=None, gt=0)

    model_config = {
        "env_prefix": "JOURNAL_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }
