"""Client configuration.

Why here:
- Centralizes environment variables (pydantic-settings) away from the CLI.
- Lets the transport and the endpoint layer read config the same way.

Sources, highest priority first: keyword arguments, `CONVERSATION_*`
environment variables, the project `.env`, the per-user `.env` written by
`conversation doctor configure`.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping

from dotenv import set_key
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_DIR_NAME = "conversation-client"
DEFAULT_SERVICE_URL = "https://gateway.watsonplatform.net/conversation/api"
DEFAULT_VERSION = "2017-05-26"


def _user_config_root() -> Path:
    if sys.platform.startswith("win"):
        return Path(os.environ.get("APPDATA") or Path.home())
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    return Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")


class ConversationSettings(BaseSettings):
    """Central client configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CONVERSATION_",
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(_user_config_root() / APP_DIR_NAME / ".env")),
        env_file_encoding="utf-8",
    )

    service_url: str = Field(
        default=DEFAULT_SERVICE_URL,
        min_length=8,
        description="Base URL of the conversation service.",
    )
    username: str | None = Field(
        default=None,
        description="Service username (basic auth).",
    )
    password: str | None = Field(
        default=None,
        description="Service password (basic auth).",
    )
    version: str = Field(
        default=DEFAULT_VERSION,
        pattern=r"^\d{4}-\d{2}-\d{2}$",
        description="API version date sent as the `version` query parameter (YYYY-MM-DD).",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="conversation-client/0.1",
        min_length=1,
        description="User-Agent sent with every request.",
    )
    log_level: str = Field(
        default="WARNING",
        description="Logging level used by the CLI.",
    )

    @property
    def has_credentials(self) -> bool:
        return bool(self.username) and bool(self.password)

    @staticmethod
    def user_env_file() -> Path:
        """The per-user `.env` (resolved now, so `XDG_CONFIG_HOME` changes apply)."""

        return _user_config_root() / APP_DIR_NAME / ".env"

    @classmethod
    def save_user_values(
        cls, values: Mapping[str, str | None], env_path: Path | None = None
    ) -> Path:
        """Merge `values` into the per-user `.env`; `None` leaves a key untouched."""

        env_path = env_path or cls.user_env_file()
        env_path.parent.mkdir(parents=True, exist_ok=True)
        env_path.touch(exist_ok=True)
        for key, value in values.items():
            if value is not None:
                set_key(env_path, key, value)
        return env_path
