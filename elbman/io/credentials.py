"""
Settings model for the RightScale connection and the ELB scripts.
"""

from __future__ import annotations

from typing import Dict, Optional, Union
from urllib.parse import urlparse

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from elbman.io.env import ELBMAN_ENV_FILENAME, default_env_path

DEFAULT_ENV = "staging"
DEFAULT_API_URL = "https://us-4.rightscale.com"
DEFAULT_API_VERSION = "1.5"
DEFAULT_OAUTH2_API_URL = "https://us-4.rightscale.com/api/oauth2"
DEFAULT_TIMEOUT = 300

# action -> environment -> RightScript
DEFAULT_RIGHT_SCRIPTS: Dict[str, Dict[str, str]] = {
    "add": {
        "staging": "/api/right_scripts/438671001",
        "prod": "/api/right_scripts/438671001",
    },
    "remove": {
        "staging": "/api/right_scripts/396277001",
        "prod": "/api/right_scripts/396277001",
    },
}


def _normalize_url(url: Optional[str]) -> str:
    """_normalize_url"""
    if url is None:
        return ""
    parsed_url = urlparse(url)
    if not parsed_url.scheme:
        url = "https://" + url
    return url.rstrip("/")


class ElbManagerSettings(BaseSettings):
    """
    Settings read from ``RS_*`` environment variables or an ``elbman.env`` file.

    Every value can still be overridden on the command line.
    """

    api_url: str = DEFAULT_API_URL
    api_version: str = DEFAULT_API_VERSION
    oauth2_api_url: str = DEFAULT_OAUTH2_API_URL
    refresh_token: Optional[SecretStr] = None
    env: str = DEFAULT_ENV

    timeout: int = Field(default=DEFAULT_TIMEOUT, gt=0, description="Polling rounds before giving up")
    poll_interval: float = Field(default=1.0, ge=0, description="Seconds between polling rounds")
    retry_count: int = Field(default=10, gt=0)
    retry_sleep_sec: float = Field(default=1, ge=0)

    right_scripts: Dict[str, Dict[str, Union[str, int]]] = Field(
        default_factory=lambda: {k: dict(v) for k, v in DEFAULT_RIGHT_SCRIPTS.items()}
    )

    model_config = SettingsConfigDict(
        env_prefix="RS_",
        env_file=(str(default_env_path()), ELBMAN_ENV_FILENAME),
        env_nested_delimiter="__",
        extra="ignore",
    )

    @field_validator("api_url", "oauth2_api_url")
    def validate_url(cls, v):
        return _normalize_url(v)

    def get_refresh_token(self) -> Optional[str]:
        if self.refresh_token is None:
            return None
        return self.refresh_token.get_secret_value()
