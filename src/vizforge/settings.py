"""Client configuration for talking to the execution service.

values come from VIZFORGE_* environment variables, keyword arguments win.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TIMEOUT = 30.0


class ClientSettings(BaseSettings):
    """Where the execution service lives and how to reach it."""

    base_url: str = ""
    timeout: float = DEFAULT_TIMEOUT
    # set VIZFORGE_HTTPS_VERIFY=false for self-signed certificates
    verify: bool = Field(default=True, validation_alias="VIZFORGE_HTTPS_VERIFY")

    model_config = SettingsConfigDict(
        env_prefix="VIZFORGE_", populate_by_name=True, extra="ignore"
    )
