# srrclient/src/srrclient/core/config.py

from typing import Optional

import keyring
from keyring.errors import KeyringError
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

KEYRING_SERVICE = "srrclient"


class Settings(BaseSettings):
    base_url: str = Field(default="https://www.srrdb.com")
    timeout: float = Field(default=30.0)
    user_agent: str = Field(default="srrclient")

    # Account used for authenticated uploads
    username: Optional[str] = Field(default=None)
    password: Optional[str] = Field(default=None)

    # Accept the two-byte marker check older releases of the client used
    legacy_marker_check: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SRRDB_",
        extra="ignore",
    )

    def get_password(self, username: str) -> Optional[str]:
        """
        Look the password of ``username`` up in the OS keyring first, then fall
        back to the environment/.env value.
        """
        try:
            secure = keyring.get_password(KEYRING_SERVICE, username)
        except KeyringError:
            secure = None
        return secure or self.password

    def credentials(self, username: Optional[str] = None, password: Optional[str] = None):
        """
        Fill in missing command line credentials from the environment and the
        keyring. The keyring is only consulted once a username is known.
        """
        username = username or self.username
        if username and not password:
            password = self.get_password(username)
        return username, password


def get_settings() -> Settings:
    return Settings()
