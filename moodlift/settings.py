from __future__ import annotations

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field(..., alias="DATABASE_URL")
    backend_session_secret: str = Field(..., alias="BACKEND_SESSION_SECRET")
    session_encryption_key: str = Field("", alias="SESSION_ENCRYPTION_KEY")

    site_url: str = Field("https://moodlift.hexpertify.com", alias="SITE_URL")
    app_timezone: str = Field("UTC", alias="APP_TIMEZONE")

    oauth_token_url: str | None = Field(None, alias="OAUTH_TOKEN_URL")
    oauth_client_id: str | None = Field(None, alias="OAUTH_CLIENT_ID")
    oauth_client_secret: str | None = Field(None, alias="OAUTH_CLIENT_SECRET")
    oauth_redirect_uri: str | None = Field(None, alias="OAUTH_REDIRECT_URI")

    session_cookie_name: str = Field("moodlift_session", alias="SESSION_COOKIE_NAME")
    session_cookie_secure: bool = Field(True, alias="SESSION_COOKIE_SECURE")
    session_ttl_days: int = Field(30, alias="SESSION_TTL_DAYS")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def site_origin(self) -> str:
        return self.site_url.rstrip("/")

    @property
    def encryption_secret(self) -> str:
        return self.session_encryption_key or self.backend_session_secret


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None


# For local dev convenience only.
if os.getenv("BACKEND_DEBUG_SETTINGS"):
    print(get_settings())
