"""
Configuration settings for CRM FetchKit.

Uses Pydantic Settings to load environment variables for the CRM endpoint,
HTTP behaviour, pagination limits, and logging.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SOAP_ENDPOINT = "/XRMServices/2011/Organization.svc/web"


class Settings(BaseSettings):
    # CRM endpoint
    crm_server_url: Optional[str] = Field(None, alias="CRM_SERVER_URL")
    crm_soap_endpoint: str = Field(DEFAULT_SOAP_ENDPOINT, alias="CRM_SOAP_ENDPOINT")
    crm_timeout_seconds: float = Field(120.0, alias="CRM_TIMEOUT_SECONDS")

    # Pagination guardrail; None disables the ceiling
    crm_max_pages: Optional[int] = Field(10_000, alias="CRM_MAX_PAGES")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["DEFAULT_SOAP_ENDPOINT", "Settings", "get_settings"]
