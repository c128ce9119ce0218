"""Application settings loaded from environment variables via pydantic-settings.

Settings are read from (in priority order):

  1. **Environment variables** -- e.g. ``AUTH_TOKENS=token-a,token-b``
  2. **.env file** -- key=value lines in the project root ``.env`` file

Field names map to upper-cased environment variables automatically
(``page_size`` -> ``PAGE_SIZE``).  The ``.env`` file holds access tokens and
must never be committed.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tracklookup.models.credentials import CredentialPool


class Settings(BaseSettings):
    """tracklookup application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Upstream catalog ===
    catalog_base_url: str = "https://api.vk.com"
    catalog_api_version: str = "5.71"
    catalog_user_agent: str = "tracklookup/0.1.0"
    catalog_timeout: float = 20.0
    # Comma-separated access tokens; a request picks one by index.
    auth_tokens: str = ""

    # === Lookup behaviour ===
    page_size: int = 50
    album_track_count: int = 200
    # Albums fetched per "albums:" query; 10 is a hard ceiling.
    max_albums_limit: int = Field(default=10, ge=1, le=10)
    max_concurrent_lookups: int = 5

    # === Cache ===
    cache_ttl_seconds: int = 86400
    cache_max_size: int = 10000

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def credential_pool(self) -> CredentialPool:
        """Build the access-token pool from ``auth_tokens``."""
        return CredentialPool.from_csv(self.auth_tokens)
