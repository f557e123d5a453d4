from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheType(str, Enum):
    """Cache store backend selector."""

    NONE = "none"
    MEMORY = "memory"
    JSON = "json"
    SQLITE = "sqlite"


# Descriptive names accepted alongside the short backend names
CACHE_TYPE_ALIASES = {
    "disabled": CacheType.NONE,
    "off": CacheType.NONE,
    "in-memory": CacheType.MEMORY,
    "file": CacheType.JSON,
    "file-backed": CacheType.JSON,
    "embedded-relational": CacheType.SQLITE,
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="VODHUB_", env_file=".env", extra="ignore", populate_by_name=True
    )

    app_name: str = "vodhub"
    env: str = "dev"
    host: str = "0.0.0.0"  # nosec B104 - intentional for container deployments
    port: int = Field(default=3000, validation_alias="PORT")

    # Site registry (maintained outside this service)
    data_dir: Path = Path(".")
    sites_file: str = "db.json"
    sites_template_file: str = "db.template.json"

    # Cache store
    cache_type: CacheType = Field(default=CacheType.JSON, validation_alias="CACHE_TYPE")
    search_cache_file: str = "cache_search.json"
    detail_cache_file: str = "cache_detail.json"
    cache_db_file: str = "cache.db"
    search_cache_max_entries: int = 300
    detail_cache_max_entries: int = 500
    fresh_content_ttl: int = 3600

    # Upstream timeouts (seconds)
    search_timeout: float = 3.0
    stream_timeout: float = 4.0
    detail_timeout: float = 6.0
    hot_timeout: float = 3.0

    # Hot list
    hot_sites: str = "ffzy,bfzy,lzi,dbzy"
    hot_list_size: int = 12

    # Observability
    log_level: str = "INFO"

    @field_validator("cache_type", mode="before")
    @classmethod
    def _normalize_cache_type(cls, value: object) -> object:
        if isinstance(value, str):
            name = value.strip().lower()
            return CACHE_TYPE_ALIASES.get(name, name)
        return value

    @property
    def hot_site_keys(self) -> list[str]:
        """Site keys queried, in order, for the hot list."""
        return [key.strip() for key in self.hot_sites.split(",") if key.strip()]

    def resolve(self, filename: str) -> Path:
        """Resolve a data file name against ``data_dir``."""
        return self.data_dir / filename


settings = Settings()
