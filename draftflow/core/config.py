"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App settings
    app_name: str = "Draftflow"
    debug: bool = False

    # CORS origins for the gathering/drafting pages (comma-separated)
    cors_origins_str: str = Field(default="*", alias="cors_origins")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins(self) -> List[str]:
        """Parse comma-separated CORS origins."""
        return [o.strip() for o in self.cors_origins_str.split(",") if o.strip()]

    # OpenAI
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"

    # Summarization settings
    summary_temperature: float = 0.2
    summary_max_tokens: int = 600
    request_timeout_seconds: float = 60.0
    upstream_details_limit: int = 800

    # Upstream retry (0 disables retries)
    upstream_max_retries: int = 0
    upstream_retry_base_delay: float = 0.5
    upstream_retry_max_delay: float = 8.0

    # Seed store settings
    seed_store_backend: Literal["memory", "file"] = "memory"
    seed_store_path: str = "./data/seeds"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
