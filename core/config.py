"""Application configuration using Pydantic settings."""
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    supabase_url: Optional[str] = Field(default=None, validation_alias="SUPABASE_URL")
    supabase_key: Optional[str] = Field(default=None, validation_alias="SUPABASE_ANON_KEY")
    supabase_timeout: float = Field(default=10.0, validation_alias="SUPABASE_TIMEOUT")
    estimator_url: Optional[str] = Field(default=None, validation_alias="COST_ESTIMATOR_URL")
    estimator_timeout: float = Field(default=15.0, validation_alias="COST_ESTIMATOR_TIMEOUT")
    projects_table: str = Field(default="projects", validation_alias="PROJECTS_TABLE")
    cost_breakdowns_table: str = Field(
        default="cost_breakdowns", validation_alias="COST_BREAKDOWNS_TABLE"
    )


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
