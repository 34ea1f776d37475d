"""Application settings loaded from the environment."""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the academic records service"""

    model_config = SettingsConfigDict(
        env_prefix="ACADEMIC_RECORDS_",
        env_file=".env",
        extra="ignore",
    )

    database_url: str = Field("sqlite:///academic_records.db", description="SQLAlchemy URL of the record store")
    log_level: str = Field("INFO", description="Root logging level")
    log_file: Optional[str] = Field("api.log", description="Log file path, empty to disable")
    enforce_unique_keys: bool = Field(False, description="Reject duplicate studentId / subject code")

    gemini_api_key: Optional[str] = Field(None, description="API key for the analysis service")
    gemini_model: str = Field("gemini-2.5-flash")
    gemini_endpoint: str = Field("https://generativelanguage.googleapis.com/v1beta")
    analysis_timeout: float = Field(30.0, gt=0)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
