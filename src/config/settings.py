"""
Application settings loaded from environment variables.
Uses pydantic-settings for validation and type coercion.
"""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Bureau of Meteorology climate data downloads
    bom_request_timeout: float = 60.0
    bom_user_agent: str = "TemperatureCalendar/1.0 (Educational Research)"

    # Calendar graphs
    history_years: int = 30
    summer_thresholds: List[float] = [35.0, 40.0, 45.0]
    winter_thresholds: List[float] = [0.0, 2.0, 5.0]
    output_dpi: int = 120

    # Application
    log_level: str = "INFO"
    data_dir: str = "./data"

    @field_validator("summer_thresholds", "winter_thresholds")
    @classmethod
    def _three_thresholds(cls, value: List[float]) -> List[float]:
        if len(value) != 3:
            raise ValueError("exactly three thresholds are required")
        return value

    @property
    def data_path(self) -> Path:
        """Return Path object for the data directory."""
        return Path(self.data_dir)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
