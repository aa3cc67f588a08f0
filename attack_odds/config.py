"""Application configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Console defaults loaded from environment variables.

    The calculation packages never read settings; everything here only seeds
    default command-line options and output formatting.
    """

    model_config = SettingsConfigDict(
        env_prefix="ATTACK_ODDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Attack Die
    # ==========================================================================
    die_sides: int = Field(default=20, gt=1)
    auto_miss_faces: list[int] = [1]
    auto_crit_faces: list[int] = [20]

    # Damage
    critical_dice_multiplier: int = Field(default=2, ge=1)

    # ==========================================================================
    # Output
    # ==========================================================================
    display_precision: int = Field(default=2, ge=0, le=10)  # Decimal places in percentages
    distribution_rows: int = Field(default=40, ge=1)  # Max rows in distribution tables

    # Debug
    debug: bool = False
    log_level: LogLevel = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper() if isinstance(value, str) else value

    @property
    def effective_log_level(self) -> str:
        """DEBUG when debug is on, otherwise log_level."""
        return "DEBUG" if self.debug else self.log_level


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
