"""Configuration management using Pydantic Settings"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "budget-engine"
    log_level: str = "INFO"

    # Budget cycle
    default_cycle_start_day: int = Field(default=1, ge=1, le=28)

    # Income: unknown income types fall back to "exempt" unless strict
    strict_income_types: bool = False

    # Grocery alert thresholds (percent of budget used)
    grocery_warning_percent: float = 70.0
    grocery_danger_percent: float = 90.0


settings = Settings()
