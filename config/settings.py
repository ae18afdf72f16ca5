"""Application settings loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration from environment variables."""

    fiscal_year: str = "2025-26"
    log_level: str = "INFO"

    # Income domain for the sensitivity table
    sensitivity_income_min: int = 40000
    sensitivity_income_max: int = 600000
    sensitivity_increment: int = 5000
    condensed_context_rows: int = 4  # rows either side of the user's income
    max_sensitivity_rows: int = 1000

    # Hours in a working day, used for the back-to-work effective hourly rate
    work_hours_per_day: int = 8

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
