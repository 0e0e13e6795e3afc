"""Centralised engine settings loaded from environment / .env file."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Feature flags
    round_trips_enabled: bool = True
    recurring_enabled: bool = True

    # Display
    currency: str = "USD"

    # Errand cost reconciliation
    cost_tolerance: float = 0.01  # max aggregate drift, in currency units

    # Round-trip scheduling
    default_leg_duration_minutes: int = 30
    return_wait_minutes: int = 30

    model_config = {"env_file": ".env", "env_prefix": "RIDEMETER_", "extra": "ignore"}


settings = Settings()
