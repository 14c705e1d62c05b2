"""Configuration for the pedometer service."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with PEDOMETER_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="PEDOMETER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Service settings
    service_name: str = "pedometer"
    host: str = "0.0.0.0"
    port: int = 8015
    log_level: str = "INFO"
    log_format: str = "json"
    environment: str = "development"

    # Step detection settings
    gravity_alpha: float = 0.8  # Low-pass smoothing factor for gravity
    step_threshold_ms2: float = 2.5  # Minimum linear acceleration for a step
    min_step_delay_ms: float = 300.0  # Debounce between steps (max cadence)
    step_length_m: float = 0.762  # Average adult stride

    # Archive settings
    archive_dir: str = "data"
    archive_key: str = "pedometer_runs"

    # Location watch settings
    location_high_accuracy: bool = True
    location_timeout_ms: int = 5000
    location_maximum_age_ms: int = 0

    # Live display
    tick_interval_seconds: float = 1.0

    @field_validator("gravity_alpha")
    @classmethod
    def _alpha_in_open_unit_interval(cls, v: float) -> float:
        if not 0.0 < v < 1.0:
            raise ValueError("gravity_alpha must be in (0, 1)")
        return v

    @field_validator("tick_interval_seconds")
    @classmethod
    def _tick_at_most_one_second(cls, v: float) -> float:
        if not 0.0 < v <= 1.0:
            raise ValueError("tick_interval_seconds must be in (0, 1]")
        return v

    @field_validator("step_threshold_ms2", "min_step_delay_ms", "step_length_m")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must be >= 0")
        return v


settings = Settings()
