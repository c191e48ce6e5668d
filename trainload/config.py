"""
Configuration management for trainload.

Settings are read from environment variables (prefix ``TRAINLOAD_``) and an
optional ``.env`` file, falling back to defaults that reproduce the
documented behaviour of the decoder, aggregator and readiness policy.
"""

from typing import Any, Dict, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load .env from the current working directory when present
load_dotenv()


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="TRAINLOAD_")

    log_level: str = Field(default="INFO")
    log_dir: Optional[str] = Field(default=None)


class DecoderSettings(BaseSettings):
    """FIT decoder configuration."""

    model_config = SettingsConfigDict(env_prefix="TRAINLOAD_DECODER_")

    verify_crc: bool = Field(default=True)
    max_warnings: int = Field(default=200, ge=1)


class AggregatorSettings(BaseSettings):
    """Activity aggregation configuration."""

    model_config = SettingsConfigDict(env_prefix="TRAINLOAD_AGGREGATOR_")

    # Gaps between records longer than this are pauses and accrue no zone time
    max_sample_gap_s: float = Field(default=60.0, gt=0)
    min_drift_minutes: float = Field(default=3.0, ge=0)
    zone_epsilon_min: float = Field(default=0.01, ge=0)
    fallback_load_per_minute: float = Field(default=1.5, ge=0)


class ReadinessSettings(BaseSettings):
    """
    Readiness scoring policy.

    The score is the weighted mean of four 0-100 components: form (from TSB),
    inverted fatigue, inverted hard-day count and recovery. Weights need not
    sum to one; they are normalized at scoring time.
    """

    model_config = SettingsConfigDict(env_prefix="TRAINLOAD_READINESS_")

    tsb_weight: float = Field(default=0.4, ge=0)
    fatigue_weight: float = Field(default=0.3, ge=0)
    hard_days_weight: float = Field(default=0.2, ge=0)
    recovery_weight: float = Field(default=0.1, ge=0)

    # Average daily load at which the fatigue component bottoms out
    fatigue_ceiling: float = Field(default=150.0, gt=0)
    hard_day_load: float = Field(default=100.0, gt=0)
    hard_day_penalty: float = Field(default=25.0, ge=0)
    default_recovery_score: float = Field(default=70.0, ge=0, le=100)
    window_days: int = Field(default=7, ge=1)
    # Days of load history and activities a service keeps; None keeps everything
    history_days: Optional[int] = Field(default=None, ge=14)

    @property
    def total_weight(self) -> float:
        return self.tsb_weight + self.fatigue_weight + self.hard_days_weight + self.recovery_weight

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return self.model_dump()


class Settings(BaseSettings):
    """Main settings combining all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="TRAINLOAD_",
        extra="ignore"
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    decoder: DecoderSettings = Field(default_factory=DecoderSettings)
    aggregator: AggregatorSettings = Field(default_factory=AggregatorSettings)
    readiness: ReadinessSettings = Field(default_factory=ReadinessSettings)


# Global settings instance
settings = Settings()


def get_decoder_settings() -> DecoderSettings:
    """Get FIT decoder configuration."""
    return settings.decoder


def get_aggregator_settings() -> AggregatorSettings:
    """Get activity aggregation configuration."""
    return settings.aggregator


def get_readiness_settings() -> ReadinessSettings:
    """Get readiness scoring configuration."""
    return settings.readiness


def get_settings() -> Settings:
    """Get complete settings."""
    return settings
