"""
Scorecard Engine Configuration
==============================

Centralized, type-safe configuration using Pydantic Settings.
Values are loaded once from the environment (prefix ``SCORECARD_``)
or a ``.env`` file and validated.

Usage:
    from src.core.config import get_settings

    settings = get_settings()
    target = settings.default_target_name
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class ScorecardSettings(BaseSettings):
    """
    Engine-wide configuration.

    All settings can be overridden via environment variables,
    e.g. ``SCORECARD_LOG_EVALUATIONS=true``.
    """

    # Name of the prediction key when a model declares no target field
    default_target_name: str = "score"

    # Emit one INFO line per completed evaluation
    log_evaluations: bool = False

    # Prometheus counters/histograms for evaluations
    metrics_enabled: bool = True

    # Column holding reason codes in batch (DataFrame) results
    reason_code_column: str = "reason_codes"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SCORECARD_",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_settings() -> ScorecardSettings:
    """
    Get cached settings instance.

    Returns:
        ScorecardSettings singleton
    """
    return ScorecardSettings()
