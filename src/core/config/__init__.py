"""
Core Configuration Module
=========================

Centralized, type-safe configuration using Pydantic Settings.

Usage:
    from src.core.config import get_settings

    settings = get_settings()
    if settings.log_evaluations:
        ...
"""

from src.core.config.settings import ScorecardSettings, get_settings

__all__ = [
    "ScorecardSettings",
    "get_settings",
]
