"""
Core Infrastructure Module
==========================

Shared infrastructure used by the scorecard engine.

This module provides:
- Configuration management (config/)
- Monitoring helpers (monitoring/)

Usage:
    from src.core.config import get_settings
    from src.core.monitoring import track_execution
"""

from src.core.config import ScorecardSettings, get_settings

__all__ = [
    "ScorecardSettings",
    "get_settings",
]
