"""
Scorecard Engine - Source Package
=================================

This package contains all source code for the engine:
- scorecard: model, scanner, evaluator, reason codes
- core: Shared utilities (configuration, monitoring)

Quick Imports:
    from src.scorecard import build_scorecard, create_evaluator
    from src.core.config import get_settings
"""

# Lazy imports - only import when accessed to avoid triggering
# unnecessary dependencies during test collection
__all__ = ["scorecard", "core"]


def __getattr__(name):
    """Lazy module loading to avoid import side effects."""
    if name == "scorecard":
        from src import scorecard
        return scorecard
    elif name == "core":
        from src import core
        return core
    raise AttributeError(f"module 'src' has no attribute {name!r}")
