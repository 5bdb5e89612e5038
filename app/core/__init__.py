"""
Core package for GoWater Dispatch.
"""
from app.core.config import settings, get_settings
from app.core.logging_config import configure_logging

__all__ = ["settings", "get_settings", "configure_logging"]
