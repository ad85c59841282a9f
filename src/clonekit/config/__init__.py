"""Configuration module using Pydantic Settings.

Provides typed configuration for the cloning backends with environment variable
support.

Usage:
    from clonekit.config import CloningSettings, get_settings

    settings = get_settings()
    custom = CloningSettings(default_backend="serialization")
"""

from clonekit.config.settings import BackendName, CloningSettings, get_settings, reset_settings

__all__ = [
    "BackendName",
    "CloningSettings",
    "get_settings",
    "reset_settings",
]
