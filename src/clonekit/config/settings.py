"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for the cloning
backends and the structural correlator.

Usage:
    from clonekit.config import CloningSettings, get_settings

    # Load from environment variables (CLONEKIT_*)
    settings = get_settings()

    # Or override with explicit values
    settings = CloningSettings(default_backend="reflection")
"""

from __future__ import annotations

import functools
import pickle  # nosec B403 - only the protocol constant is used here
from typing import Literal

from pydantic import Field

try:
    from pydantic_settings import BaseSettings, SettingsConfigDict
except ImportError as e:
    raise ImportError(
        "pydantic-settings is required for the config module. "
        "Install with: pip install clonekit"
    ) from e

type BackendName = Literal["reflection", "compiled", "serialization"]


class CloningSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for clonekit.

    Attributes:
        default_backend: Backend used by `clonekit.clone` when none is given.
        pickle_protocol: Pickle protocol of the serialization backend (2 or later;
            the surrogate relies on reduce tuples with a state setter).
        log_generated_source: Log the source of every compiled routine at DEBUG.
        check_assignment_types: Validate correlated values against the destination
            member's annotation before assigning them.

    Environment Variables:
        CLONEKIT_DEFAULT_BACKEND
        CLONEKIT_PICKLE_PROTOCOL
        CLONEKIT_LOG_GENERATED_SOURCE
        CLONEKIT_CHECK_ASSIGNMENT_TYPES
    """

    model_config = SettingsConfigDict(
        env_prefix="CLONEKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_backend: BackendName = "compiled"
    pickle_protocol: int = Field(default=pickle.HIGHEST_PROTOCOL, ge=2, le=pickle.HIGHEST_PROTOCOL)
    log_generated_source: bool = False
    check_assignment_types: bool = True


@functools.cache
def get_settings() -> CloningSettings:
    """Load settings once per process.

    Returns:
        Cached CloningSettings instance.
    """
    return CloningSettings()


def reset_settings() -> None:
    """Drop cached settings so the next `get_settings()` re-reads the environment."""
    get_settings.cache_clear()
