"""
Configuration module with strongly typed settings.

Usage:
    from pickem.config import settings

    print(settings.api.base_url)
    print(settings.retry.max_retries)
"""
from .settings import (
    Settings,
    ApiSettings,
    RetrySettings,
    TierSettings,
    ObservabilitySettings,
)

# Singleton instance - validates on import
settings = Settings()

__all__ = [
    "settings",
    "Settings",
    "ApiSettings",
    "RetrySettings",
    "TierSettings",
    "ObservabilitySettings",
]
