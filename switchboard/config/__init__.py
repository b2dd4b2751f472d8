"""Configuration module for Switchboard.

Usage:
    from switchboard.config import get_settings

    settings = get_settings()
    print(settings.default_region)
"""

from switchboard.config.settings import (
    # Main settings class
    SwitchboardSettings,
    # Nested settings classes
    ClassifierSettings,
    AmbiguitySettings,
    ComplexitySettings,
    RoutingSettings,
    # Singleton functions
    get_settings,
    reload_settings,
    clear_settings_cache,
    # Constants
    DEFAULT_REGION,
    DEFAULT_NUDGE_PRIORITY,
)

__all__ = [
    "SwitchboardSettings",
    "ClassifierSettings",
    "AmbiguitySettings",
    "ComplexitySettings",
    "RoutingSettings",
    "get_settings",
    "reload_settings",
    "clear_settings_cache",
    "DEFAULT_REGION",
    "DEFAULT_NUDGE_PRIORITY",
]
