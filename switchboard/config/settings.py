"""Pydantic settings for the Switchboard routing engine.

This module defines the SwitchboardSettings class that loads configuration
from environment variables and .env files. It uses pydantic-settings for
automatic environment variable parsing and validation.

Settings Categories:
    - Core: Engine-level settings (debug mode, log level, environment)
    - Routing defaults: Default region and plan, intent set, nudge order
    - Classifier: Fast-path and length thresholds for intent scoring
    - Ambiguity: Score thresholds for the ambiguity levels
    - Complexity: Word-count limits for the complexity levels
    - Routing: Chain ratio, intent lock threshold, history window

Environment Variables:
    SWITCHBOARD_DEBUG: Enable debug mode (default: false)
    SWITCHBOARD_LOG_LEVEL: Logging level (default: INFO)
    SWITCHBOARD_DEFAULT_REGION: Region used when none is given (default: INTL)
    SWITCHBOARD_DEFAULT_PLAN: Plan used when none is given (default: unset)
    SWITCHBOARD_INTENT_SET: "extended" (7 intents) or "compact" (5 intents)
    SWITCHBOARD_AVAILABILITY_PATH: JSON availability table to load
    SWITCHBOARD_ROUTING__CREATIVE_CHAIN_RATIO: Share of creative chains (0-100)

Usage:
    from switchboard.config.settings import get_settings

    settings = get_settings()
    print(settings.default_region)
    print(settings.routing.creative_chain_ratio)
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from switchboard.schemas import NudgeType


# =============================================================================
# Default Constants
# =============================================================================

DEFAULT_REGION = "INTL"
"""Region used when neither the call nor the session names one."""

DEFAULT_NUDGE_PRIORITY = [NudgeType.DECIDE, NudgeType.SIMPLIFY, NudgeType.ACTION]
"""Order in which nudge pattern sets are tried; first match wins.

SIMPLIFY comes before ACTION here, unlike the DECIDE, ACTION, SIMPLIFY order
of the earlier classifier, so a confused "how do I start?" gets a simpler
explanation rather than next steps. Types left out of a configured list are
never offered.
"""

VALID_INTENT_SETS = {"extended", "compact"}


# =============================================================================
# Nested Settings Models
# =============================================================================


class ClassifierSettings(BaseModel):
    """Settings for the intent classifier.

    Attributes:
        quick_max_length: Messages shorter than this with no depth term are QUICK.
        analytical_min_length: Messages longer than this get an ANALYTICAL bonus.
        quick_confidence: Confidence reported by the fast path.
        fallback_confidence: Confidence reported when no rule wins.
        synthesis_min_score: Cross-domain score needed for the synthesis signal.
    """

    quick_max_length: int = Field(
        default=80,
        ge=0,
        description="Fast-path length limit in characters"
    )
    analytical_min_length: int = Field(
        default=150,
        ge=0,
        description="Length above which ANALYTICAL gets enough points to win on its own"
    )
    quick_confidence: int = Field(
        default=90,
        ge=0,
        le=100,
        description="Confidence for fast-path QUICK results"
    )
    fallback_confidence: int = Field(
        default=70,
        ge=0,
        le=100,
        description="Confidence for fallback QUICK results"
    )
    synthesis_min_score: int = Field(
        default=3,
        ge=1,
        description="Cross-domain score that marks a request as multi-domain"
    )


class AmbiguitySettings(BaseModel):
    """Score thresholds for ambiguity levels.

    Attributes:
        high_threshold: Score at or above which ambiguity is HIGH.
        medium_threshold: Score at or above which ambiguity is MEDIUM.
        low_threshold: Score at or above which ambiguity is LOW.
    """

    high_threshold: float = Field(default=0.7, ge=0.0, description="HIGH threshold")
    medium_threshold: float = Field(default=0.4, ge=0.0, description="MEDIUM threshold")
    low_threshold: float = Field(default=0.2, ge=0.0, description="LOW threshold")

    @model_validator(mode="after")
    def validate_ordering(self) -> "AmbiguitySettings":
        """Thresholds must be ordered low <= medium <= high."""
        if not self.low_threshold <= self.medium_threshold <= self.high_threshold:
            raise ValueError(
                "Ambiguity thresholds must satisfy low <= medium <= high, got "
                f"{self.low_threshold} / {self.medium_threshold} / {self.high_threshold}"
            )
        return self


class ComplexitySettings(BaseModel):
    """Word-count limits used by the complexity analyzer.

    Attributes:
        short_word_limit: Messages with at most this many words are "short".
        long_word_limit: Messages with more than this many words are COMPLEX.
    """

    short_word_limit: int = Field(default=8, ge=0, description="Short message word limit")
    long_word_limit: int = Field(default=24, ge=1, description="Long message word limit")

    @model_validator(mode="after")
    def validate_limits(self) -> "ComplexitySettings":
        if self.short_word_limit >= self.long_word_limit:
            raise ValueError(
                f"short_word_limit ({self.short_word_limit}) must be below "
                f"long_word_limit ({self.long_word_limit})"
            )
        return self


class RoutingSettings(BaseModel):
    """Settings for the routing decision builder.

    Attributes:
        creative_chain_ratio: Percentage (by seed) of CREATIVE requests that
            become an ideate/validate chain.
        lock_confidence_threshold: Confidence needed to lock an intent.
        max_history_turns: How many trailing history turns are considered.
        topic_history_turns: How many trailing turns feed topic detection.
    """

    creative_chain_ratio: int = Field(
        default=30,
        ge=0,
        le=100,
        description="Seed values below this produce a creative chain"
    )
    lock_confidence_threshold: int = Field(
        default=70,
        ge=0,
        le=100,
        description="Confidence at which SessionContext.advance locks an intent"
    )
    max_history_turns: int = Field(
        default=5,
        ge=0,
        description="Trailing history turns passed to the analyzers"
    )
    topic_history_turns: int = Field(
        default=3,
        ge=0,
        description="Trailing history turns used for topic detection"
    )


# =============================================================================
# Main Settings Class
# =============================================================================


class SwitchboardSettings(BaseSettings):
    """Main settings class for Switchboard configuration.

    Settings are loaded from ``SWITCHBOARD_``-prefixed environment variables
    and an optional .env file. Nested groups use ``__`` as the delimiter, so
    ``SWITCHBOARD_ROUTING__CREATIVE_CHAIN_RATIO=50`` sets
    ``settings.routing.creative_chain_ratio``.

    Example usage:
        ```python
        from switchboard.config.settings import get_settings

        settings = get_settings()
        print(settings.intent_set)
        print(settings.classifier.quick_max_length)
        ```

    Attributes:
        debug: Enable debug mode for verbose logging.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        environment: Deployment environment (development, staging, production, test).
        default_region: Region used when none is supplied.
        default_plan: Plan used when none is supplied (None = unrestricted).
        intent_set: "extended" for 7 intents or "compact" for 5.
        availability_path: Optional JSON file replacing the built-in table.
        nudge_priority: Order in which nudge patterns are tried. Types left
            out are disabled; an empty list turns nudges off.
        classifier: Intent classifier configuration.
        ambiguity: Ambiguity analyzer configuration.
        complexity: Complexity analyzer configuration.
        routing: Routing decision configuration.
    """

    model_config = SettingsConfigDict(
        env_prefix="SWITCHBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    # Core settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    environment: str = Field(
        default="development",
        description="Deployment environment"
    )

    # Routing defaults
    default_region: str = Field(
        default=DEFAULT_REGION,
        description="Region used when none is supplied"
    )
    default_plan: Optional[str] = Field(
        default=None,
        description="Plan used when none is supplied"
    )
    intent_set: str = Field(
        default="extended",
        description="'extended' (7 intents) or 'compact' (5 intents)"
    )
    availability_path: Optional[Path] = Field(
        default=None,
        description="JSON availability table overriding the built-in one"
    )
    nudge_priority: Annotated[list[NudgeType], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_NUDGE_PRIORITY),
        description="Nudge evaluation order, first match wins; omitted types are disabled"
    )

    # Nested configuration groups
    classifier: ClassifierSettings = Field(
        default_factory=ClassifierSettings,
        description="Classifier configuration"
    )
    ambiguity: AmbiguitySettings = Field(
        default_factory=AmbiguitySettings,
        description="Ambiguity configuration"
    )
    complexity: ComplexitySettings = Field(
        default_factory=ComplexitySettings,
        description="Complexity configuration"
    )
    routing: RoutingSettings = Field(
        default_factory=RoutingSettings,
        description="Routing configuration"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        normalized = v.upper()
        if normalized not in valid_levels:
            raise ValueError(
                f"Invalid log level '{v}'. Must be one of: {', '.join(sorted(valid_levels))}"
            )
        return normalized

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate and normalize environment."""
        valid_envs = {"development", "staging", "production", "test"}
        normalized = v.lower()
        if normalized not in valid_envs:
            raise ValueError(
                f"Invalid environment '{v}'. Must be one of: {', '.join(sorted(valid_envs))}"
            )
        return normalized

    @field_validator("default_region")
    @classmethod
    def normalize_region(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("default_plan")
    @classmethod
    def normalize_plan(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        normalized = v.strip().lower()
        return normalized or None

    @field_validator("intent_set")
    @classmethod
    def validate_intent_set(cls, v: str) -> str:
        """Validate the intent set name."""
        normalized = v.strip().lower()
        if normalized not in VALID_INTENT_SETS:
            raise ValueError(
                f"Invalid intent set '{v}'. Must be one of: {', '.join(sorted(VALID_INTENT_SETS))}"
            )
        return normalized

    @field_validator("nudge_priority", mode="before")
    @classmethod
    def parse_nudge_priority(cls, v: Any) -> Any:
        """Accept a comma separated string such as ``"ACTION,DECIDE"``."""
        if isinstance(v, str):
            return [part.strip().upper() for part in v.split(",") if part.strip()]
        return v

    @field_validator("nudge_priority")
    @classmethod
    def validate_nudge_priority(cls, v: list[NudgeType]) -> list[NudgeType]:
        """Reject duplicates. Types left out of the list are never detected."""
        if len(set(v)) != len(v):
            raise ValueError(f"nudge_priority contains duplicates: {[n.value for n in v]}")
        return v

    @property
    def compact_intents(self) -> bool:
        return self.intent_set == "compact"

    def to_dict(self) -> dict[str, Any]:
        """Export settings as a JSON-friendly dictionary."""
        return self.model_dump(mode="json")


# =============================================================================
# Singleton Pattern
# =============================================================================

# Global settings instance cache
_settings_instance: Optional[SwitchboardSettings] = None


def get_settings() -> SwitchboardSettings:
    """Get the cached settings instance.

    The settings are created once and cached for subsequent calls to avoid
    repeated .env parsing and validation.

    Returns:
        The cached SwitchboardSettings instance.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = SwitchboardSettings()
    return _settings_instance


def reload_settings(env_file: Optional[Union[str, Path]] = None) -> SwitchboardSettings:
    """Reload settings from the environment, clearing the cache.

    Args:
        env_file: Optional extra .env file whose variables are loaded into
            the process environment first. Existing variables win.

    Returns:
        A fresh SwitchboardSettings instance.

    Example:
        ```python
        import os
        os.environ["SWITCHBOARD_INTENT_SET"] = "compact"
        settings = reload_settings()
        assert settings.intent_set == "compact"
        ```
    """
    global _settings_instance
    if env_file is not None:
        load_dotenv(env_file, override=False)
    _settings_instance = SwitchboardSettings()
    return _settings_instance


def clear_settings_cache() -> None:
    """Clear the settings cache without creating a new instance."""
    global _settings_instance
    _settings_instance = None


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
