"""Core building blocks shared by every Switchboard module."""

from switchboard.core.exceptions import (
    AvailabilityError,
    ConfigurationError,
    RoutingError,
    SwitchboardError,
)

__all__ = [
    "SwitchboardError",
    "ConfigurationError",
    "AvailabilityError",
    "RoutingError",
]
