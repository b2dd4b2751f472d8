"""Custom exceptions for the Switchboard routing engine.

The classification and routing pipeline itself is total: it degrades to the
cheapest intent or backend instead of raising. Exceptions therefore only
surface at configuration time, when settings or availability tables are
loaded, validated or reloaded.

Exception Hierarchy:
    SwitchboardError (base)
    ├── ConfigurationError: Invalid configuration or settings
    │   └── AvailabilityError: Structurally invalid availability table
    └── RoutingError: Router misuse (invalid arguments from the caller)

Features:
    - Error codes for programmatic handling
    - Context information included in each exception type
    - Structured logging support via to_log_dict method
"""

from typing import Any, Optional


class SwitchboardError(Exception):
    """Base exception for all Switchboard errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        context: Additional context information about the error
        recoverable: Whether the error is potentially recoverable
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "SWITCHBOARD_ERROR"
        self.context = context or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_log_dict(self) -> dict[str, Any]:
        """Return structured dict for logging.

        Returns:
            Dictionary with error details suitable for structured logging
        """
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.code,
            "message": self.message,
            "recoverable": self.recoverable,
            "context": self.context,
        }


class ConfigurationError(SwitchboardError):
    """Raised when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that caused the error
        validation_details: Details about why validation failed
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        validation_details: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.pop("context", {}) or {}
        if config_key:
            context["config_key"] = config_key
        if validation_details:
            context["validation_details"] = validation_details
        code = kwargs.pop("code", "CONFIG_ERROR")
        super().__init__(message, code=code, context=context, **kwargs)
        self.config_key = config_key
        self.validation_details = validation_details


class AvailabilityError(ConfigurationError):
    """Raised when a region/plan availability table cannot be used.

    Attributes:
        source: Where the table came from (file path or "<inline>").
        unknown_backends: Backend identifiers referenced but not declared.
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        unknown_backends: Optional[list[str]] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.pop("context", {}) or {}
        if source:
            context["source"] = source
        if unknown_backends:
            context["unknown_backends"] = sorted(unknown_backends)
        super().__init__(message, code="AVAILABILITY_ERROR", context=context, **kwargs)
        self.source = source
        self.unknown_backends = unknown_backends or []


class RoutingError(SwitchboardError):
    """Raised when the router is called with arguments it cannot accept.

    Never raised for message content; only for programming errors such as
    passing a session object of the wrong type.

    Attributes:
        argument: Name of the offending argument.
    """

    def __init__(self, message: str, argument: Optional[str] = None, **kwargs: Any) -> None:
        context = kwargs.pop("context", {}) or {}
        if argument:
            context["argument"] = argument
        super().__init__(message, code="ROUTING_ERROR", context=context, **kwargs)
        self.argument = argument


__all__ = [
    "SwitchboardError",
    "ConfigurationError",
    "AvailabilityError",
    "RoutingError",
]
