"""Shared exceptions module.

None of these escape to the host application's triggering operation: they
are raised inside eventrelay and caught, logged and turned into no-ops at the
dispatcher, tracker and subscriber boundaries.
"""

from typing import Optional


class EventRelayException(Exception):
    """Base exception for eventrelay."""

    pass


class ConfigurationError(EventRelayException):
    """Raised when delivery is attempted without a usable configuration."""

    def __init__(self, message: Optional[str] = "Analytics delivery is not configured"):
        """Create a new ConfigurationError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class IdentityResolutionError(EventRelayException):
    """Raised when an identity strategy cannot produce an identifier."""

    def __init__(self, strategy: str, message: str = "Could not resolve identity"):
        """Create a new IdentityResolutionError instance.

        Args:
        ----
            strategy (str): The strategy that failed.
            message (str, optional): The error message. Has default message.

        """
        self.strategy = strategy
        self.message = message
        super().__init__(f"{message}: {strategy}")


class TransportError(EventRelayException):
    """Raised when a transport fails to deliver a payload."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        """Create a new TransportError instance.

        Args:
        ----
            operation (str): The operation being delivered (identify, track, page).
            cause (Exception, optional): The underlying error.

        """
        self.operation = operation
        self.cause = cause
        super().__init__(f"Transport failed during '{operation}': {cause}")


class UnsupportedOperationError(EventRelayException):
    """Raised when a transport does not implement the requested operation."""

    def __init__(self, operation: str):
        """Create a new UnsupportedOperationError instance.

        Args:
        ----
            operation (str): The operation name that is not supported.

        """
        self.operation = operation
        super().__init__(f"Unsupported analytics operation: {operation}")


class InvalidPayloadError(EventRelayException):
    """Raised when an event payload violates the user_id XOR anonymous_id rule."""

    pass
