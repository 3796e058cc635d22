"""
Error taxonomy for the relay.
Every client-facing failure is a RelayError carrying its HTTP status and JSON body.
"""
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(eq=False)
class RelayError(Exception):
    """Base error rendered as {"error", "message"?, "details"?}."""

    status_code: int
    error: str
    message: Optional[str] = None
    details: Any = None

    def __str__(self) -> str:
        return self.message or self.error

    def to_content(self) -> dict[str, Any]:
        content: dict[str, Any] = {"error": self.error}
        if self.message is not None:
            content["message"] = self.message
        if self.details is not None:
            content["details"] = self.details
        return content


class ConfigurationError(RelayError):
    """A provider credential is missing from the server environment."""

    def __init__(self, provider: str):
        super().__init__(
            status_code=500,
            error=f"Server configuration error: {provider} API key is missing.",
        )
        self.provider = provider


class InvalidRequestError(RelayError):
    """Malformed or missing client input."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(status_code=400, error=message, details=details)


class UnsafePromptError(RelayError):
    """Image prompt rejected by the safety pre-filter."""

    def __init__(self, message: str):
        super().__init__(status_code=400, error="unsafe_prompt", message=message)


class UpstreamProtocolError(RelayError):
    """Provider answered successfully but left out data the contract requires."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(status_code=502, error=message, details=details)


class UpstreamError(RelayError):
    """Provider returned a non-success status, or the connection failed."""

    def __init__(self, provider: str, status_code: int, details: Any, message: Optional[str] = None):
        super().__init__(
            status_code=status_code,
            error=f"Failed to communicate with {provider} API",
            message=message,
            details=details,
        )
        self.provider = provider


class ModerationUnavailable(Exception):
    """The safety pre-filter could not produce a verdict. Never sent to clients."""
