"""agentviz exception hierarchy.

All agentviz-specific exceptions inherit from AgentVizError,
so callers at the process boundary can catch one type.
"""


class AgentVizError(Exception):
    """Base exception for all agentviz errors."""

    def __init__(self, message: str = "", *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class MalformedEventError(AgentVizError):
    """Ingested payload is not a valid event record."""


class NormalizationError(AgentVizError):
    """Raw hook notification could not be turned into an event record."""


class DeliveryError(AgentVizError):
    """Error pushing an event to the server or to a subscriber."""

    def __init__(self, message: str = "", *, retryable: bool = True) -> None:
        super().__init__(message, retryable=retryable)


class AssetReadError(AgentVizError):
    """A static asset exists but could not be read."""


class ConfigError(AgentVizError, ValueError):
    """Invalid or missing configuration."""
