"""Live activity feed for tool-invocation agent hooks."""

__version__ = "0.1.0"
