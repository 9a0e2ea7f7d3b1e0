"""
Exception classes for the hypergraph core.

All exceptions carry a human-readable message plus JSON-serializable
context so the wire layer can translate them into transport responses
without inspecting internals.
"""

from typing import Any, Dict


class HyperGraphError(Exception):
    """Base exception for all hypergraph errors."""

    def __init__(self, message: str, **context):
        """
        Initialize error with message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context for debugging (must be JSON-serializable)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to JSON-serializable dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context
        }


class NotFoundError(HyperGraphError):
    """Record not found for an operation that requires it (update)."""
    pass


class ValidationError(HyperGraphError):
    """Invalid data (unknown enum value, duplicate ids in a hypergraph, etc.)."""
    pass


class CorruptionError(HyperGraphError):
    """Stored data failed integrity checks (checksum mismatch)."""
    pass


class MalformedContentError(HyperGraphError):
    """Projection content is not valid JSON."""
    pass
