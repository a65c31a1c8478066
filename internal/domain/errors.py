"""
Domain errors.

AppError is the structured error carried by failed Results for expected
conditions (validation, not found). The DomainError exception hierarchy is
kept for faults that are raised instead: infrastructure and programming
errors.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """
    Error taxonomy shared by the core and the transport.

    CONFLICT, UNAUTHORIZED and INTERNAL are reserved: the core never
    produces them, but the transport maps each to its own status.
    """
    VALIDATION = "VALIDATION"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    INTERNAL = "INTERNAL"


@dataclass(frozen=True)
class AppError:
    """
    Structured error carried by a failed Result.

    Attributes:
        code: Error category.
        message: Human-readable description.
        details: Optional extra context.
    """
    code: ErrorCode
    message: str
    details: Optional[Any] = None

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }

    @classmethod
    def validation(cls, message: str = "Validation error", details: Any = None) -> "AppError":
        return cls(ErrorCode.VALIDATION, message, details)

    @classmethod
    def not_found(cls, message: str = "Not found") -> "AppError":
        return cls(ErrorCode.NOT_FOUND, message)


class DomainError(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize domain error.

        Args:
            message: Error message describing the issue.
        """
        self.message = message
        super().__init__(self.message)


class EventPublishError(DomainError):
    """Exception raised when event publishing fails."""

    def __init__(self, event_type: str, reason: str) -> None:
        """
        Initialize event publish error.

        Args:
            event_type: Type of event that failed to publish.
            reason: The reason for the failure.
        """
        super().__init__(f"Failed to publish event '{event_type}': {reason}")
        self.event_type = event_type
        self.reason = reason
