"""Custom exceptions for ganttplan."""

from __future__ import annotations


class GanttplanError(Exception):
    """Base exception for all ganttplan errors."""

    pass


class ValidationError(GanttplanError):
    """Raised when a document or schedule fails validation.

    Carries the source position of the offending task when it is known.
    """

    def __init__(self, message: str, *, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    @property
    def position(self) -> str | None:
        """Return 'line:column' if a source position is attached."""
        if self.line is None:
            return None
        return f"{self.line}:{self.column or 1}"


class CircularDependencyError(ValidationError):
    """Raised when a circular dependency is detected."""

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
        cycle: list[str] | None = None,
    ):
        super().__init__(message, line=line, column=column)
        self.cycle = cycle or []


class UnresolvableReferenceError(ValidationError):
    """Raised when a dependency names an ID that does not exist."""

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
        target: str | None = None,
    ):
        super().__init__(message, line=line, column=column)
        self.target = target


class ParseError(GanttplanError):
    """Raised when a schedule document cannot be read."""

    pass
