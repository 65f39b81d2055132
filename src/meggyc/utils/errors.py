"""
Error types and source location tracking for the MeggyJava semantic stage.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Attributes:
        line: 1-indexed line number
        column: 1-indexed column number
        filename: Optional filename for error reporting
    """

    line: int
    column: int
    filename: Optional[str] = None

    def __str__(self) -> str:
        if self.filename:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.line}:{self.column}"


class MeggyError(Exception):
    """Base exception for all user-facing meggyc errors."""

    def __init__(self, message: str, location: Optional[SourceLocation] = None) -> None:
        self.message = message
        self.location = location
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location:
            return f"[{self.location}] {self.message}"
        return self.message


class SemanticError(MeggyError):
    """
    Raised when an operand type violates a typing rule.

    Carries the position of the operand the rule blames, which is not
    necessarily the operand that failed.
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        code: Optional[str] = None,
    ) -> None:
        self.code = code
        super().__init__(message, location)

    @property
    def line(self) -> int:
        return self.location.line if self.location else 0

    @property
    def column(self) -> int:
        return self.location.column if self.location else 0


class ASTLoadError(MeggyError):
    """Raised when a serialized AST handed over by the parser is malformed."""

    pass


class InternalError(RuntimeError):
    """
    A compiler bug or violated pipeline invariant.

    Not for mistakes in the checked program (those are SemanticError), and
    deliberately outside the MeggyError hierarchy so handlers for user errors
    never swallow it.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
