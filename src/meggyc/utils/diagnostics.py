"""
Rust-like rich error diagnostics for meggyc.

Turns a semantic fault into a diagnostic with source context and a short
explanation of the rule that was violated.

Example output:
    error[E0102]: Operands to * operator must be BYTE
      --> Blink.java:7:21
       |
     7 |         Meggy.delay(3 * 4);
       |                     ^
       |
       = help: cast both operands with '(byte)' before multiplying
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from meggyc.utils.errors import SemanticError


# =============================================================================
# Error Codes Catalog
# =============================================================================


class ErrorCode:
    """
    Centralized catalog of error codes for meggyc diagnostics.

    All codes are semantic (type) errors raised by the type checker:
    - E01xx: Type errors
    """

    E0101 = "E0101"  # invalid operand for logical operator
    E0102 = "E0102"  # invalid operand for arithmetic operator
    E0103 = "E0103"  # invalid operands for equality
    E0104 = "E0104"  # invalid cast operand
    E0105 = "E0105"  # non-boolean condition
    E0106 = "E0106"  # invalid device call argument


ERROR_DESCRIPTIONS: dict[str, str] = {
    ErrorCode.E0101: "invalid operand for logical operator",
    ErrorCode.E0102: "invalid operand for arithmetic operator",
    ErrorCode.E0103: "invalid operands for equality",
    ErrorCode.E0104: "invalid cast operand",
    ErrorCode.E0105: "non-boolean condition",
    ErrorCode.E0106: "invalid device call argument",
}

ERROR_HELP: dict[str, str] = {
    ErrorCode.E0101: "'&&' and '!' only accept boolean operands",
    ErrorCode.E0102: "cast both operands with '(byte)' before multiplying; '+' and '-' accept int or byte",
    ErrorCode.E0103: "numeric operands may be mixed; any other operands must have the same type",
    ErrorCode.E0104: "only int and byte values can be cast to byte",
    ErrorCode.E0105: "conditions of 'if' and 'while' must be boolean",
    ErrorCode.E0106: "pixel coordinates are bytes, colors use 'Meggy.Color.*' and buttons 'Meggy.Button.*'",
}


# =============================================================================
# Diagnostic Types
# =============================================================================


class DiagnosticLevel(Enum):
    """Severity level of a diagnostic message."""

    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"
    HELP = "help"

    def color_code(self) -> str:
        """Get ANSI color code for this level."""
        colors = {
            DiagnosticLevel.ERROR: "\033[91m",  # Red
            DiagnosticLevel.WARNING: "\033[93m",  # Yellow
            DiagnosticLevel.NOTE: "\033[96m",  # Cyan
            DiagnosticLevel.HELP: "\033[92m",  # Green
        }
        return colors.get(self, "")


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """
    A span of source code, representing a range of characters.

    Attributes:
        start_line: 1-indexed starting line number
        start_col: 1-indexed starting column number
        end_line: 1-indexed ending line number
        end_col: 1-indexed ending column number (exclusive)
        filename: Optional filename for display
    """

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    filename: str = "<input>"

    @classmethod
    def from_location(
        cls, line: int, col: int, length: int = 1, filename: str = "<input>"
    ) -> "SourceSpan":
        """Create a span from a single location with a given length."""
        return cls(
            start_line=line,
            start_col=col,
            end_line=line,
            end_col=col + length,
            filename=filename,
        )

    def __str__(self) -> str:
        return f"{self.filename}:{self.start_line}:{self.start_col}"

    @property
    def is_multiline(self) -> bool:
        """Check if this span covers multiple lines."""
        return self.start_line != self.end_line

    @property
    def length(self) -> int:
        """Get the length of the span on a single line."""
        if self.is_multiline:
            return 1
        return max(1, self.end_col - self.start_col)


@dataclass(slots=True)
class DiagnosticLabel:
    """
    A label pointing to a specific span of source code.

    Attributes:
        span: The source span this label points to
        message: Optional message to display with the label
        is_primary: Whether this is the primary label (shown with ^^^)
    """

    span: SourceSpan
    message: str = ""
    is_primary: bool = True


@dataclass
class Diagnostic:
    """
    A rich diagnostic message with source context.

    Attributes:
        code: Error code (e.g., "E0102")
        level: Severity level (ERROR, WARNING, NOTE, HELP)
        message: The main diagnostic message
        labels: List of source code labels
        notes: Additional notes to display
        helps: Help messages
    """

    code: str
    level: DiagnosticLevel
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    helps: list[str] = field(default_factory=list)

    @property
    def primary_span(self) -> Optional[SourceSpan]:
        if not self.labels:
            return None
        return next((l for l in self.labels if l.is_primary), self.labels[0]).span

    def render(self, source_code: str = "", use_color: bool = True) -> str:
        """
        Render this diagnostic as a formatted string.

        Args:
            source_code: The original source code for context; may be empty
            use_color: Whether to use ANSI color codes

        Returns:
            A formatted multi-line string representation
        """
        lines: list[str] = []
        source_lines = source_code.splitlines()

        reset = "\033[0m" if use_color else ""
        bold = "\033[1m" if use_color else ""
        level_color = self.level.color_code() if use_color else ""
        blue = "\033[94m" if use_color else ""
        green = "\033[92m" if use_color else ""

        level_str = self.level.value
        if self.code in ERROR_DESCRIPTIONS:
            header = (
                f"{level_color}{bold}{level_str}[{self.code}]{reset}: {bold}{self.message}{reset}"
            )
        else:
            header = f"{level_color}{bold}{level_str}{reset}: {bold}{self.message}{reset}"
        lines.append(header)

        span = self.primary_span
        if span is not None:
            lines.append(f"  {blue}-->{reset} {span}")

        if self.labels and source_lines:
            lines.append(f"   {blue}|{reset}")

            labels_by_line: dict[int, list[DiagnosticLabel]] = {}
            for label in self.labels:
                labels_by_line.setdefault(label.span.start_line, []).append(label)

            for line_num in sorted(labels_by_line.keys()):
                if 1 <= line_num <= len(source_lines):
                    source_line = source_lines[line_num - 1]
                    lines.append(f"{blue}{line_num:3} |{reset} {source_line}")

                    for label in labels_by_line[line_num]:
                        underline_char = "^" if label.is_primary else "-"
                        underline_color = level_color if label.is_primary else blue

                        padding = " " * (label.span.start_col - 1)
                        underline = underline_char * label.span.length

                        underline_line = (
                            f"   {blue}|{reset} {padding}{underline_color}{underline}{reset}"
                        )
                        if label.message:
                            underline_line += f" {underline_color}{label.message}{reset}"
                        lines.append(underline_line)

            lines.append(f"   {blue}|{reset}")

        for note in self.notes:
            lines.append(f"   {blue}={reset} {bold}note:{reset} {note}")

        for help_msg in self.helps:
            lines.append(f"   {blue}={reset} {green}help:{reset} {help_msg}")

        return "\n".join(lines)

    def to_simple_message(self) -> str:
        """Get a simple one-line error message for compatibility."""
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form used by the CLI's JSON output."""
        span = self.primary_span
        return {
            "code": self.code,
            "level": self.level.value,
            "message": self.message,
            "line": span.start_line if span else None,
            "column": span.start_col if span else None,
            "notes": list(self.notes),
            "helps": list(self.helps),
        }


# =============================================================================
# Diagnostic Builder (Fluent API)
# =============================================================================


class DiagnosticBuilder:
    """
    Fluent builder for constructing Diagnostic objects.

        DiagnosticBuilder(ErrorCode.E0105, DiagnosticLevel.ERROR, "Param must be BOOL", span)
            .help("conditions of 'if' and 'while' must be boolean")
            .build()
    """

    def __init__(
        self,
        code: str,
        level: DiagnosticLevel,
        message: str,
        primary_span: Optional[SourceSpan] = None,
    ) -> None:
        self._code = code
        self._level = level
        self._message = message
        self._labels: list[DiagnosticLabel] = []
        self._notes: list[str] = []
        self._helps: list[str] = []

        if primary_span:
            self._labels.append(DiagnosticLabel(primary_span, "", True))

    def primary_label(self, span: SourceSpan, message: str = "") -> "DiagnosticBuilder":
        """Add a primary label (replaces any existing primary)."""
        self._labels = [l for l in self._labels if not l.is_primary]
        self._labels.insert(0, DiagnosticLabel(span, message, True))
        return self

    def note(self, message: str) -> "DiagnosticBuilder":
        """Add a note."""
        self._notes.append(message)
        return self

    def help(self, message: str) -> "DiagnosticBuilder":
        """Add a help message."""
        self._helps.append(message)
        return self

    def build(self) -> Diagnostic:
        """Build the diagnostic."""
        return Diagnostic(
            code=self._code,
            level=self._level,
            message=self._message,
            labels=self._labels,
            notes=self._notes,
            helps=self._helps,
        )


# =============================================================================
# Helper Functions for Common Diagnostics
# =============================================================================


def create_semantic_error_diagnostic(
    error: SemanticError,
    filename: str = "<input>",
) -> Diagnostic:
    """
    Create a diagnostic for a semantic fault raised by the type checker.

    Args:
        error: The fault to describe
        filename: Filename shown in the location line

    Returns:
        The created diagnostic
    """
    code = error.code or ""
    builder = DiagnosticBuilder(code, DiagnosticLevel.ERROR, error.message)

    if error.location is not None:
        span = SourceSpan.from_location(
            error.location.line,
            error.location.column,
            filename=error.location.filename or filename,
        )
        builder.primary_label(span)

    help_msg = ERROR_HELP.get(code)
    if help_msg:
        builder.help(help_msg)

    return builder.build()
