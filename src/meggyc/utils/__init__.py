"""
meggyc Utilities Package.

Common utilities for error handling, source locations, and diagnostics.
"""

from meggyc.utils.diagnostics import (
    ERROR_DESCRIPTIONS,
    Diagnostic,
    DiagnosticBuilder,
    DiagnosticLabel,
    DiagnosticLevel,
    ErrorCode,
    SourceSpan,
    create_semantic_error_diagnostic,
)
from meggyc.utils.errors import (
    ASTLoadError,
    InternalError,
    MeggyError,
    SemanticError,
    SourceLocation,
)

__all__ = [
    # Errors
    "MeggyError",
    "SemanticError",
    "ASTLoadError",
    "InternalError",
    "SourceLocation",
    # Error codes
    "ErrorCode",
    "ERROR_DESCRIPTIONS",
    # Diagnostics
    "DiagnosticLevel",
    "SourceSpan",
    "DiagnosticLabel",
    "Diagnostic",
    "DiagnosticBuilder",
    "create_semantic_error_diagnostic",
]
