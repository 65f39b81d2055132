"""
Diagnostic generation for editor integrations.

This module converts semantic faults from the type checker into
LSP-compatible diagnostic messages for display in editors.
"""

from typing import Any

from lsprotocol import converters, types

from meggyc.compiler.type_checker import CheckResult
from meggyc.utils.errors import SemanticError

SOURCE_NAME = "meggyc"


def semantic_error_to_lsp(error: SemanticError) -> types.Diagnostic:
    """
    Convert a semantic fault into an LSP diagnostic.

    LSP positions are 0-indexed; the fault's 1-indexed line and column are
    shifted accordingly. The range covers a single character since the checker
    only knows where the blamed operand starts.

    Args:
        error: The fault raised by the type checker

    Returns:
        The LSP diagnostic
    """
    line = 0
    character = 0

    if error.location:
        line = max(0, error.location.line - 1)
        character = max(0, error.location.column - 1)

    return types.Diagnostic(
        range=types.Range(
            start=types.Position(line=line, character=character),
            end=types.Position(line=line, character=character + 1),
        ),
        message=error.message,
        severity=types.DiagnosticSeverity.Error,
        source=SOURCE_NAME,
        code=error.code,
    )


def get_diagnostics_for_result(result: CheckResult) -> list[types.Diagnostic]:
    """
    Diagnostics for one checking run.

    A run stops at its first fault, so the list is empty or holds one entry.
    """
    if result.error is None:
        return []
    return [semantic_error_to_lsp(result.error)]


def publish_params(uri: str, result: CheckResult) -> types.PublishDiagnosticsParams:
    """Build the `textDocument/publishDiagnostics` payload for a document."""
    return types.PublishDiagnosticsParams(
        uri=uri,
        diagnostics=get_diagnostics_for_result(result),
    )


def to_json(value: Any) -> Any:
    """Unstructure an lsprotocol object into JSON-compatible data."""
    return converters.get_converter().unstructure(value)
