"""
Language Server Protocol support for meggyc.

Converts type-checking results into LSP diagnostics so editor plugins can
surface semantic faults without parsing the CLI's text output.
"""

from meggyc.lsp.diagnostics import (
    get_diagnostics_for_result,
    publish_params,
    semantic_error_to_lsp,
)

__all__ = [
    "semantic_error_to_lsp",
    "get_diagnostics_for_result",
    "publish_params",
]
