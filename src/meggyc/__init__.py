"""
meggyc - semantic analysis for MeggyJava.

MeggyJava is a small Java subset for the Meggy Jr pixel display. This package
type checks parsed MeggyJava programs and records the type of every node for
the code generator.
"""

from meggyc.compiler import CheckResult, SymTable, Type, TypeChecker, type_check
from meggyc.compiler.ast_loader import load_program

__version__ = "0.3.0"
__all__ = [
    "type_check",
    "load_program",
    "TypeChecker",
    "SymTable",
    "Type",
    "CheckResult",
]
