"""
meggyc Compiler Package.

This package contains the semantic stage of the MeggyJava compiler:
- AST: Node definitions and depth-first visitor bases
- ASTLoader: Builds the AST from the parser's JSON output
- SymTable: Per-node table of inferred types
- TypeChecker: Type inference and checking
"""

from meggyc.compiler.ast_loader import dump_node, load_node, load_program, load_program_file
from meggyc.compiler.ast_nodes import ALL_NODE_TYPES, ASTNode, DepthFirstVisitor, Program
from meggyc.compiler.symtable import SymTable
from meggyc.compiler.type_checker import (
    CheckResult,
    TypeChecker,
    infer_expression_type,
    type_check,
)
from meggyc.compiler.type_system import Type

__all__ = [
    # AST
    "ASTNode",
    "Program",
    "DepthFirstVisitor",
    "ALL_NODE_TYPES",
    # Loading
    "load_node",
    "load_program",
    "load_program_file",
    "dump_node",
    # Type checking
    "Type",
    "SymTable",
    "TypeChecker",
    "CheckResult",
    "type_check",
    "infer_expression_type",
]
