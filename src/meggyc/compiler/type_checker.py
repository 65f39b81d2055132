"""
Type Checking Module for the MeggyJava Compiler.

This module implements the semantic pass that runs between parsing and code
generation. It:
1. Walks the AST depth-first, visiting children before their parent
2. Infers a `Type` for every expression and statement node
3. Records each inferred type in a `SymTable` so parent rules can read it
4. Raises a `SemanticError` on the first operand that breaks a typing rule

Inference looks no further than a node's immediate children, and there is no
error recovery: the first fault ends the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from meggyc.compiler.ast_nodes import (
    AndExp,
    ASTNode,
    BlockStatement,
    ButtonLiteral,
    ByteCast,
    ColorLiteral,
    DepthFirstVisitor,
    EqualExp,
    Expression,
    FalseLiteral,
    IfStatement,
    IntLiteral,
    MainClass,
    MeggyCheckButton,
    MeggyDelay,
    MeggyGetPixel,
    MeggySetPixel,
    MinusExp,
    MulExp,
    NegExp,
    NotExp,
    PlusExp,
    Program,
    TrueLiteral,
    WhileStatement,
)
from meggyc.compiler.symtable import SymTable
from meggyc.compiler.type_system import NUMERIC_TYPES, Type
from meggyc.utils.diagnostics import ErrorCode
from meggyc.utils.errors import InternalError, SemanticError

logger = logging.getLogger("meggyc")

_FRESH_SYMTABLE: Any = object()


class TypeChecker(DepthFirstVisitor):
    """
    Performs type inference and checking on a MeggyJava AST.

    Every rule runs in an exit hook (or, for literals, the single leaf hook),
    reads the already recorded types of the node's children and records the
    node's own type. A rule that blames several operands always reports the
    position of a fixed operand (the left one, or `x` for pixel calls), not the
    one that actually failed.

    Usage:
        checker = TypeChecker()
        symtable = checker.check(program)   # raises SemanticError on a fault
    """

    def __init__(self, symtable: Optional[SymTable] = _FRESH_SYMTABLE) -> None:
        """
        Initialize the checker.

        Args:
            symtable: Table to record types in, possibly pre-populated. When
                omitted a fresh table is created.

        Raises:
            InternalError: if `symtable` is explicitly None
        """
        if symtable is _FRESH_SYMTABLE:
            symtable = SymTable()
        elif symtable is None:
            raise InternalError("unexpected null argument")
        self._symtable: SymTable = symtable

    @property
    def symtable(self) -> SymTable:
        return self._symtable

    def check(self, node: ASTNode) -> SymTable:
        """
        Type check the tree rooted at `node`.

        Returns:
            The symbol table, fully populated for the tree

        Raises:
            SemanticError: on the first typing-rule violation; the table is
                then only partially populated and must not be used
        """
        self.visit(node)
        return self._symtable

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _type_of(self, node: ASTNode) -> Type:
        return self._symtable.get_exp_type(node)

    def _record(self, node: ASTNode, exp_type: Type) -> None:
        logger.debug("%s at %s: %s", type(node).__name__, node.location, exp_type)
        self._symtable.set_exp_type(node, exp_type)

    @staticmethod
    def _fault(message: str, node: ASTNode, code: str) -> SemanticError:
        return SemanticError(message, node.location, code=code)

    # -------------------------------------------------------------------------
    # Boolean expressions
    # -------------------------------------------------------------------------

    def out_and_exp(self, node: AndExp) -> None:
        if self._type_of(node.lexp) != Type.BOOL:
            raise self._fault(
                "Invalid left operand type for operator &&", node.lexp, ErrorCode.E0101
            )

        if self._type_of(node.rexp) != Type.BOOL:
            raise self._fault(
                "Invalid right operand type for operator &&", node.rexp, ErrorCode.E0101
            )

        self._record(node, Type.BOOL)

    def out_not_exp(self, node: NotExp) -> None:
        if self._type_of(node.exp) != Type.BOOL:
            raise self._fault("Invalid operand type for operator !", node.exp, ErrorCode.E0101)
        self._record(node, Type.BOOL)

    def out_equal_exp(self, node: EqualExp) -> None:
        lexp_type = self._type_of(node.lexp)
        rexp_type = self._type_of(node.rexp)
        numeric = lexp_type in NUMERIC_TYPES and rexp_type in NUMERIC_TYPES
        if not (numeric or lexp_type == rexp_type):
            raise self._fault(
                "Operands to == operator must be INT OR BYTE, or equal",
                node.lexp,
                ErrorCode.E0103,
            )
        self._record(node, Type.BOOL)

    # -------------------------------------------------------------------------
    # Integer and byte expressions
    # -------------------------------------------------------------------------

    def out_plus_exp(self, node: PlusExp) -> None:
        if (
            self._type_of(node.lexp) not in NUMERIC_TYPES
            or self._type_of(node.rexp) not in NUMERIC_TYPES
        ):
            raise self._fault(
                "Operands to + operator must be INT or BYTE", node.lexp, ErrorCode.E0102
            )
        self._record(node, Type.INT)

    def out_minus_exp(self, node: MinusExp) -> None:
        if (
            self._type_of(node.lexp) not in NUMERIC_TYPES
            or self._type_of(node.rexp) not in NUMERIC_TYPES
        ):
            raise self._fault(
                "Operands to - operator must be INT OR BYTE", node.lexp, ErrorCode.E0102
            )
        self._record(node, Type.INT)

    def out_mul_exp(self, node: MulExp) -> None:
        # no widening: INT operands are rejected even though + accepts them
        if self._type_of(node.lexp) != Type.BYTE or self._type_of(node.rexp) != Type.BYTE:
            raise self._fault("Operands to * operator must be BYTE", node.lexp, ErrorCode.E0102)
        self._record(node, Type.BYTE)

    def out_neg_exp(self, node: NegExp) -> None:
        if self._type_of(node.exp) not in NUMERIC_TYPES:
            raise self._fault(
                "Operands to - operator must be INT OR BYTE", node.exp, ErrorCode.E0102
            )
        self._record(node, Type.INT)

    def out_byte_cast(self, node: ByteCast) -> None:
        if self._type_of(node.exp) not in NUMERIC_TYPES:
            raise self._fault(
                "Operands to (byte) cast must be INT or BYTE", node.exp, ErrorCode.E0104
            )
        self._record(node, Type.BYTE)

    # -------------------------------------------------------------------------
    # Literals
    # -------------------------------------------------------------------------

    def visit_int_literal(self, node: IntLiteral) -> None:
        self._record(node, Type.INT)

    def visit_button_literal(self, node: ButtonLiteral) -> None:
        self._record(node, Type.BUTTON)

    def visit_color_literal(self, node: ColorLiteral) -> None:
        self._record(node, Type.COLOR)

    def visit_true_literal(self, node: TrueLiteral) -> None:
        self._record(node, Type.BOOL)

    def visit_false_literal(self, node: FalseLiteral) -> None:
        self._record(node, Type.BOOL)

    # -------------------------------------------------------------------------
    # Statements
    # -------------------------------------------------------------------------

    def out_block_statement(self, node: BlockStatement) -> None:
        self._record(node, Type.VOID)

    def out_if_statement(self, node: IfStatement) -> None:
        if self._type_of(node.exp) != Type.BOOL:
            raise self._fault("Param must be BOOL", node.exp, ErrorCode.E0105)
        self._record(node, Type.VOID)

    def out_while_statement(self, node: WhileStatement) -> None:
        if self._type_of(node.exp) != Type.BOOL:
            raise self._fault("Param must be BOOL", node.exp, ErrorCode.E0105)
        # BOOL, not VOID as for if
        self._record(node, Type.BOOL)

    # -------------------------------------------------------------------------
    # Device operations
    # -------------------------------------------------------------------------

    def out_meggy_set_pixel(self, node: MeggySetPixel) -> None:
        if not (
            self._type_of(node.x_exp) == Type.BYTE
            and self._type_of(node.y_exp) == Type.BYTE
            and self._type_of(node.color) == Type.COLOR
        ):
            raise self._fault(
                "values for setPixel not BYTE and COLOR", node.x_exp, ErrorCode.E0106
            )
        self._record(node, Type.VOID)

    def out_meggy_get_pixel(self, node: MeggyGetPixel) -> None:
        if self._type_of(node.x_exp) != Type.BYTE or self._type_of(node.y_exp) != Type.BYTE:
            raise self._fault("values for getPixel must be BYTE", node.x_exp, ErrorCode.E0106)
        self._record(node, Type.COLOR)

    def out_meggy_delay(self, node: MeggyDelay) -> None:
        if self._type_of(node.exp) not in NUMERIC_TYPES:
            raise self._fault(
                "values for MeggyDelay must be BYTE or INT", node.exp, ErrorCode.E0106
            )
        self._record(node, Type.VOID)

    def out_meggy_check_button(self, node: MeggyCheckButton) -> None:
        if self._type_of(node.exp) != Type.BUTTON:
            raise self._fault(
                "values for checkButton must be BUTTON", node.exp, ErrorCode.E0106
            )
        self._record(node, Type.BOOL)

    # -------------------------------------------------------------------------
    # Program structure
    # -------------------------------------------------------------------------

    def out_program(self, node: Program) -> None:
        self._record(node, Type.VOID)

    def out_main_class(self, node: MainClass) -> None:
        self._record(node, Type.VOID)


# =============================================================================
# Convenience Functions
# =============================================================================


@dataclass
class CheckResult:
    """
    Outcome of one checking run.

    Attributes:
        symtable: The table the run wrote into. Complete only when `ok`.
        error: The fault that stopped the run, if any
    """

    symtable: SymTable
    error: Optional[SemanticError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def type_of(self, node: ASTNode) -> Type:
        """Recorded type of `node`; only meaningful for a successful run."""
        return self.symtable.get_exp_type(node)


def type_check(program: ASTNode, symtable: Optional[SymTable] = None) -> CheckResult:
    """
    Type check a program and return the outcome instead of raising.

    Semantic faults become `CheckResult.error`. Internal errors still
    propagate, since they point at a compiler bug rather than the program.

    Args:
        program: The root of the tree to check
        symtable: Optional table to write into; a fresh one when omitted

    Returns:
        The check result
    """
    checker = TypeChecker() if symtable is None else TypeChecker(symtable)
    try:
        checker.check(program)
    except SemanticError as e:
        logger.debug("type check stopped at %s: %s", e.location, e.message)
        return CheckResult(checker.symtable, e)
    return CheckResult(checker.symtable)


def infer_expression_type(expr: Expression, symtable: Optional[SymTable] = None) -> Type:
    """
    Infer the type of a single expression subtree.

    Args:
        expr: The expression to infer
        symtable: Optional table to record the subtree's types in

    Returns:
        The inferred Type

    Raises:
        SemanticError: if the subtree is ill-typed
    """
    checker = TypeChecker() if symtable is None else TypeChecker(symtable)
    return checker.check(expr).get_exp_type(expr)


__all__ = [
    "TypeChecker",
    "CheckResult",
    "type_check",
    "infer_expression_type",
]
