"""
Abstract Syntax Tree (AST) node definitions for MeggyJava.

This module defines the closed set of node kinds handed to the semantic stage
by the parser. Each node is immutable and carries source location information
for error reporting. Nodes compare and hash by identity, so structurally equal
subtrees (two `1` literals, say) remain distinct keys in a type table.

It also defines the traversal bases: `ASTVisitor` dispatches on node kind and
`DepthFirstVisitor` walks children left to right with an entry hook before and
an exit hook after them.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Optional

from meggyc.utils.errors import SourceLocation

logger = logging.getLogger("meggyc")


class ASTNode(ABC):
    """Base class for all AST nodes."""

    location: Optional[SourceLocation]

    @abstractmethod
    def accept(self, visitor: "ASTVisitor") -> Any:
        """Accept a visitor for tree traversal."""
        pass

    def children(self) -> tuple["ASTNode", ...]:
        """Direct children in grammar (traversal) order."""
        return ()

    @property
    def line(self) -> Optional[int]:
        return self.location.line if self.location else None

    @property
    def column(self) -> Optional[int]:
        return self.location.column if self.location else None


class ASTVisitor(ABC):
    """
    Visitor pattern base class for AST traversal.

    Implement this to create custom AST processors (type checkers,
    code generators, printers, etc.).
    """

    def visit(self, node: ASTNode) -> Any:
        """Dispatch to the appropriate visit method."""
        return node.accept(self)


# -----------------------------------------------------------------------------
# Expressions
# -----------------------------------------------------------------------------


class Expression(ASTNode):
    """Base class for all expressions."""

    pass


@dataclass(frozen=True, slots=True, eq=False)
class AndExp(Expression):
    """
    Logical conjunction.

    Example:
        a && b
    """

    lexp: Expression
    rexp: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_and_exp(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.lexp, self.rexp)


@dataclass(frozen=True, slots=True, eq=False)
class NotExp(Expression):
    """Logical negation, `!flag`."""

    exp: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_not_exp(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.exp,)


@dataclass(frozen=True, slots=True, eq=False)
class PlusExp(Expression):
    """Addition, `a + b`."""

    lexp: Expression
    rexp: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_plus_exp(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.lexp, self.rexp)


@dataclass(frozen=True, slots=True, eq=False)
class MinusExp(Expression):
    """Subtraction, `a - b`."""

    lexp: Expression
    rexp: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_minus_exp(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.lexp, self.rexp)


@dataclass(frozen=True, slots=True, eq=False)
class MulExp(Expression):
    """Multiplication, `a * b`."""

    lexp: Expression
    rexp: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_mul_exp(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.lexp, self.rexp)


@dataclass(frozen=True, slots=True, eq=False)
class EqualExp(Expression):
    """Equality test, `a == b`."""

    lexp: Expression
    rexp: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_equal_exp(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.lexp, self.rexp)


@dataclass(frozen=True, slots=True, eq=False)
class NegExp(Expression):
    """Arithmetic negation, `-x`."""

    exp: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_neg_exp(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.exp,)


@dataclass(frozen=True, slots=True, eq=False)
class ByteCast(Expression):
    """
    Explicit narrowing conversion.

    Example:
        (byte)(x + 1)
    """

    exp: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_byte_cast(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.exp,)


@dataclass(frozen=True, slots=True, eq=False)
class MeggyGetPixel(Expression):
    """
    Read the color of a display pixel.

    Example:
        Meggy.getPixel((byte)3, (byte)4)
    """

    x_exp: Expression
    y_exp: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_meggy_get_pixel(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.x_exp, self.y_exp)


@dataclass(frozen=True, slots=True, eq=False)
class MeggyCheckButton(Expression):
    """
    Test whether a device button is pressed.

    Example:
        Meggy.checkButton(Meggy.Button.A)
    """

    exp: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_meggy_check_button(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.exp,)


# -----------------------------------------------------------------------------
# Literals
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, eq=False)
class IntLiteral(Expression):
    """An integer literal."""

    lexeme: str
    value: int
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_int_literal(self)


@dataclass(frozen=True, slots=True, eq=False)
class ButtonLiteral(Expression):
    """A device button constant such as `Meggy.Button.Up`."""

    lexeme: str
    value: int
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_button_literal(self)


@dataclass(frozen=True, slots=True, eq=False)
class ColorLiteral(Expression):
    """A display color constant such as `Meggy.Color.RED`."""

    lexeme: str
    value: int
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_color_literal(self)


@dataclass(frozen=True, slots=True, eq=False)
class TrueLiteral(Expression):
    lexeme: str = "true"
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_true_literal(self)


@dataclass(frozen=True, slots=True, eq=False)
class FalseLiteral(Expression):
    lexeme: str = "false"
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_false_literal(self)


# -----------------------------------------------------------------------------
# Statements
# -----------------------------------------------------------------------------


class Statement(ASTNode):
    """Base class for all statements."""

    pass


@dataclass(frozen=True, slots=True, eq=False)
class BlockStatement(Statement):
    """
    A block of statements enclosed in braces.

    Example:
        { stmt1; stmt2; stmt3 }
    """

    statements: tuple[Statement, ...] = ()
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_block_statement(self)

    def children(self) -> tuple[ASTNode, ...]:
        return tuple(self.statements)


@dataclass(frozen=True, slots=True, eq=False)
class IfStatement(Statement):
    """
    An if/else statement.

    Example:
        if (Meggy.checkButton(Meggy.Button.A)) { ... } else { ... }
    """

    exp: Expression
    then_statement: Statement
    else_statement: Optional[Statement] = None
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_if_statement(self)

    def children(self) -> tuple[ASTNode, ...]:
        if self.else_statement is None:
            return (self.exp, self.then_statement)
        return (self.exp, self.then_statement, self.else_statement)


@dataclass(frozen=True, slots=True, eq=False)
class WhileStatement(Statement):
    """
    A while loop statement.

    Example:
        while (true) { Meggy.delay(100); }
    """

    exp: Expression
    statement: Statement
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_while_statement(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.exp, self.statement)


@dataclass(frozen=True, slots=True, eq=False)
class MeggySetPixel(Statement):
    """
    Paint a display pixel.

    Example:
        Meggy.setPixel((byte)1, (byte)2, Meggy.Color.BLUE);
    """

    x_exp: Expression
    y_exp: Expression
    color: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_meggy_set_pixel(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.x_exp, self.y_exp, self.color)


@dataclass(frozen=True, slots=True, eq=False)
class MeggyDelay(Statement):
    """Pause the device for a number of milliseconds, `Meggy.delay(500);`."""

    exp: Expression
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_meggy_delay(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.exp,)


# -----------------------------------------------------------------------------
# Program Structure
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, eq=False)
class MainClass(ASTNode):
    """
    The class holding `main`.

    Example:
        class PA3 { public static void main(String[] args) { ... } }
    """

    name: str
    param: str
    statement: Statement
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_main_class(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.statement,)


@dataclass(frozen=True, slots=True, eq=False)
class Program(ASTNode):
    """Root node of a MeggyJava program."""

    main_class: MainClass
    location: Optional[SourceLocation] = None

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_program(self)

    def children(self) -> tuple[ASTNode, ...]:
        return (self.main_class,)


ALL_NODE_TYPES: tuple[type[ASTNode], ...] = (
    Program,
    MainClass,
    BlockStatement,
    IfStatement,
    WhileStatement,
    MeggySetPixel,
    MeggyDelay,
    AndExp,
    NotExp,
    PlusExp,
    MinusExp,
    MulExp,
    EqualExp,
    NegExp,
    ByteCast,
    MeggyGetPixel,
    MeggyCheckButton,
    IntLiteral,
    ButtonLiteral,
    ColorLiteral,
    TrueLiteral,
    FalseLiteral,
)

LEAF_NODE_TYPES: tuple[type[ASTNode], ...] = (
    IntLiteral,
    ButtonLiteral,
    ColorLiteral,
    TrueLiteral,
    FalseLiteral,
)

NODE_TYPES_BY_NAME: dict[str, type[ASTNode]] = {cls.__name__: cls for cls in ALL_NODE_TYPES}


def hook_suffix(node_type: type[ASTNode]) -> str:
    """
    Snake-case suffix used by the visitor hooks of a node kind.

    `MeggySetPixel` -> `meggy_set_pixel`, so the hooks are `visit_meggy_set_pixel`,
    `in_meggy_set_pixel` and `out_meggy_set_pixel`.
    """
    name = node_type.__name__
    out: list[str] = []
    for i, ch in enumerate(name):
        if ch.isupper() and i > 0:
            out.append("_")
        out.append(ch.lower())
    return "".join(out)


def iter_nodes(root: ASTNode) -> Iterator[ASTNode]:
    """Yield every node of the tree in post-order (children before parents)."""
    stack: list[tuple[ASTNode, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            yield node
            continue
        stack.append((node, True))
        for child in reversed(node.children()):
            stack.append((child, False))


_HOOK_SUFFIXES: dict[type[ASTNode], str] = {cls: hook_suffix(cls) for cls in ALL_NODE_TYPES}


# =============================================================================
# Depth-First Visitor
# =============================================================================


class DepthFirstVisitor(ASTVisitor):
    """
    Base visitor that walks the tree depth-first, children left to right.

    Each non-leaf kind gets an entry hook (`in_*`) fired before its children and
    an exit hook (`out_*`) fired after them. Leaf kinds have no children, so
    subclasses usually override their `visit_*` method directly. Hooks that are
    not overridden fall back to `default_in` / `default_out`.

    The walk keeps its own stack, so tree depth is not bounded by the
    interpreter's recursion limit. For non-leaf kinds, override the `in_*` and
    `out_*` hooks; their `visit_*` methods just start a walk at that node.

    Subclass this and override the hooks you need.
    """

    def visit(self, node: ASTNode) -> None:
        """Walk the tree rooted at `node`."""
        stack: list[tuple[ASTNode, bool]] = [(node, False)]
        while stack:
            current, expanded = stack.pop()
            if isinstance(current, LEAF_NODE_TYPES):
                current.accept(self)
                continue
            suffix = _HOOK_SUFFIXES.get(type(current)) or hook_suffix(type(current))
            if expanded:
                getattr(self, "out_" + suffix)(current)
                continue
            getattr(self, "in_" + suffix)(current)
            stack.append((current, True))
            for child in reversed(current.children()):
                stack.append((child, False))

    def default_in(self, node: ASTNode) -> None:
        pass

    def default_out(self, node: ASTNode) -> None:
        logger.warning("Node not implemented in %s, %s", type(self).__name__, type(node).__name__)

    # Program structure
    def in_program(self, node: Program) -> None:
        self.default_in(node)

    def out_program(self, node: Program) -> None:
        self.default_out(node)

    def visit_program(self, node: Program) -> Any:
        self.visit(node)

    def in_main_class(self, node: MainClass) -> None:
        self.default_in(node)

    def out_main_class(self, node: MainClass) -> None:
        self.default_out(node)

    def visit_main_class(self, node: MainClass) -> Any:
        self.visit(node)

    # Statements
    def in_block_statement(self, node: BlockStatement) -> None:
        self.default_in(node)

    def out_block_statement(self, node: BlockStatement) -> None:
        self.default_out(node)

    def visit_block_statement(self, node: BlockStatement) -> Any:
        self.visit(node)

    def in_if_statement(self, node: IfStatement) -> None:
        self.default_in(node)

    def out_if_statement(self, node: IfStatement) -> None:
        self.default_out(node)

    def visit_if_statement(self, node: IfStatement) -> Any:
        self.visit(node)

    def in_while_statement(self, node: WhileStatement) -> None:
        self.default_in(node)

    def out_while_statement(self, node: WhileStatement) -> None:
        self.default_out(node)

    def visit_while_statement(self, node: WhileStatement) -> Any:
        self.visit(node)

    def in_meggy_set_pixel(self, node: MeggySetPixel) -> None:
        self.default_in(node)

    def out_meggy_set_pixel(self, node: MeggySetPixel) -> None:
        self.default_out(node)

    def visit_meggy_set_pixel(self, node: MeggySetPixel) -> Any:
        self.visit(node)

    def in_meggy_delay(self, node: MeggyDelay) -> None:
        self.default_in(node)

    def out_meggy_delay(self, node: MeggyDelay) -> None:
        self.default_out(node)

    def visit_meggy_delay(self, node: MeggyDelay) -> Any:
        self.visit(node)

    # Binary expressions
    def in_and_exp(self, node: AndExp) -> None:
        self.default_in(node)

    def out_and_exp(self, node: AndExp) -> None:
        self.default_out(node)

    def visit_and_exp(self, node: AndExp) -> Any:
        self.visit(node)

    def in_plus_exp(self, node: PlusExp) -> None:
        self.default_in(node)

    def out_plus_exp(self, node: PlusExp) -> None:
        self.default_out(node)

    def visit_plus_exp(self, node: PlusExp) -> Any:
        self.visit(node)

    def in_minus_exp(self, node: MinusExp) -> None:
        self.default_in(node)

    def out_minus_exp(self, node: MinusExp) -> None:
        self.default_out(node)

    def visit_minus_exp(self, node: MinusExp) -> Any:
        self.visit(node)

    def in_mul_exp(self, node: MulExp) -> None:
        self.default_in(node)

    def out_mul_exp(self, node: MulExp) -> None:
        self.default_out(node)

    def visit_mul_exp(self, node: MulExp) -> Any:
        self.visit(node)

    def in_equal_exp(self, node: EqualExp) -> None:
        self.default_in(node)

    def out_equal_exp(self, node: EqualExp) -> None:
        self.default_out(node)

    def visit_equal_exp(self, node: EqualExp) -> Any:
        self.visit(node)

    def in_meggy_get_pixel(self, node: MeggyGetPixel) -> None:
        self.default_in(node)

    def out_meggy_get_pixel(self, node: MeggyGetPixel) -> None:
        self.default_out(node)

    def visit_meggy_get_pixel(self, node: MeggyGetPixel) -> Any:
        self.visit(node)

    # Unary expressions
    def in_not_exp(self, node: NotExp) -> None:
        self.default_in(node)

    def out_not_exp(self, node: NotExp) -> None:
        self.default_out(node)

    def visit_not_exp(self, node: NotExp) -> Any:
        self.visit(node)

    def in_neg_exp(self, node: NegExp) -> None:
        self.default_in(node)

    def out_neg_exp(self, node: NegExp) -> None:
        self.default_out(node)

    def visit_neg_exp(self, node: NegExp) -> Any:
        self.visit(node)

    def in_byte_cast(self, node: ByteCast) -> None:
        self.default_in(node)

    def out_byte_cast(self, node: ByteCast) -> None:
        self.default_out(node)

    def visit_byte_cast(self, node: ByteCast) -> Any:
        self.visit(node)

    def in_meggy_check_button(self, node: MeggyCheckButton) -> None:
        self.default_in(node)

    def out_meggy_check_button(self, node: MeggyCheckButton) -> None:
        self.default_out(node)

    def visit_meggy_check_button(self, node: MeggyCheckButton) -> Any:
        self.visit(node)

    # Literals
    def in_int_literal(self, node: IntLiteral) -> None:
        self.default_in(node)

    def out_int_literal(self, node: IntLiteral) -> None:
        self.default_out(node)

    def visit_int_literal(self, node: IntLiteral) -> Any:
        self.in_int_literal(node)
        self.out_int_literal(node)

    def in_button_literal(self, node: ButtonLiteral) -> None:
        self.default_in(node)

    def out_button_literal(self, node: ButtonLiteral) -> None:
        self.default_out(node)

    def visit_button_literal(self, node: ButtonLiteral) -> Any:
        self.in_button_literal(node)
        self.out_button_literal(node)

    def in_color_literal(self, node: ColorLiteral) -> None:
        self.default_in(node)

    def out_color_literal(self, node: ColorLiteral) -> None:
        self.default_out(node)

    def visit_color_literal(self, node: ColorLiteral) -> Any:
        self.in_color_literal(node)
        self.out_color_literal(node)

    def in_true_literal(self, node: TrueLiteral) -> None:
        self.default_in(node)

    def out_true_literal(self, node: TrueLiteral) -> None:
        self.default_out(node)

    def visit_true_literal(self, node: TrueLiteral) -> Any:
        self.in_true_literal(node)
        self.out_true_literal(node)

    def in_false_literal(self, node: FalseLiteral) -> None:
        self.default_in(node)

    def out_false_literal(self, node: FalseLiteral) -> None:
        self.default_out(node)

    def visit_false_literal(self, node: FalseLiteral) -> Any:
        self.in_false_literal(node)
        self.out_false_literal(node)
