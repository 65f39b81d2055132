"""
Pytest configuration and shared fixtures for meggyc tests.
"""

import json
from pathlib import Path
from typing import Any

import pytest

from meggyc.compiler.ast_nodes import (
    ASTNode,
    BlockStatement,
    ButtonLiteral,
    ByteCast,
    ColorLiteral,
    Expression,
    IntLiteral,
    MainClass,
    Program,
    Statement,
    TrueLiteral,
)
from meggyc.compiler.symtable import SymTable
from meggyc.compiler.type_checker import TypeChecker
from meggyc.compiler.type_system import Type
from meggyc.utils.errors import SourceLocation


@pytest.fixture
def loc():
    """Factory fixture for source locations."""

    def _loc(line: int, column: int) -> SourceLocation:
        return SourceLocation(line, column)

    return _loc


@pytest.fixture
def int_lit(loc):
    """Factory fixture for integer literals."""

    def _int(value: int = 1, line: int = 1, column: int = 1) -> IntLiteral:
        return IntLiteral(str(value), value, loc(line, column))

    return _int


@pytest.fixture
def byte_of(int_lit, loc):
    """Factory fixture for `(byte)<value>` expressions, typed BYTE."""

    def _byte(value: int = 1, line: int = 1, column: int = 1) -> ByteCast:
        return ByteCast(int_lit(value, line, column + 6), loc(line, column))

    return _byte


@pytest.fixture
def expr_of_type(int_lit, byte_of, loc):
    """Factory fixture returning a fresh expression that checks to the given type."""

    def _expr(exp_type: Type, line: int = 1, column: int = 1) -> Expression:
        if exp_type == Type.INT:
            return int_lit(7, line, column)
        if exp_type == Type.BYTE:
            return byte_of(7, line, column)
        if exp_type == Type.BOOL:
            return TrueLiteral(location=loc(line, column))
        if exp_type == Type.COLOR:
            return ColorLiteral("Meggy.Color.RED", 1, loc(line, column))
        if exp_type == Type.BUTTON:
            return ButtonLiteral("Meggy.Button.A", 16, loc(line, column))
        raise ValueError(f"no expression has type {exp_type}")

    return _expr


@pytest.fixture
def program_with(loc):
    """Factory fixture wrapping statements in a main class and program."""

    def _program(*statements: Statement) -> Program:
        block = BlockStatement(tuple(statements), loc(2, 44))
        main = MainClass("PA3", "args", block, loc(1, 1))
        return Program(main, loc(1, 1))

    return _program


@pytest.fixture
def check():
    """Fixture to type check a tree with a fresh table."""

    def _check(node: ASTNode) -> SymTable:
        return TypeChecker().check(node)

    return _check


def _node(kind: str, line: int, column: int, **members: Any) -> dict[str, Any]:
    return {"kind": kind, "line": line, "column": column, **members}


@pytest.fixture
def blink_ast() -> dict[str, Any]:
    """
    JSON AST of a small well-typed program:

        class Blink {
            public static void main(String[] args) {
                while (true) {
                    Meggy.setPixel((byte)1, (byte)(2 + 3), Meggy.Color.RED);
                    Meggy.delay(100);
                    if (Meggy.checkButton(Meggy.Button.A) && !(1 == (byte)1)) {
                        Meggy.setPixel((byte)0, (byte)0, Meggy.getPixel((byte)1, (byte)1));
                    }
                }
            }
        }
    """

    def byte(value: int, line: int, column: int) -> dict[str, Any]:
        return _node(
            "ByteCast",
            line,
            column,
            exp=_node("IntLiteral", line, column + 6, lexeme=str(value), value=value),
        )

    set_pixel = _node(
        "MeggySetPixel",
        4,
        13,
        x_exp=byte(1, 4, 28),
        y_exp=_node(
            "ByteCast",
            4,
            37,
            exp=_node(
                "PlusExp",
                4,
                44,
                lexp=_node("IntLiteral", 4, 44, lexeme="2", value=2),
                rexp=_node("IntLiteral", 4, 48, lexeme="3", value=3),
            ),
        ),
        color=_node("ColorLiteral", 4, 52, lexeme="Meggy.Color.RED", value=1),
    )
    delay = _node("MeggyDelay", 5, 13, exp=_node("IntLiteral", 5, 25, lexeme="100", value=100))
    condition = _node(
        "AndExp",
        6,
        17,
        lexp=_node(
            "MeggyCheckButton",
            6,
            17,
            exp=_node("ButtonLiteral", 6, 35, lexeme="Meggy.Button.A", value=16),
        ),
        rexp=_node(
            "NotExp",
            6,
            54,
            exp=_node(
                "EqualExp",
                6,
                56,
                lexp=_node("IntLiteral", 6, 56, lexeme="1", value=1),
                rexp=byte(1, 6, 61),
            ),
        ),
    )
    inner = _node(
        "MeggySetPixel",
        7,
        17,
        x_exp=byte(0, 7, 32),
        y_exp=byte(0, 7, 41),
        color=_node("MeggyGetPixel", 7, 50, x_exp=byte(1, 7, 65), y_exp=byte(1, 7, 74)),
    )
    if_stmt = _node(
        "IfStatement",
        6,
        13,
        exp=condition,
        then_statement=_node("BlockStatement", 6, 73, statements=[inner]),
        else_statement=None,
    )
    loop = _node(
        "WhileStatement",
        3,
        9,
        exp=_node("TrueLiteral", 3, 16, lexeme="true"),
        statement=_node("BlockStatement", 3, 22, statements=[set_pixel, delay, if_stmt]),
    )
    main = _node(
        "MainClass",
        1,
        1,
        name="Blink",
        param="args",
        statement=_node("BlockStatement", 2, 44, statements=[loop]),
    )
    return _node("Program", 1, 1, main_class=main)


@pytest.fixture
def write_ast(tmp_path):
    """Fixture writing a JSON AST to a temporary file and returning its path."""

    def _write(data: Any, name: str = "Blink.ast.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
