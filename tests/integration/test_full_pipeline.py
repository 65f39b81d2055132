"""
Integration tests for the complete meggyc checking pipeline.

These tests load JSON ASTs the way the parser hands them over, run the type
checker over the whole program and inspect the resulting type table and
diagnostics.
"""

import copy

from meggyc.compiler.ast_loader import load_program, load_program_file
from meggyc.compiler.ast_nodes import (
    IfStatement,
    MeggyGetPixel,
    MeggySetPixel,
    WhileStatement,
    iter_nodes,
)
from meggyc.compiler.type_checker import type_check
from meggyc.compiler.type_system import Type
from meggyc.lsp.diagnostics import get_diagnostics_for_result
from meggyc.utils.diagnostics import create_semantic_error_diagnostic


class TestCheckingPipeline:
    """Load, check and report on whole programs."""

    def test_blink_is_well_typed(self, blink_ast, write_ast):
        program = load_program_file(write_ast(blink_ast), "Blink.java")
        result = type_check(program)

        assert result.ok, f"Unexpected error: {result.error}"
        assert get_diagnostics_for_result(result) == []

        # Every node in the tree received a type
        nodes = list(iter_nodes(program))
        assert len(result.symtable) == len(nodes)
        assert result.type_of(program) == Type.VOID

    def test_statement_types(self, blink_ast):
        program = load_program(blink_ast)
        result = type_check(program)
        by_kind = {}
        for node in iter_nodes(program):
            by_kind.setdefault(type(node), []).append(result.type_of(node))

        assert by_kind[WhileStatement] == [Type.BOOL]
        assert by_kind[IfStatement] == [Type.VOID]
        assert set(by_kind[MeggySetPixel]) == {Type.VOID}
        assert by_kind[MeggyGetPixel] == [Type.COLOR]

    def test_checking_twice_gives_same_table(self, blink_ast):
        program = load_program(blink_ast)
        first = type_check(program).symtable
        second = type_check(program).symtable
        assert list(first.items()) == list(second.items())

    def test_fault_deep_in_program(self, blink_ast):
        data = copy.deepcopy(blink_ast)
        loop = data["main_class"]["statement"]["statements"][0]
        if_stmt = loop["statement"]["statements"][2]
        inner = if_stmt["then_statement"]["statements"][0]
        # getPixel((byte)1, (byte)1) -> getPixel(1, (byte)1)
        inner["color"]["x_exp"] = {
            "kind": "IntLiteral",
            "line": 7,
            "column": 65,
            "lexeme": "1",
            "value": 1,
        }

        result = type_check(load_program(data, "Blink.java"))

        assert not result.ok
        assert result.error.message == "values for getPixel must be BYTE"
        assert (result.error.line, result.error.column) == (7, 65)

        diagnostic = create_semantic_error_diagnostic(result.error)
        assert str(diagnostic.primary_span) == "Blink.java:7:65"

    def test_first_fault_in_traversal_order_wins(self, blink_ast):
        data = copy.deepcopy(blink_ast)
        loop = data["main_class"]["statement"]["statements"][0]
        set_pixel, delay, _ = loop["statement"]["statements"]
        # Both statements are now ill-typed; setPixel comes first
        set_pixel["color"] = {"kind": "TrueLiteral", "line": 4, "column": 52}
        delay["exp"] = {"kind": "FalseLiteral", "line": 5, "column": 25}

        result = type_check(load_program(data))

        assert result.error.message == "values for setPixel not BYTE and COLOR"
        # setPixel always blames its x operand
        assert (result.error.line, result.error.column) == (4, 28)

    def test_non_boolean_loop_condition(self, blink_ast):
        data = copy.deepcopy(blink_ast)
        loop = data["main_class"]["statement"]["statements"][0]
        loop["exp"] = {"kind": "IntLiteral", "line": 3, "column": 16, "lexeme": "1", "value": 1}

        result = type_check(load_program(data))

        assert result.error.message == "Param must be BOOL"
        assert result.error.code == "E0105"
        assert (result.error.line, result.error.column) == (3, 16)
