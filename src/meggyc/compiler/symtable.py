"""
Per-node type table filled in by the type checker.

The table maps AST node identity to the semantic `Type` inferred for that node.
It is scratch memory while the checker runs and the published result handed
to code generation afterwards.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Optional

from meggyc.compiler.ast_nodes import ASTNode
from meggyc.compiler.type_system import Type
from meggyc.utils.errors import InternalError


class SymTable:
    """
    Associates AST nodes with their inferred expression types.

    Nodes hash by identity, so two structurally equal subtrees get separate
    entries. The table does not enforce any ordering between writes and reads;
    the post-order traversal of the checker guarantees that a child's entry
    exists before its parent asks for it.

    Usage:
        st = SymTable()
        st.set_exp_type(node, Type.INT)
        st.get_exp_type(node)  # Type.INT
    """

    def __init__(self) -> None:
        self._exp_types: dict[ASTNode, Type] = {}

    def set_exp_type(self, node: ASTNode, exp_type: Type) -> None:
        """Associate `exp_type` with `node`, replacing any previous entry."""
        self._exp_types[node] = exp_type

    def get_exp_type(self, node: ASTNode) -> Type:
        """
        Return the type previously recorded for `node`.

        Raises:
            InternalError: if `node` has no entry yet. This means a rule ran
                before one of its children was typed, which is a traversal bug
                rather than an error in the checked program.
        """
        exp_type = self._exp_types.get(node)
        if exp_type is None:
            where = f" at {node.location}" if node.location else ""
            raise InternalError(f"no type recorded for {type(node).__name__}{where}")
        return exp_type

    def lookup(self, node: ASTNode) -> Optional[Type]:
        """Return the recorded type of `node`, or None."""
        return self._exp_types.get(node)

    def has_exp_type(self, node: ASTNode) -> bool:
        return node in self._exp_types

    def items(self) -> Iterator[tuple[ASTNode, Type]]:
        return iter(self._exp_types.items())

    def clear(self) -> None:
        """Drop every entry so the table can serve another checking run."""
        self._exp_types.clear()

    def __contains__(self, node: object) -> bool:
        return node in self._exp_types

    def __len__(self) -> int:
        return len(self._exp_types)

    def __repr__(self) -> str:
        return f"SymTable({len(self._exp_types)} entries)"


__all__ = [
    "SymTable",
]
