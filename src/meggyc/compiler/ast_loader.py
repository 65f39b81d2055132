"""
Load MeggyJava ASTs serialized as JSON by the parser stage.

Each node is an object with a `kind` naming its class, optional 1-based
`line` and `column`, and one member per child or attribute:

    {"kind": "PlusExp", "line": 3, "column": 12,
     "lexp": {"kind": "IntLiteral", "lexeme": "1", "value": 1, "line": 3, "column": 12},
     "rexp": {"kind": "ByteCast", "line": 3, "column": 16,
              "exp": {"kind": "IntLiteral", "lexeme": "2", "value": 2, "line": 3, "column": 22}}}

`statements` is an array; `else_statement` may be null or absent.
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any, Optional

from meggyc.compiler.ast_nodes import (
    NODE_TYPES_BY_NAME,
    ASTNode,
    Expression,
    MainClass,
    Program,
    Statement,
    iter_nodes,
)
from meggyc.utils.errors import ASTLoadError, SourceLocation

# field name -> required node base class
_CHILD_FIELDS: dict[str, type[ASTNode]] = {
    "lexp": Expression,
    "rexp": Expression,
    "exp": Expression,
    "x_exp": Expression,
    "y_exp": Expression,
    "color": Expression,
    "statement": Statement,
    "then_statement": Statement,
    "else_statement": Statement,
    "main_class": MainClass,
}
_LIST_FIELDS: dict[str, type[ASTNode]] = {
    "statements": Statement,
}
_SCALAR_FIELDS: dict[str, type] = {
    "name": str,
    "param": str,
    "lexeme": str,
    "value": int,
}


# plan of a node awaiting its children: class, kind, constructor kwargs and
# the (field name, raw child) pairs in field order
_Plan = tuple[type[ASTNode], str, dict[str, Any], list[tuple[str, Any]]]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _location(data: dict[str, Any], filename: Optional[str]) -> Optional[SourceLocation]:
    line = data.get("line")
    column = data.get("column")
    if line is None or column is None:
        return None
    if not _is_int(line) or not _is_int(column):
        raise ASTLoadError(f"line and column must be integers, got {line!r}:{column!r}")
    return SourceLocation(line, column, filename)


def _plan_node(data: Any, filename: Optional[str]) -> _Plan:
    if not isinstance(data, dict):
        raise ASTLoadError(f"expected a node object, got {type(data).__name__}")

    kind = data.get("kind")
    node_type = NODE_TYPES_BY_NAME.get(kind) if isinstance(kind, str) else None
    if node_type is None:
        raise ASTLoadError(f"unknown node kind {kind!r}")

    location = _location(data, filename)
    kwargs: dict[str, Any] = {"location": location}
    children: list[tuple[str, Any]] = []

    for f in dataclasses.fields(node_type):
        if f.name == "location":
            continue
        has_default = (
            f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING
        )
        raw = data.get(f.name)

        if raw is None:
            if has_default:
                continue
            raise ASTLoadError(f"{kind} is missing '{f.name}'", location)

        if f.name in _LIST_FIELDS:
            if not isinstance(raw, list):
                raise ASTLoadError(f"'{f.name}' of {kind} must be an array", location)
            kwargs[f.name] = []
            children.extend((f.name, item) for item in raw)
        elif f.name in _CHILD_FIELDS:
            children.append((f.name, raw))
        elif f.name in _SCALAR_FIELDS:
            expected = _SCALAR_FIELDS[f.name]
            if not isinstance(raw, expected) or isinstance(raw, bool):
                raise ASTLoadError(
                    f"'{f.name}' of {kind} must be {expected.__name__}, got {raw!r}", location
                )
            kwargs[f.name] = raw
        else:
            raise ASTLoadError(f"no loader rule for field '{f.name}' of {kind}", location)

    return node_type, kind, kwargs, children


def _build_node(plan: _Plan, built: list[ASTNode]) -> ASTNode:
    node_type, kind, kwargs, children = plan
    start = len(built) - len(children)
    for (field_name, _), child in zip(children, built[start:]):
        if field_name in _LIST_FIELDS:
            _expect(child, _LIST_FIELDS[field_name], kind, field_name)
            kwargs[field_name].append(child)
        else:
            _expect(child, _CHILD_FIELDS[field_name], kind, field_name)
            kwargs[field_name] = child
    del built[start:]
    for field_name in _LIST_FIELDS:
        if field_name in kwargs:
            kwargs[field_name] = tuple(kwargs[field_name])
    return node_type(**kwargs)


def load_node(data: Any, filename: Optional[str] = None) -> ASTNode:
    """
    Build a node (and its subtree) from its JSON object form.

    The subtree is built with an explicit stack, children before parents, so
    deeply nested expressions load without recursion.

    Raises:
        ASTLoadError: on an unknown kind, a missing required member, or a
            child of the wrong category
    """
    built: list[ASTNode] = []
    stack: list[tuple[Any, Optional[_Plan]]] = [(data, None)]
    while stack:
        raw, plan = stack.pop()
        if plan is not None:
            built.append(_build_node(plan, built))
            continue
        plan = _plan_node(raw, filename)
        stack.append((raw, plan))
        for _, child in reversed(plan[3]):
            stack.append((child, None))
    return built[0]


def _expect(node: ASTNode, base: type[ASTNode], kind: str, field_name: str) -> None:
    if not isinstance(node, base):
        raise ASTLoadError(
            f"'{field_name}' of {kind} must be a {base.__name__}, got {type(node).__name__}",
            node.location,
        )


def load_program(data: Any, filename: Optional[str] = None) -> Program:
    """Build a whole program; the root object must be a `Program`."""
    node = load_node(data, filename)
    if not isinstance(node, Program):
        raise ASTLoadError(f"root node must be a Program, got {type(node).__name__}")
    return node


def load_program_file(path: Path, source_name: Optional[str] = None) -> Program:
    """
    Read a JSON AST file and build the program.

    Args:
        path: The JSON file written by the parser
        source_name: Filename to put in node locations; defaults to `path`

    Raises:
        ASTLoadError: if the file cannot be read, is not UTF-8 JSON, or does
            not describe a program
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ASTLoadError(f"{path}: invalid JSON: {e.msg} (line {e.lineno})") from e
    except UnicodeDecodeError as e:
        raise ASTLoadError(f"{path}: not valid UTF-8: {e.reason} at byte {e.start}") from e
    except RecursionError as e:
        raise ASTLoadError(f"{path}: JSON nested too deeply") from e
    except OSError as e:
        raise ASTLoadError(f"{path}: cannot read file: {e.strerror or e}") from e
    return load_program(data, source_name or str(path))


def dump_node(node: ASTNode) -> dict[str, Any]:
    """Inverse of `load_node`; locations are written as `line`/`column`."""
    dumped: dict[int, dict[str, Any]] = {}
    for current in iter_nodes(node):
        out: dict[str, Any] = {"kind": type(current).__name__}
        if current.location is not None:
            out["line"] = current.location.line
            out["column"] = current.location.column
        for f in dataclasses.fields(current):
            if f.name == "location":
                continue
            value = getattr(current, f.name)
            if f.name in _LIST_FIELDS:
                out[f.name] = [dumped[id(item)] for item in value]
            elif f.name in _CHILD_FIELDS:
                out[f.name] = None if value is None else dumped[id(value)]
            else:
                out[f.name] = value
        dumped[id(current)] = out
    return dumped[id(node)]


__all__ = [
    "load_node",
    "load_program",
    "load_program_file",
    "dump_node",
]
