"""
meggyc Command-Line Interface.

Type checks MeggyJava programs handed over by the parser as JSON ASTs.

Usage:
    meggyc check Blink.ast.json                       # Type check
    meggyc check Blink.ast.json --source Blink.java   # Show source context on errors
    meggyc check Blink.ast.json --show-types          # Print every node's type
    meggyc check Blink.ast.json --format json         # Machine-readable result
    meggyc check Blink.ast.json --format lsp          # publishDiagnostics payload
    meggyc info                                       # Show language info

Exit codes: 0 when the program is well typed, 1 on a semantic error, 2 when
the input cannot be read or the checker hits an internal error.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from meggyc import __version__
from meggyc.compiler.ast_loader import load_program_file
from meggyc.compiler.ast_nodes import ASTNode, iter_nodes
from meggyc.compiler.symtable import SymTable
from meggyc.compiler.type_checker import CheckResult, type_check
from meggyc.compiler.type_system import Type
from meggyc.lsp.diagnostics import publish_params, to_json
from meggyc.utils.diagnostics import create_semantic_error_diagnostic
from meggyc.utils.errors import MeggyError

EXIT_OK = 0
EXIT_SEMANTIC_ERROR = 1
EXIT_FAILURE = 2

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


# =============================================================================
# ANSI Color Codes for Terminal Output
# =============================================================================


class Colors:
    """ANSI escape codes for colored terminal output."""

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"

    BOLD = "\033[1m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls) -> None:
        """Disable all colors (for non-TTY output)."""
        cls.RED = ""
        cls.GREEN = ""
        cls.YELLOW = ""
        cls.CYAN = ""
        cls.GRAY = ""
        cls.BOLD = ""
        cls.RESET = ""

    @classmethod
    def enabled(cls) -> bool:
        return bool(cls.RESET)


def _init_colors() -> None:
    """Initialize colors based on terminal capabilities."""
    if not sys.stdout.isatty() or os.environ.get("NO_COLOR"):
        Colors.disable()


_init_colors()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="meggyc",
        description="meggyc - type checker for MeggyJava programs",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every inferred type",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser(
        "check",
        aliases=["tc"],
        help="Type check a parsed MeggyJava program",
    )
    check_parser.add_argument(
        "input",
        type=Path,
        help="JSON AST written by the parser",
    )
    check_parser.add_argument(
        "--source",
        type=Path,
        default=None,
        help="Original MeggyJava source, used to show context for errors",
    )
    check_parser.add_argument(
        "--format",
        choices=["text", "json", "lsp"],
        default="text",
        help="Output format (default: text)",
    )
    check_parser.add_argument(
        "--show-types",
        action="store_true",
        help="Print the inferred type of every node",
    )

    subparsers.add_parser(
        "info",
        help="Show MeggyJava type information",
    )

    return parser


# =============================================================================
# Output Helpers
# =============================================================================


def _format_position(node: ASTNode) -> str:
    if node.location is None:
        return "?:?"
    return f"{node.location.line}:{node.location.column}"


def _print_typed_tree(root: ASTNode, symtable: SymTable) -> None:
    """Print the tree, pre-order, with the type recorded for each node."""
    stack: list[tuple[ASTNode, int]] = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        exp_type = symtable.lookup(node)
        type_str = str(exp_type) if exp_type is not None else "?"
        indent = "  " * depth
        print(
            f"{indent}{type(node).__name__} {Colors.GRAY}{_format_position(node)}{Colors.RESET}"
            f" : {Colors.CYAN}{type_str}{Colors.RESET}"
        )
        for child in reversed(node.children()):
            stack.append((child, depth + 1))


def _result_to_json(result: CheckResult, root: ASTNode, filename: str) -> dict:
    if result.error is not None:
        diagnostic = create_semantic_error_diagnostic(result.error, filename)
        return {"ok": False, "error": diagnostic.to_dict()}
    return {
        "ok": True,
        "types": [
            {
                "kind": type(node).__name__,
                "line": node.line,
                "column": node.column,
                "type": str(result.type_of(node)),
            }
            for node in iter_nodes(root)
        ],
    }


def _read_source(path: Optional[Path]) -> str:
    if path is None:
        return ""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"{Colors.YELLOW}Warning:{Colors.RESET} cannot read source {path}: {e}", file=sys.stderr)
        return ""


# =============================================================================
# Commands
# =============================================================================


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the check command."""
    input_path: Path = args.input

    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return EXIT_FAILURE

    source_name = str(args.source) if args.source else str(input_path)

    try:
        program = load_program_file(input_path, source_name)
        result = type_check(program)
    except MeggyError as e:
        print(f"{Colors.RED}Error:{Colors.RESET} {e}", file=sys.stderr)
        return EXIT_FAILURE
    except Exception as e:
        print(f"{Colors.RED}Internal error:{Colors.RESET} {e}", file=sys.stderr)
        return EXIT_FAILURE

    if args.format == "json":
        print(json.dumps(_result_to_json(result, program, source_name), indent=2))
    elif args.format == "lsp":
        uri = (args.source or input_path).resolve().as_uri()
        print(json.dumps(to_json(publish_params(uri, result)), indent=2))
    else:
        if args.show_types:
            _print_typed_tree(program, result.symtable)
        if result.error is not None:
            diagnostic = create_semantic_error_diagnostic(result.error, source_name)
            source = _read_source(args.source)
            print(diagnostic.render(source, use_color=Colors.enabled()), file=sys.stderr)
        else:
            print(
                f"{Colors.GREEN}OK:{Colors.RESET} {source_name} "
                f"({len(result.symtable)} nodes typed)"
            )

    return EXIT_OK if result.ok else EXIT_SEMANTIC_ERROR


def cmd_info(args: argparse.Namespace) -> int:
    """Handle the info command."""
    print(f"{Colors.BOLD}meggyc{Colors.RESET} {__version__}")
    print()
    print("Types:")
    for member in Type:
        print(f"  {member}")
    print()
    print("Device operations:")
    print("  Meggy.setPixel(byte, byte, Meggy.Color) : void")
    print("  Meggy.getPixel(byte, byte)              : Meggy.Color")
    print("  Meggy.delay(int)                        : void")
    print("  Meggy.checkButton(Meggy.Button)         : boolean")
    return EXIT_OK


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.no_color:
        Colors.disable()
    _configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    command_handlers = {
        "check": cmd_check,
        "tc": cmd_check,
        "info": cmd_info,
    }

    handler = command_handlers.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
