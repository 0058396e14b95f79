## tlpin — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable

from .types import Native, Defined, Literal, Value, NativeOperation, to_value, from_value
from .library import Library
from .builtins import load_builtins_library
from .lexer import LexerConfig, tokenize
from .interpreter import execute


class Runtime:
    """Minimal runtime facade focused on embedding and extension."""

    def __init__(self, library: Library | None = None):
        self.library = library or load_builtins_library()

    # Assembly ────────────────────────────────────────────────────────────────────────────────
    def native(self, name: str) -> Native:
        return Native(self.library.get_native(name))

    def literal(self, x: Any) -> Literal:
        return Literal(to_value(x))

    def defined(self, *nodes) -> Defined:
        return Defined(self.program(*nodes))

    def program(self, *nodes) -> list:
        """Build a node list; strings name natives, other plain data become literals."""
        def _node(n):
            if isinstance(n, (Native, Defined, Literal)): return n
            if isinstance(n, str): return self.native(n)
            return self.literal(n)
        return [_node(n) for n in nodes]

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def run(self, program: list, stack: list | None = None, verbosity: int = 0, stats: dict | None = None) -> list:
        return execute(program, stack, verbosity=verbosity, stats=stats)

    def apply(self, op_or_name: NativeOperation | str, stack: list) -> list:
        op = op_or_name if isinstance(op_or_name, NativeOperation) else self.library.get_native(op_or_name)
        op.apply(stack)
        return stack

    # Lexing ──────────────────────────────────────────────────────────────────────────────────
    def tokenize(self, source: str, filename: str = '<string>', config: LexerConfig | None = None, report=None):
        return tokenize(source, filename, config, report=report)

    # Registration ────────────────────────────────────────────────────────────────────────────
    def register_operation(self, name: str, func: Callable) -> None:
        self.library.add_function(name, func)

    # Introspection ───────────────────────────────────────────────────────────────────────────
    def list_operations(self) -> dict[str, NativeOperation]:
        return dict(self.library.natives)

    def to_stack(self, values: list) -> list[Value]:
        return [to_value(v) for v in values]

    def from_stack(self, stack: list[Value]) -> list:
        return [from_value(v) for v in stack]


def demo_program(runtime: Runtime) -> list:
    """30 10 pona 20 ike, i.e. (30 + 10) - 20."""
    return [runtime.literal(30), runtime.literal(10), runtime.native('pona'),
            runtime.literal(20), runtime.native('ike')]
