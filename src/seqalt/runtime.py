## seqalt — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable

from .types import Operation, TernaryResult, DictBuilder, EvalContext
from .parser import tokenize, parse
from .library import Library
from .builtins import load_builtins_library
from .interpreter import evaluate_expr
from .environment import Environment


def _finalize(value: Any) -> Any:
    if isinstance(value, TernaryResult): value = value.value
    if isinstance(value, DictBuilder): return value.finish()
    return value


class Runtime:
    """Minimal runtime facade focused on embedding and extension."""

    def __init__(self, library: Library | None = None, log: Callable[[str], None] | None = None):
        self.library = library or load_builtins_library()
        self.log = log or print

    # Configuration ───────────────────────────────────────────────────────────────────────────
    def set_log_sink(self, log: Callable[[str], None]) -> None:
        """Replace the writer used by `print`; applies to every later evaluation."""
        self.log = log

    # Execution ───────────────────────────────────────────────────────────────────────────────
    def evaluate(self, source: str, verbosity: int = 0, stats: dict | None = None) -> Any:
        """Lex, parse and fold the source in a fresh root environment, returning the final value."""
        tree = parse(tokenize(source))
        env = self.root_environment(verbosity=verbosity, stats=stats)
        return _finalize(evaluate_expr(env, tree))

    def root_environment(self, verbosity: int = 0, stats: dict | None = None) -> Environment:
        context = EvalContext(log=self.log, verbosity=verbosity, stats=stats)
        return self.library.root_environment(context)

    # Registration ────────────────────────────────────────────────────────────────────────────
    def register_operation(self, name: str, func: Callable, binds_left: bool = False) -> None:
        """Add a native operation, called as `func(env, left_value, right_expr)`."""
        meta = {'binds_left': True} if binds_left else {}
        self.library.add_function(name, func, **meta)

    def register_constant(self, name: str, value: Any) -> None:
        self.library.add_constant(name, value)

    # Introspection ───────────────────────────────────────────────────────────────────────────
    def operation(self, name: str) -> Operation:
        return self.library.get_function(name)

    def list_operations(self) -> list[str]:
        return sorted(self.library.operations.keys() | self.library.aliases.keys())

    def is_operation(self, x: Any) -> bool:
        return isinstance(x, Operation)
