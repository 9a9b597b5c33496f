## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable
from dataclasses import dataclass, field

from .types import Operation, EvalContext
from .errors import UnboundNameError
from .environment import Environment


def get_operation_name(py_name: str) -> str:
    """Operator functions are named `op_<name>` by convention."""
    assert py_name.startswith("op_"), f"Operator function `{py_name}` requires prefix `op_` by convention."
    return py_name[3:]


@dataclass
class Library:
    operations: dict[str, Operation]
    constants: dict[str, Any]
    aliases: dict[str, str] = field(default_factory=dict)

    # Registration helpers
    def add_function(self, name: str, fn: Callable[..., Any], **meta) -> None:
        self.operations[name] = Operation(fn, name, meta)

    def add_constant(self, name: str, value: Any) -> None:
        self.constants[name] = value

    def ensure_consistent(self) -> None:
        for symbol, target in self.aliases.items():
            assert target in self.operations, f"Alias `{symbol}` refers to unknown operation `{target}`."

    def get_function(self, name: str) -> Operation:
        resolved_name = self.aliases.get(name, name)
        if (op := self.operations.get(resolved_name)) is not None:
            return op
        raise UnboundNameError(f"Operation `{name}` not found in library.", token=name)

    def symbols(self) -> dict[str, Any]:
        """Every name visible in a fresh root frame, aliases resolved to their operation."""
        table = {**self.constants, **self.operations}
        for symbol, target in self.aliases.items():
            table[symbol] = self.operations[target]
        return table

    def root_environment(self, context: EvalContext | None = None) -> Environment:
        return Environment(self.symbols(), context=context or EvalContext())
