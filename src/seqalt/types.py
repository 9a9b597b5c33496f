## seqalt — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable, Literal
from dataclasses import dataclass


BracketKind = Literal["(", "[", "{"]

CLOSING_BRACKET: dict[str, str] = {"(": ")", "[": "]", "{": "}"}


@dataclass(frozen=True)
class Token:
    SEQUENCE_START = "SEQUENCE_START"
    SEQUENCE_END = "SEQUENCE_END"
    NUMBER = "NUMBER"
    STRING = "STRING"
    SYMBOL = "SYMBOL"

    type: str
    value: Any                    # bracket character, int, unescaped str, or symbol text
    line: int | None = None
    column: int | None = None


## EXPRESSION NODES
@dataclass(frozen=True)
class Sequence:
    kind: str | None              # None for the implicit top-level group, else "(" "[" "{"
    children: tuple = ()
    line: int | None = None
    column: int | None = None

@dataclass(frozen=True)
class NumberLiteral:
    value: int
    line: int | None = None
    column: int | None = None

@dataclass(frozen=True)
class StringLiteral:
    value: str
    line: int | None = None
    column: int | None = None

@dataclass(frozen=True)
class SymbolRef:
    name: str
    line: int | None = None
    column: int | None = None

@dataclass(frozen=True)
class NullLiteral:
    """Stands in for the missing right operand of a trailing operator."""
    line: int | None = None
    column: int | None = None

NULL = NullLiteral()

Expression = Sequence | NumberLiteral | StringLiteral | SymbolRef | NullLiteral


## RUNTIME VALUES
class Operation:
    """Native operation called as `ptr(env, left_value, right_expr)` with the right side still unevaluated.

    Flags in `meta`:
        binds_left:  a bare symbol written just before this operator is taken by name, not looked up.
        params:      with `binds_left`, a bracketed group before this operator is a parameter list.
        branch:      the right operand is a value branch and is never taken by name.
    """

    def __init__(self, ptr, name, meta={}):
        self.ptr = ptr
        self.name = name
        self.meta = meta

    @property
    def binds_left(self) -> bool:
        return self.meta.get('binds_left', False)

    @property
    def branch(self) -> bool:
        return self.meta.get('branch', False)

    def __call__(self, env, left, right):
        return self.ptr(env, left, right)

    def __hash__(self):
        return hash((self.ptr, self.name))

    def __eq__(self, other):
        return isinstance(other, Operation) and self.ptr == other.ptr

    def __repr__(self):
        return f"{self.name}"


@dataclass(eq=False)
class Closure:
    env: Any                      # captured Environment, shared rather than copied
    params: list[str]
    body: Any                     # unevaluated Expression

    def __repr__(self):
        return f"<closure ({', '.join(self.params)})>"


@dataclass(frozen=True)
class TernaryResult:
    """Produced by `?` when its condition holds; `:` unwraps it instead of evaluating the else-branch."""
    value: Any


class DictBuilder(dict):
    """Dictionary literal still being assembled by `:` and `,`; a `{ }` group finalizes it."""

    def __init__(self, *args, pending_key: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.pending_key = pending_key

    def with_pending_key(self, key: str) -> "DictBuilder":
        return DictBuilder(self, pending_key=key)

    def extended(self, value) -> "DictBuilder":
        result = DictBuilder(self)
        result[self.pending_key] = value
        return result

    def finish(self) -> dict:
        return dict(self)


@dataclass
class EvalContext:
    """Settings shared by every frame of one evaluation."""
    log: Callable[[str], None] = print
    verbosity: int = 0
    stats: dict | None = None
    depth: int = 0                # closure call depth, used for tracing
