## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any

from .types import (Sequence, NumberLiteral, StringLiteral, SymbolRef, NullLiteral, NULL,
                    Operation, Closure, DictBuilder)
from .errors import SeqaltError, TypeMismatchError
from .environment import Environment
from .formatting import format_item, show_step


def truthy(value: Any) -> bool:
    if value is None or value is False: return False
    if isinstance(value, (int, float)) and not isinstance(value, bool): return value != 0
    if isinstance(value, str): return value != ""
    return True


def take_by_name(expr, params: bool = False):
    """Rewrite an operand written in binding position so its bare symbols stand for their own names."""
    match expr:
        case SymbolRef(name=name):
            return StringLiteral(name, expr.line, expr.column)
        case Sequence(kind='(' | '[') if params:
            # Parameter lists like `(a, b)`: operands sit at even positions, operators in between.
            children = tuple(StringLiteral(c.name, c.line, c.column) if i % 2 == 0 and isinstance(c, SymbolRef) else c
                             for i, c in enumerate(expr.children))
            return Sequence(expr.kind, children, expr.line, expr.column)
    return expr


def _operand(env: Environment, children: tuple, index: int, previous: Any):
    expr = children[index]
    if index + 1 >= len(children) or (isinstance(previous, Operation) and previous.branch):
        return expr
    follower = children[index + 1]
    if isinstance(follower, SymbolRef) and isinstance(op := env.get(follower.name), Operation) and op.binds_left:
        return take_by_name(expr, params=op.meta.get('params', False))
    return expr


def evaluate_expr(env: Environment, expr) -> Any:
    match expr:
        case Sequence():
            return evaluate_sequence(env, expr)
        case NumberLiteral(value=value) | StringLiteral(value=value):
            return value
        case SymbolRef(name=name):
            try:
                return env.lookup(name)
            except SeqaltError as exc:
                raise exc.locate(name, expr.line, expr.column)
        case NullLiteral():
            return None
    raise NotImplementedError(f"Cannot evaluate node `{expr!r}`.")


def evaluate_sequence(env: Environment, expr: Sequence) -> Any:
    """Left-to-right fold over (operator, right operand) pairs, right operands passed unevaluated."""
    children = expr.children
    if not children:
        return [] if expr.kind == '[' else None

    acc = evaluate_expr(env, _operand(env, children, 0, None))
    if expr.kind == '[':
        acc = [acc]

    ctx = env.context
    for i in range(1, len(children), 2):
        op_expr = children[i]
        fn = evaluate_expr(env, op_expr)
        right = _operand(env, children, i + 1, fn) if i + 1 < len(children) else NULL

        if ctx.verbosity > 0:
            show_step(ctx.depth, acc, op_expr, right)
        if ctx.stats is not None:
            ctx.stats['steps'] = ctx.stats.get('steps', 0) + 1

        try:
            acc = call_function(env, fn, acc, right)
        except SeqaltError as exc:
            raise exc.locate(getattr(op_expr, 'name', None), op_expr.line, op_expr.column)

    if expr.kind == '{' and isinstance(acc, DictBuilder):
        acc = acc.finish()
    return acc


def call_function(env: Environment, fn: Any, left: Any, right_expr) -> Any:
    match fn:
        case Operation():
            return fn(env, left, right_expr)
        case Closure():
            return call_closure(fn, left, evaluate_expr(env, right_expr))
    raise TypeMismatchError(f"Value `{format_item(fn)}` is not callable.")


def call_closure(closure: Closure, left: Any, argument: Any) -> Any:
    frame = Environment(parent=closure.env)
    frame.declare('args', {'l': left, 'r': argument})

    params = closure.params
    if len(params) > 1 and isinstance(argument, list):
        for i, name in enumerate(params):
            frame.declare(name, argument[i] if i < len(argument) else None)
    elif params:
        frame.declare(params[0], argument)
        for name in params[1:]:
            frame.declare(name)

    ctx = frame.context
    if ctx.stats is not None:
        ctx.stats['calls'] = ctx.stats.get('calls', 0) + 1
    ctx.depth += 1
    try:
        return evaluate_expr(frame, closure.body)
    finally:
        ctx.depth -= 1
