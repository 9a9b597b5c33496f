## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# Native operations, all called as `op(env, left, right)`: `left` is the value folded so far and
# `right` the unevaluated syntax node that follows the operator.
#

from typing import Any

from .types import SymbolRef, Closure, TernaryResult, DictBuilder
from .errors import TypeMismatchError
from .environment import Environment
from .interpreter import evaluate_expr, call_closure, truthy
from .formatting import format_item


def _is_number(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)

def _is_index(x: Any) -> bool:
    return isinstance(x, int) and not isinstance(x, bool)

def _kind(x: Any) -> str:
    if x is None: return 'undefined'
    if isinstance(x, bool): return 'boolean'
    if _is_number(x): return 'number'
    if isinstance(x, str): return 'string'
    if isinstance(x, list): return 'array'
    if isinstance(x, dict): return 'dictionary'
    return 'function'

def _numbers(name: str, b: Any, a: Any) -> None:
    if not (_is_number(b) and _is_number(a)):
        raise TypeMismatchError(f"`{name}` expects two numbers, got {_kind(b)} and {_kind(a)}.", token=name)

def _name_operand(env: Environment, right, name: str) -> str:
    """Literal text of a bare symbol, otherwise the evaluated right side, which must be a string."""
    key = right.name if isinstance(right, SymbolRef) else evaluate_expr(env, right)
    if not isinstance(key, str):
        raise TypeMismatchError(f"`{name}` expects a name, got {_kind(key)}.", token=name)
    return key


## SEQUENCING
def op_rem(env, left, right): return left
def op_then(env, left, right): return evaluate_expr(env, right)

## ARITHMETIC
def op_add(env, left, right):
    value = evaluate_expr(env, right)
    if isinstance(left, dict) and isinstance(value, dict):
        return {**left, **value}
    if isinstance(left, str) and isinstance(value, str):
        return left + value
    _numbers('+', left, value)
    return left + value

def op_sub(env, left, right):
    value = evaluate_expr(env, right)
    _numbers('-', left, value)
    return left - value

def op_mul(env, left, right):
    value = evaluate_expr(env, right)
    _numbers('*', left, value)
    return left * value

## COMPARISON
def strict_equal(b: Any, a: Any) -> bool:
    if (kind := _kind(b)) != _kind(a): return False
    return b is a if kind == 'function' else b == a

def _ordered(name: str, b: Any, a: Any) -> None:
    if not ((_is_number(b) and _is_number(a)) or (isinstance(b, str) and isinstance(a, str))):
        raise TypeMismatchError(f"`{name}` compares two numbers or two strings, got {_kind(b)} and {_kind(a)}.", token=name)

def op_equal(env, left, right): return strict_equal(left, evaluate_expr(env, right))
def op_differ(env, left, right): return not strict_equal(left, evaluate_expr(env, right))

def op_lt(env, left, right):
    value = evaluate_expr(env, right)
    _ordered('<', left, value)
    return left < value

def op_lte(env, left, right):
    value = evaluate_expr(env, right)
    _ordered('<=', left, value)
    return left <= value

def op_gt(env, left, right):
    value = evaluate_expr(env, right)
    _ordered('>', left, value)
    return left > value

def op_gte(env, left, right):
    value = evaluate_expr(env, right)
    _ordered('>=', left, value)
    return left >= value

## BINDING
def op_var(env: Environment, left, right):
    name = _name_operand(env, right, 'var')
    env.declare(name)
    return name

def op_assign(env: Environment, left, right):
    match left:
        case [target, key]:
            return _store(target, key, _stored(evaluate_expr(env, right)))
        case str():
            return env.assign(left, _stored(evaluate_expr(env, right)))
    raise TypeMismatchError(f"`=` expects a name or a [target, key] pair, got {_kind(left)}.", token='=')

def _stored(value: Any) -> Any:
    # Bound values are complete; a later `,` or `:` on them must not resume the protocol.
    if isinstance(value, TernaryResult): value = value.value
    return value.finish() if isinstance(value, DictBuilder) else value

def _store(target: Any, key: Any, value: Any) -> Any:
    if isinstance(target, dict) and isinstance(key, str):
        target[key] = value
    elif isinstance(target, list) and _is_index(key) and 0 <= key <= len(target):
        if key == len(target): target.append(value)
        else: target[key] = value
    else:
        raise TypeMismatchError(f"Cannot store into {_kind(target)} with {_kind(key)} key `{format_item(key)}`.", token='=')
    return value

def op_deref(env: Environment, left, right):
    return env.lookup(_name_operand(env, right, '$'))

def op_lambda(env: Environment, left, right):
    match left:
        case None: params = []
        case str(): params = [left]
        case list() if all(isinstance(p, str) for p in left): params = list(left)
        case _:
            raise TypeMismatchError(f"`=>` expects parameter names, got {format_item(left)}.", token='=>')
    return Closure(env, params, right)

## ACCESS & CONSTRUCTION
def op_member(env: Environment, left, right):
    key = right.name if isinstance(right, SymbolRef) else evaluate_expr(env, right)
    if isinstance(left, dict) and isinstance(key, str):
        return left.get(key)
    if isinstance(left, (list, str)) and _is_index(key):
        return left[key] if 0 <= key < len(left) else None
    raise TypeMismatchError(f"Cannot index {_kind(left)} with {_kind(key)} key `{format_item(key)}`.", token='.')

def op_comma(env: Environment, left, right):
    value = evaluate_expr(env, right)
    match left:
        case DictBuilder():
            if not isinstance(value, str):
                raise TypeMismatchError(f"Dictionary keys must be strings, got {_kind(value)}.", token=',')
            return left.with_pending_key(value)
        case list():
            return [*left, value]
    return [left, value]

def op_colon(env: Environment, left, right):
    match left:
        case False:                                                 # Else-branch of a failed `?`.
            return evaluate_expr(env, right)
        case TernaryResult(value=value):                            # Then-branch, evaluated by `?`.
            return value
        case DictBuilder() if left.pending_key is not None:         # Extend with the key from `,`.
            return left.extended(evaluate_expr(env, right))
        case str():                                                 # Begin a dictionary literal.
            return DictBuilder({left: evaluate_expr(env, right)})
    raise TypeMismatchError(f"`:` cannot follow {_kind(left)} `{format_item(left)}`.", token=':')

## BOOLEAN LOGIC
def op_and(env, left, right): return evaluate_expr(env, right) if truthy(left) else left
def op_or(env, left, right): return left if truthy(left) else evaluate_expr(env, right)
def op_if(env, left, right): return TernaryResult(evaluate_expr(env, right)) if truthy(left) else False

## COLLECTIONS
def op_length(env, left, right):
    value = evaluate_expr(env, right)
    if not isinstance(value, (list, str, dict)):
        raise TypeMismatchError(f"`length` expects an array, string or dictionary, got {_kind(value)}.", token='length')
    return len(value)

def op_range(env, left, right):
    count = evaluate_expr(env, right)
    if not _is_index(count) or count < 0:
        raise TypeMismatchError(f"`range` expects a non-negative integer, got `{format_item(count)}`.", token='range')
    return list(range(count))

def op_map(env, left, right):
    if not isinstance(left, list):
        raise TypeMismatchError(f"`map` expects an array on the left, got {_kind(left)}.", token='map')
    fn = evaluate_expr(env, right)
    if not isinstance(fn, Closure):
        raise TypeMismatchError(f"`map` expects a function on the right, got {_kind(fn)}.", token='map')
    return [call_closure(fn, None, item) for item in left]

## OUTPUT
def op_print(env: Environment, left, right):
    value = left if left is not None else evaluate_expr(env, right)
    env.context.log(format_item(value))
    return None
