## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re

from .types import (Sequence, NumberLiteral, StringLiteral, SymbolRef, NullLiteral,
                    Operation, Closure, TernaryResult, CLOSING_BRACKET)


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))

def _quote(text: str) -> str:
    return '"' + text.replace('\\', '\\\\').replace('"', '\\"') + '"'

def _format_item(it, width=None, indent=0):
    if isinstance(it, (list, dict)):
        if isinstance(it, list):
            lhs, rhs = '[', ']'
            formatted_items = [_format_item(i, width, indent + 4) for i in it]
        else:
            lhs, rhs = '{', '}'
            formatted_items = [f"{k}: {_format_item(v, width, indent + 4)}" for k, v in it.items()]
        single_line = lhs + ', '.join(formatted_items) + rhs
        # If it fits on one line, use single line format.
        if width is None or len(single_line) + indent <= width: return single_line
        # Otherwise use multi-line format...
        result = lhs + '   '
        for i, item in enumerate(formatted_items):
            if i > 0: result += ',\n' + (' ' * (indent + 4))
            result += item
        result += '\n' + (' ' * indent) + rhs
        return result
    if isinstance(it, str): return _quote(it) if indent > 0 else it
    if isinstance(it, bool): return str(it).lower()
    if it is None: return 'undefined'
    if isinstance(it, Operation): return f'<native {it.name}>'
    if isinstance(it, TernaryResult): return _format_item(it.value, width, indent)
    return repr(it) if isinstance(it, Closure) else str(it)

def format_item(it, width=None, indent=0):
    return _format_item(it, width=width, indent=indent)

def format_result(it, width=None):
    """Like `format_item`, but strings stay quoted so results read back as literals."""
    return _quote(it) if isinstance(it, str) else _format_item(it, width=width)


def format_expr(expr) -> str:
    """Render a syntax node back into source-like text."""
    match expr:
        case Sequence(kind=None):
            return ' '.join(format_expr(c) for c in expr.children)
        case Sequence():
            return expr.kind + ' '.join(format_expr(c) for c in expr.children) + CLOSING_BRACKET[expr.kind]
        case NumberLiteral(value=value): return str(value)
        case StringLiteral(value=value): return _quote(value)
        case SymbolRef(name=name): return name
        case NullLiteral(): return '∅'
    return repr(expr)

def show_step(depth, acc, op_expr, right, width=72):
    right_str = format_expr(right)
    if len(right_str) > width:
        right_str = right_str[:width-2] + ' …'
    print(f"\033[90m{depth:>3} :\033[0m  {format_result(acc):>{width // 2}} \033[36m{format_expr(op_expr)}\033[0m {right_str}")
