## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from . import operators
from .library import Library, get_operation_name


def load_builtins_library():
    constants = {'@': None, 'true': True, 'false': False}
    aliases = {
        '#': 'rem', ';': 'then',
        '+': 'add', '-': 'sub', '*': 'mul',
        '==': 'equal', '!=': 'differ', '<': 'lt', '<=': 'lte', '>': 'gt', '>=': 'gte',
        '=': 'assign', '$': 'deref', '=>': 'lambda', '.': 'member', ',': 'comma', ':': 'colon',
        '&&': 'and', '||': 'or', '?': 'if',
        'forEach': 'map',
    }
    # Left operands of these are binding targets; the right operand of `if` is a value branch.
    meta = {'assign': {'binds_left': True}, 'lambda': {'binds_left': True, 'params': True}, 'colon': {'binds_left': True},
            'if': {'branch': True}}

    lib = Library(operations={}, constants=constants, aliases=aliases)

    for k in dir(operators):
        if not k.startswith('op_'): continue
        name = get_operation_name(k)
        lib.add_function(name, getattr(operators, k), **meta.get(name, {}))

    lib.ensure_consistent()
    return lib
