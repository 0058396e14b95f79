## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from . import operators
from .loader import get_tlpin_name
from .library import Library


def load_builtins_library():
    aliases = {
        'pona': 'add', 'ike': 'sub',
        '+': 'add', '-': 'sub',
    }
    lib = Library(natives={}, aliases=aliases)

    for k in dir(operators):
        if not k.startswith('op_'): continue
        lib.add_function(get_tlpin_name(k), getattr(operators, k))

    lib.ensure_consistent()
    return lib
