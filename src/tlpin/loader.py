## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import inspect
from types import UnionType
from typing import Any, Callable, get_origin, get_args

from .errors import TlpinNameError, TlpinTypeError


def get_tlpin_name(py_name: str) -> str:
    """Map a Python `op_` function name to its tlpin operation name."""
    if not py_name.startswith("op_"):
        raise TlpinNameError(f"Operator function `{py_name}` requires prefix `op_` by convention.", tlpin_token=py_name)
    return py_name[3:].replace('_b', '!').replace('_q', '?').replace('_', '-')


def _normalize_expected_type(tp, op_name: str):
    if tp is Any: return Any
    if isinstance(tp, (type, UnionType)): return tp
    raise TlpinTypeError(f"Operation `{op_name}` uses unsupported type annotation {tp!r}.")


def get_stack_effects(*, fn: Callable, name: str = None) -> dict:
    """Parse the type annotations from Python to determine the stack effects of a native.

    Positional parameters are popped from the stack, bottom-most first; the return annotation
    gives what is pushed back: `None` for nothing, `tuple[...]` for several items, else one.
    """
    sig = inspect.signature(fn)
    op_name = name or getattr(fn, '__name__', '<unnamed>')
    params = list(sig.parameters.values())

    if any(p.kind not in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD) for p in params):
        raise TlpinTypeError(f"Operation `{op_name}` may only take positional parameters.")
    if missing := [p.name for p in params if p.annotation is inspect.Parameter.empty]:
        raise TlpinTypeError(f"Operation `{op_name}` must annotate parameters: {', '.join(missing)}.")

    ret_ann = sig.return_annotation
    if ret_ann is inspect.Signature.empty:
        raise TlpinTypeError(f"Operation `{op_name}` must declare a return annotation.")

    returns_none = (ret_ann is type(None) or ret_ann is None)
    returns_tuple = (get_origin(ret_ann) is tuple)
    if returns_none:
        outputs = []
    else:
        outputs = [_normalize_expected_type(t, op_name) for t in (get_args(ret_ann) if returns_tuple else (ret_ann,))]

    return {
        'arity': len(params),
        'valency': len(outputs),
        'inputs': tuple(reversed([_normalize_expected_type(p.annotation, op_name) for p in params])),
        'outputs': tuple(reversed(outputs)),
        'multiple': returns_tuple,
    }
