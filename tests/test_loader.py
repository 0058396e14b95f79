## tlpin — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any

import pytest

from tlpin.types import Number, Value
from tlpin.errors import TlpinNameError, TlpinTypeError
from tlpin.loader import get_tlpin_name, get_stack_effects


def test_name_mapping():
    assert get_tlpin_name('op_str_empty_q') == 'str-empty?'
    assert get_tlpin_name('op_print_b') == 'print!'
    with pytest.raises(TlpinNameError):
        get_tlpin_name('add')


def test_stack_effects_are_listed_top_first():
    def op_mix(c: Value, b: Any, a: Number) -> tuple[Number, Value]: return a, c
    meta = get_stack_effects(fn=op_mix)
    assert meta['arity'] == 3
    assert meta['valency'] == 2
    assert meta['inputs'] == (Number, Any, Value)
    assert meta['outputs'] == (Value, Number)


def test_keyword_parameters_are_rejected():
    def op_bad(*, a: Number) -> Number: return a
    with pytest.raises(TlpinTypeError):
        get_stack_effects(fn=op_bad)
