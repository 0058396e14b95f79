## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Number


## ARITHMETIC
def op_add(b: Number, a: Number) -> Number: return Number(b.value + a.value)
def op_sub(b: Number, a: Number) -> Number: return Number(b.value - a.value)
