## tlpin — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import copy
from typing import Callable
from dataclasses import dataclass, field


class TokenKind:
    STRING = 'STRING'
    INTEGER = 'INTEGER'
    FLOAT = 'FLOAT'
    ATOM = 'ATOM'
    NEWLINE = 'NEWLINE'
    PARENTHESIS = 'PARENTHESIS'
    CHARACTER = 'CHARACTER'
    BRACKET = 'BRACKET'


## VALUES

@dataclass(frozen=True)
class Number:
    value: float

    def __post_init__(self):
        object.__setattr__(self, 'value', float(self.value))

@dataclass(frozen=True)
class Character:
    value: int  # single byte, 0..255

    def __post_init__(self):
        if isinstance(self.value, str):
            object.__setattr__(self, 'value', ord(self.value))
        if not 0 <= self.value <= 255:
            raise ValueError(f"Character value {self.value} does not fit in a byte.")

@dataclass
class Array:
    items: list = field(default_factory=list)   # list[Value], may nest further Arrays


Value = Number | Character | Array


def to_value(x) -> Value:
    """Wrap plain Python data as stack values: numbers, 1-char strings, and (nested) lists."""
    if isinstance(x, (Number, Character, Array)): return x
    if isinstance(x, bool): raise TypeError("Booleans have no tlpin value representation.")
    if isinstance(x, (int, float)): return Number(x)
    if isinstance(x, str) and len(x) == 1: return Character(x)
    if isinstance(x, (list, tuple)): return Array([to_value(i) for i in x])
    raise TypeError(f"Cannot convert {type(x).__name__} to a tlpin value.")

def from_value(v: Value):
    match v:
        case Number(value=n): return n
        case Character(value=c): return chr(c)
        case Array(items=items): return [from_value(i) for i in items]
    raise TypeError(f"Unexpected value {v!r}.")


## FUNCTIONS

@dataclass(frozen=True)
class NativeOperation:
    """Entry of the native table, resolved by name when a program is assembled."""
    name: str
    arity: int
    valency: int
    inputs: tuple              # expected value types, top of stack first
    outputs: tuple             # pushed value types, top of stack first
    apply: Callable[[list], None]

    def __repr__(self):
        return f"{self.name}"


@dataclass
class Native:
    op: NativeOperation

@dataclass
class Defined:
    body: list = field(default_factory=list)    # list[Function], runs against the caller's stack

@dataclass
class Literal:
    value: Value

    def pushed(self) -> Value:
        return copy.deepcopy(self.value) if isinstance(self.value, Array) else self.value


Function = Native | Defined | Literal
