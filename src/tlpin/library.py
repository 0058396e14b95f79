## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from typing import Any, Callable
from dataclasses import dataclass, field

from .types import NativeOperation
from .errors import TlpinNameError, TlpinStackUnderflow, TlpinTypeMismatch
from .loader import get_stack_effects


@dataclass
class Library:
    natives: dict[str, NativeOperation]
    aliases: dict[str, str] = field(default_factory=dict)

    # Registration helpers
    def add_function(self, name: str, fn: Callable[..., Any]) -> None:
        self.natives[name] = _make_native(fn, name)

    def ensure_consistent(self) -> None:
        for alias, target in self.aliases.items():
            assert target in self.natives, f"Alias `{alias}` points to missing operation `{target}`."

    def get_native(self, name: str) -> NativeOperation:
        resolved_name = self.aliases.get(name, name)
        if (native := self.natives.get(resolved_name)) is not None:
            return native
        raise TlpinNameError(f"Operation `{name}` not found in library.", tlpin_token=name)


def _make_native(fn: Callable[..., Any], name: str) -> NativeOperation:
    meta = get_stack_effects(fn=fn, name=name)
    arity, inputs = meta['arity'], meta['inputs']

    def check(stack: list) -> None:
        if len(stack) < arity:
            raise TlpinStackUnderflow(f"`{name}` needs at least {arity} item(s) on the stack, but {len(stack)} available.",
                                      tlpin_token=name, tlpin_stack=list(stack))
        # Type checks from top downward
        for i, expected_type in enumerate(inputs):
            if expected_type is Any: continue
            if not isinstance(actual := stack[-1 - i], expected_type):
                type_name = getattr(expected_type, '__name__', str(expected_type))
                raise TlpinTypeMismatch(f"`{name}` expects {type_name} at position {i+1} from top, got {type(actual).__name__}.",
                                        tlpin_token=name, tlpin_stack=list(stack))

    def apply(stack: list) -> None:
        check(stack)
        base = len(stack) - arity
        result = fn(*stack[base:])
        del stack[base:]
        match meta['valency'], meta['multiple']:
            case 0, _: pass
            case _, True: stack.extend(result)
            case _, False: stack.append(result)

    return NativeOperation(name=name, arity=arity, valency=meta['valency'], inputs=inputs,
                           outputs=meta['outputs'], apply=apply)
