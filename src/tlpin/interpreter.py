## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

from .types import Native, Defined, Literal
from .formatting import show_program_and_stack


def execute(program: list, stack: list | None = None, verbosity=0, stats=None) -> list:
    """Evaluate function nodes depth-first, left to right, mutating `stack` in place.

    `Defined` nodes run their body against the very same stack; there is no call frame.
    """
    stack = [] if stack is None else stack
    step = 0

    def trace(nodes):
        print(f"\033[90m{step:>3} :\033[0m  ", end='')
        show_program_and_stack(nodes, stack)

    def run(nodes: list):
        nonlocal step
        for i, node in enumerate(nodes):
            if verbosity == 2 or (verbosity == 1 and (isinstance(node, Defined) or step == 0)):
                trace(nodes[i:])
            step += 1

            match node:
                case Literal():
                    stack.append(node.pushed())
                case Native(op=op):
                    try:
                        op.apply(stack)
                    except Exception as exc:
                        exc.tlpin_op = node
                        exc.tlpin_token = op.name
                        if getattr(exc, 'tlpin_stack', None) is None:
                            exc.tlpin_stack = list(stack)
                        raise
                case Defined(body=body):
                    run(body)
                case _:
                    raise TypeError(f"Encountered unexpected function type {type(node).__name__}.")

    run(program)

    if verbosity > 0:
        trace([])
    if stats is not None:
        stats['steps'] = stats.get('steps', 0) + step

    return stack
