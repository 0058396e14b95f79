## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import sys

from .types import TokenKind, Number, Character, Array, Native, Defined, Literal


STRING_DISPLAY = {'"': '\\"', '\\': '\\\\', '\n': '\\n', '\t': '\\t'}
CHARACTER_DISPLAY = {"'": "\\'", '\\': '\\\\', '\n': '\\n', '\t': '\\t'}


def escape_text(text: str, table: dict = STRING_DISPLAY) -> str:
    return ''.join(table.get(ch, ch) for ch in text)


def format_token(token, source_name: str) -> str:
    """One diagnostic line for a positioned token, without the trailing newline."""
    header = f"{source_name}({token.line}:{token.column}): TOKEN_{token.type}"
    match token.type:
        case TokenKind.STRING:
            return f'{header}: "{escape_text(token.value)}"'
        case TokenKind.ATOM:
            return f'{header}: {escape_text(token.value)}'
        case TokenKind.CHARACTER:
            return f"{header}: '{escape_text(token.value, CHARACTER_DISPLAY)}'"
        case TokenKind.FLOAT:
            return f"{header}: {token.value:f}"
        case TokenKind.INTEGER:
            return f"{header}: {token.value:d}"
        case TokenKind.PARENTHESIS | TokenKind.BRACKET:
            return f"{header}: {token.value}"
        case TokenKind.NEWLINE:
            return header
    raise ValueError(f"Unhandled token type {token.type!r}.")

def dump_tokens(tokens, source_name: str, file=None) -> None:
    file = file or sys.stdout
    for token in tokens:
        file.write(format_token(token, source_name) + '\n')


def format_error(exc) -> str:
    return f"{exc.filename}({exc.line}:{exc.column}): Error: {exc.message}"

def report_error(exc, file=None) -> None:
    print(format_error(exc), file=file or sys.stderr)


def format_error_context(source: str, line: int, column: int, token_value: str = '') -> str:
    """Show the lines around an error, highlighting the offending text on its line (0-based column)."""
    lines = source.splitlines()
    start_line, end_line = max(0, line - 3), min(len(lines), line + 2)
    result = []

    for i in range(start_line, end_line):
        line_content = lines[i]
        line_color = '\033[90m'
        if i+1 == line:
            line_color = '\033[97m'
            width = max(1, len(token_value.split('\n', 1)[0]))
            if 0 <= column < len(line_content):
                line_content = (
                    line_content[:column] +
                    f"\033[48;5;30m\033[1;97m{line_content[column:column+width]}\033[0m" +
                    line_content[column+width:]
                )
        result.append(f"{line_color}{i+1:>5} |\033[0m {line_content}")
    return '\n'.join(result) + '\n'


def write_without_ansi(write_fn):
    """Wrapper function that strips ANSI codes before calling the original writer."""
    ansi_re = re.compile(r'\033\[[0-9;]*m')
    return lambda text: write_fn(ansi_re.sub('', text))


## VALUES & STACKS

def format_value(value) -> str:
    match value:
        case Number(value=n): return f"{n:f}"
        case Character(value=c): return chr(c)
        case Array(items=items): return "{ " + format_stack(items) + "}"
    raise ValueError(f"Encountered unexpected value type {type(value).__name__}.")

def format_stack(stack) -> str:
    """Bottom to top, each item followed by a space."""
    return ''.join(format_value(v) + ' ' for v in stack)

def dump_stack(stack, file=None) -> None:
    print("Stack dump: " + format_stack(stack), file=file or sys.stdout)


def format_function(node) -> str:
    match node:
        case Literal(value=v): return format_value(v)
        case Native(op=op): return op.name
        case Defined(body=body): return '( ' + ' '.join(format_function(n) for n in body) + ' )'
    raise ValueError(f"Encountered unexpected function type {type(node).__name__}.")

def show_program_and_stack(program, stack, width=72, file=None):
    stack_str = format_stack(stack).rstrip() or '∅'
    if len(stack_str) > width:
        stack_str = '… ' + stack_str[-width+2:]
    prog_str = ' '.join(format_function(p) for p in program) if program else '∅'
    if len(prog_str) > width:
        prog_str = prog_str[:+width-2] + ' …'
    print(f"{stack_str:>{width}} \033[36m <=> \033[0m {prog_str:<{width}}", file=file)
