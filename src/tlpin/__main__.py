## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# tlpin — A toy stack language: tokenizer and tree-walking execution engine.
#

import sys
import time
from dataclasses import dataclass

import click

from .errors import TlpinError, TlpinLexError
from .lexer import LexerConfig, MAX_TOKEN_SIZE
from .formatting import write_without_ansi, dump_tokens, dump_stack, format_error, format_error_context, format_stack
from .runtime import Runtime, demo_program


READ_CHUNK_SIZE = 1024
SOURCE_ENCODING = 'latin-1'  # one character per byte, so columns count bytes


def read_all(stream, chunk_size: int = READ_CHUNK_SIZE) -> bytes:
    chunks = []
    while chunk := stream.read(chunk_size):
        chunks.append(chunk)
    return b''.join(chunks)


@dataclass(frozen=True)
class RunnerConfig:
    verbose: int
    plain: bool
    stats: bool
    context: bool


class TlpinRunner:
    def __init__(self, config: RunnerConfig):
        self.verbose = config.verbose
        self.context = config.context
        self.stats_enabled = config.stats
        self.plain = config.plain

        if self.plain:
            sys.stdout.write = write_without_ansi(sys.stdout.write)
            sys.stderr.write = write_without_ansi(sys.stderr.write)

        self.runtime = Runtime()
        self.total_stats = {'steps': 0, 'start': time.time()} if self.stats_enabled else None
        self.failure = False

    def _report_lex_error(self, exc: TlpinLexError, source: str) -> None:
        print(format_error(exc), file=sys.stderr)
        if self.context and exc.line is not None:
            print(format_error_context(source, exc.line, exc.column, exc.token or ''), end='', file=sys.stderr)

    def lex(self, source: str, filename: str, lexer_config: LexerConfig) -> None:
        try:
            tokens, failed = self.runtime.tokenize(source, filename, lexer_config,
                                                   report=lambda exc: self._report_lex_error(exc, source))
        except TlpinLexError as exc:
            self._report_lex_error(exc, source)
            self.failure = True
            return

        if failed:
            self.failure = True
            return
        dump_tokens(tokens, filename)

    def execute(self, program: list) -> None:
        stack = []
        try:
            self.runtime.run(program, stack, verbosity=self.verbose, stats=self.total_stats)
        except TlpinError as exc:
            print(f'\033[30;43m RUNTIME ERROR. \033[0m Function \033[1;97m`{exc.tlpin_token}`\033[0m caused an error! (Exception: \033[33m{type(exc).__name__}\033[0m)', file=sys.stderr)
            print(f'  {exc}', file=sys.stderr)
            print(f'\033[1;33m  Stack content is\033[0;33m\n    {format_stack(exc.tlpin_stack or [])}\033[0m', file=sys.stderr)
            self.failure = True
            return
        dump_stack(stack)

    def finalize(self) -> int:
        if self.total_stats:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m")
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m")
        return 1 if self.failure else 0


@click.group()
@click.option('--verbose', '-v', default=0, count=True, help='Trace the execution engine step by step.')
@click.option('--stats', is_flag=True, help='Display execution statistics (e.g., number of steps).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes from all output.')
@click.option('--context', is_flag=True, help='Show the surrounding source lines for lexer errors.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, stats: bool, plain: bool, context: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = RunnerConfig(verbose=verbose, plain=plain, stats=stats, context=context)


@cli.command('lex')
@click.argument('source', type=click.File('rb'))
@click.option('--name', default=None, help='Source name used in diagnostics; defaults to the file name.')
@click.option('--max-token-size', type=click.IntRange(min=1), default=MAX_TOKEN_SIZE, show_default=True,
              envvar='TLPIN_MAX_TOKEN_SIZE', help='Longest atom or number allowed, in characters.')
@click.option('--integers', is_flag=True, help='Classify whole numbers as INTEGER before trying FLOAT.')
@click.option('--characters', is_flag=True, help="Lex 'c' character literals.")
@click.option('--brackets', is_flag=True, help='Lex { and } as BRACKET tokens.')
@click.option('--collect-errors', is_flag=True, help='Report every recoverable error before failing.')
@click.pass_context
def lex(ctx: click.Context, source, name: str | None, max_token_size: int,
        integers: bool, characters: bool, brackets: bool, collect_errors: bool) -> None:
    runner = TlpinRunner(ctx.obj['config'])
    config = LexerConfig(max_token_size=max_token_size, integers=integers, characters=characters,
                         brackets=brackets, collect_errors=collect_errors)
    filename = name or (source.name if source.name not in ('-', '<stdin>') else '<STDIN>')
    runner.lex(read_all(source).decode(SOURCE_ENCODING), filename, config)
    ctx.exit(runner.finalize())


@cli.command('run')
@click.pass_context
def run(ctx: click.Context) -> None:
    runner = TlpinRunner(ctx.obj['config'])
    runner.execute(demo_program(runner.runtime))
    ctx.exit(runner.finalize())


def _type_names(types: tuple) -> str:
    """Bottom of the stack first, as stack effects are written."""
    return ' '.join(getattr(t, '__name__', None) or str(t).replace('typing.', '') for t in reversed(types))


@cli.command('ops')
@click.pass_context
def ops(ctx: click.Context) -> None:
    runtime = Runtime()
    aliases = runtime.library.aliases
    for name, op in sorted(runtime.list_operations().items()):
        also = ' '.join(sorted(a for a, target in aliases.items() if target == name))
        signature = f"{_type_names(op.inputs)} -- {_type_names(op.outputs)}"
        print(f"{name}\t( {signature} )" + (f"\t({also})" if also else ''))


def main(argv: list[str] | None = None) -> None:
    cli.main(args=argv, prog_name='tlpin')


if __name__ == "__main__":
    main()
