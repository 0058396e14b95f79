## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import re
import math
from typing import Callable
from dataclasses import dataclass

import lark

from .types import TokenKind
from .errors import TlpinLexError, TlpinEscapeError, TlpinUnterminatedError, TlpinTokenSizeError, TlpinNumberRangeError
from .formatting import report_error


MAX_TOKEN_SIZE = 256
INT64_MIN, INT64_MAX = -2**63, 2**63 - 1

INTEGER = re.compile(r'[+-]?[0-9]+')
FLOAT = re.compile(r'[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)', re.IGNORECASE)
NONZERO_MANTISSA = re.compile(r'^[^eE]*[1-9]')

STRING_ESCAPES = {'"': '"', '\\': '\\', 'n': '\n', 't': '\t'}
CHARACTER_ESCAPES = {"'": "'", '\\': '\\', 'n': '\n', 't': '\t'}


@dataclass(frozen=True)
class LexerConfig:
    max_token_size: int = MAX_TOKEN_SIZE
    integers: bool = False          # try INTEGER before FLOAT when flushing
    characters: bool = False        # lex 'c' literals as CHARACTER
    brackets: bool = False          # lex { } as BRACKET
    collect_errors: bool = False    # report recoverable errors and keep going


def classify(text: str, integers: bool = False) -> tuple[str, object, str | None]:
    """Decide what a pending lexeme is, most restrictive form first.

    Returns `(kind, value, problem)` where `problem` is "overflow" or "underflow" when the
    whole text is numeric but its value does not fit; anything non-numeric is an ATOM.
    """
    if integers and INTEGER.fullmatch(text):
        # More significant digits than INT64 has saturates like strtol, without converting.
        negative, digits = text.startswith('-'), text.lstrip('+-').lstrip('0') or '0'
        if len(digits) > len(str(INT64_MAX)):
            if negative: return TokenKind.INTEGER, INT64_MIN, 'underflow'
            return TokenKind.INTEGER, INT64_MAX, 'overflow'
        value = -int(digits) if negative else int(digits)
        if value > INT64_MAX: return TokenKind.INTEGER, INT64_MAX, 'overflow'
        if value < INT64_MIN: return TokenKind.INTEGER, INT64_MIN, 'underflow'
        return TokenKind.INTEGER, value, None

    if FLOAT.fullmatch(text):
        value = float(text)
        if math.isinf(value) and 'inf' not in text.lower():
            return TokenKind.FLOAT, value, 'overflow'
        if value == 0.0 and NONZERO_MANTISSA.match(text):
            return TokenKind.FLOAT, value, 'underflow'
        return TokenKind.FLOAT, value, None

    return TokenKind.ATOM, text, None


class Lexer:
    """Single pass over the source, one character at a time, keeping track of line and column.

    Multi-character lexemes (atoms and numbers) are accumulated in `pending` and only classified
    when a boundary flushes them; `start` holds where the first pending character was seen, and
    is `None` exactly when nothing is pending.
    """

    def __init__(self, source: str, source_name: str = '<string>', config: LexerConfig | None = None,
                 report: Callable[[TlpinLexError], None] | None = None):
        self.source = source
        self.filename = source_name
        self.config = config or LexerConfig()
        self.report = report or report_error

        self.index = 0
        self.line, self.column = 1, 0
        self.pending: list[str] = []
        self.start: tuple[int, int, int] | None = None
        self.tokens: list[lark.Token] = []
        self.failed = False

    def _here(self) -> tuple[int, int, int]:
        return (self.line, self.column, self.index)

    def _consume(self, ch: str) -> None:
        self.index += 1
        if ch == '\n':
            self.line, self.column = self.line + 1, 0
        else:
            self.column += 1

    def _emit(self, kind: str, value, start: tuple[int, int, int]) -> None:
        line, column, index = start
        self.tokens.append(lark.Token(kind, value, start_pos=index, line=line, column=column,
                                      end_line=self.line, end_column=self.column, end_pos=self.index))

    def _fail(self, exc: TlpinLexError) -> None:
        if not self.config.collect_errors:
            raise exc
        self.failed = True
        self.report(exc)

    def run(self) -> list[lark.Token]:
        source, config = self.source, self.config
        while self.index < len(source):
            ch = source[self.index]
            if ch == '\n':
                self.flush()
                start = self._here()
                self.index += 1
                self.column += 1
                self._emit(TokenKind.NEWLINE, ch, start)
                self.line, self.column = self.line + 1, 0
            elif ch in '()' or (config.brackets and ch in '{}'):
                self.flush()
                start = self._here()
                self._consume(ch)
                self._emit(TokenKind.PARENTHESIS if ch in '()' else TokenKind.BRACKET, ch, start)
            elif ch == '"':
                self.flush()
                self._lex_string()
            elif ch == "'" and config.characters:
                self.flush()
                self._lex_character()
            elif ch in ' \t':
                self.flush()
                self._consume(ch)
            else:
                self._accumulate(ch)

        self.flush()
        return self.tokens

    def _accumulate(self, ch: str) -> None:
        if len(self.pending) >= self.config.max_token_size:
            text = ''.join(self.pending)
            raise TlpinTokenSizeError(
                f"Encountered token larger than the maximum allowed size {self.config.max_token_size}: {text}",
                filename=self.filename, line=self.line, column=self.column, token=text)
        if self.start is None:
            self.start = self._here()
        self.pending.append(ch)
        self._consume(ch)

    def flush(self) -> None:
        """Classify and emit the pending lexeme, if there is one."""
        if not self.pending: return

        text = ''.join(self.pending)
        line, column, _ = self.start
        kind, value, problem = classify(text, integers=self.config.integers)
        if problem is not None:
            noun = 'Integer' if kind == TokenKind.INTEGER else 'Float'
            self._fail(TlpinNumberRangeError(f"{noun} conversion of '{text}' results in {problem}", kind=problem,
                                             filename=self.filename, line=line, column=column, token=text))
            kind, value = TokenKind.ATOM, text

        self._emit(kind, value, self.start)
        self.pending.clear()
        self.start = None

    def _lex_string(self) -> None:
        source = self.source
        start = self._here()
        self._consume('"')

        chars = []
        while self.index < len(source):
            ch = source[self.index]
            if ch == '"':
                self._consume(ch)
                self._emit(TokenKind.STRING, ''.join(chars), start)
                return
            if ch != '\\':
                chars.append(ch)
                self._consume(ch)
                continue

            if self.index + 1 >= len(source): break
            escaped = source[self.index + 1]
            if escaped in STRING_ESCAPES:
                chars.append(STRING_ESCAPES[escaped])
            else:
                self._fail(TlpinEscapeError(f"Unknown escape sequence '\\{escaped}'", filename=self.filename,
                                            line=self.line, column=self.column, token='\\' + escaped))
            self._consume(ch)
            self._consume(escaped)

        raise TlpinUnterminatedError("Unterminated string", filename=self.filename,
                                     line=start[0], column=start[1], token=source[start[2]:])

    def _lex_character(self) -> None:
        source = self.source
        start = self._here()

        def unterminated():
            return TlpinUnterminatedError("Unterminated character literal", filename=self.filename,
                                          line=start[0], column=start[1], token=source[start[2]:self.index])

        self._consume("'")
        if self.index >= len(source): raise unterminated()
        value = source[self.index]

        if value == '\\':
            self._consume(value)
            if self.index >= len(source): raise unterminated()
            escaped = source[self.index]
            if escaped in CHARACTER_ESCAPES:
                value = CHARACTER_ESCAPES[escaped]
            else:
                self._fail(TlpinEscapeError(f"Unknown escape sequence '\\{escaped}'", filename=self.filename,
                                            line=self.line, column=self.column, token='\\' + escaped))
                value = escaped
            self._consume(escaped)
        else:
            self._consume(value)

        if self.index >= len(source) or source[self.index] != "'": raise unterminated()
        self._consume("'")
        self._emit(TokenKind.CHARACTER, value, start)


def tokenize(source: str, source_name: str = '<string>', config: LexerConfig | None = None,
             report: Callable[[TlpinLexError], None] | None = None) -> tuple[list[lark.Token], bool]:
    """Run the lexer to completion over `source`.

    Errors raise immediately, unless `config.collect_errors` is set: then recoverable ones go to
    `report` and the returned `failed` flag tells whether any occurred.
    """
    lexer = Lexer(source, source_name, config, report=report)
    tokens = lexer.run()
    return tokens, lexer.failed
