## tlpin — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import io

import pytest

from tlpin.lexer import LexerConfig, tokenize
from tlpin.types import Number, Character, Array
from tlpin.errors import TlpinLexError
from tlpin.formatting import (format_token, dump_tokens, format_error, report_error, format_error_context,
                              format_stack, dump_stack, write_without_ansi)


def lines_for(source: str, **options) -> list[str]:
    tokens, _ = tokenize(source, "t.tlpin", LexerConfig(**options))
    return [format_token(t, "t.tlpin") for t in tokens]


def test_each_kind_has_its_diagnostic_line():
    assert lines_for('30 (x)\n') == [
        "t.tlpin(1:0): TOKEN_FLOAT: 30.000000",
        "t.tlpin(1:3): TOKEN_PARENTHESIS: (",
        "t.tlpin(1:4): TOKEN_ATOM: x",
        "t.tlpin(1:5): TOKEN_PARENTHESIS: )",
        "t.tlpin(1:6): TOKEN_NEWLINE",
    ]
    assert lines_for("42", integers=True) == ["t.tlpin(1:0): TOKEN_INTEGER: 42"]
    assert lines_for("{", brackets=True) == ["t.tlpin(1:0): TOKEN_BRACKET: {"]


def test_string_payload_is_re_escaped():
    assert lines_for(r'"a\"b\\c\nd\te"') == [r't.tlpin(1:0): TOKEN_STRING: "a\"b\\c\nd\te"']


def test_atom_payload_is_re_escaped():
    assert lines_for("a\\b") == [r"t.tlpin(1:0): TOKEN_ATOM: a\\b"]


def test_character_payload_is_quoted():
    assert lines_for(r"'\'' '\t' 'z'", characters=True) == [
        r"t.tlpin(1:0): TOKEN_CHARACTER: '\''",
        r"t.tlpin(1:5): TOKEN_CHARACTER: '\t'",
        r"t.tlpin(1:10): TOKEN_CHARACTER: 'z'",
    ]


def test_dump_tokens_writes_one_line_per_token():
    tokens, _ = tokenize("pona 1\n", "t.tlpin")
    out = io.StringIO()
    dump_tokens(tokens, "t.tlpin", file=out)
    assert out.getvalue() == (
        "t.tlpin(1:0): TOKEN_ATOM: pona\n"
        "t.tlpin(1:5): TOKEN_FLOAT: 1.000000\n"
        "t.tlpin(1:6): TOKEN_NEWLINE\n"
    )


def test_error_line_format():
    with pytest.raises(TlpinLexError) as err:
        tokenize('ok "never closed', "prog.tlpin")
    assert format_error(err.value) == "prog.tlpin(1:3): Error: Unterminated string"

    out = io.StringIO()
    report_error(err.value, file=out)
    assert out.getvalue() == "prog.tlpin(1:3): Error: Unterminated string\n"


def test_error_context_highlights_the_line():
    source = "one\ntwo \"three\nfour\n"
    plain = []
    write_without_ansi(plain.append)(format_error_context(source, 2, 4, '"three'))
    assert plain == ["    1 | one\n    2 | two \"three\n    3 | four\n"]
    assert "\033[48;5;30m" in format_error_context(source, 2, 4, '"three')


def test_stack_dump_matches_c_style():
    assert format_stack([Number(20)]) == "20.000000 "
    assert format_stack([Number(1), Array([Character('a'), Array([])])]) == "1.000000 { a { } } "
    assert format_stack([]) == ""


def test_dump_stack(capsys):
    dump_stack([Number(20.0), Number(-0.5)])
    assert capsys.readouterr().out == "Stack dump: 20.000000 -0.500000 \n"
