import pytest

import json_parser as jp
from lexer import LookAhead, Token, lex

INVALID_SPACES = [
    "\u00a0", "\u1680", "\u180e", "\u2000", "\u2001", "\u2002", "\u2003",
    "\u2004", "\u2005", "\u2006", "\u2007", "\u2008", "\u2009", "\u200a",
    "\u200b", "\u202f", "\u205f", "\u3000", "\u2028", "\u2029",
    "\u000b", "\u000c", "\ufeff",
]


@pytest.mark.parametrize("ch", INVALID_SPACES)
def test_only_four_whitespace_characters(ch):
    with pytest.raises(SyntaxError) as ei:
        jp.parse_text("{" + ch + "}")
    assert "invalid character" in str(ei.value)
    assert "offset 1" in str(ei.value)
    with pytest.raises(SyntaxError):
        jp.parse_text(ch + "1234")


@pytest.mark.parametrize("source", ["{\r\n}", "{\n\n\r\n}", "{\t}", "{ }"])
def test_valid_whitespace(source):
    assert jp.parse_text(source) == {}


@pytest.mark.parametrize("value", ["00", "01", "02", "03", "04", "05", "06", "07", "010", "011", "08", "018"])
def test_octal_literals_rejected(value):
    with pytest.raises(SyntaxError):
        jp.parse_text(value)
    with pytest.raises(SyntaxError):
        jp.parse_text("-" + value)


@pytest.mark.parametrize("source, expected", [
    ("100", 100),
    ("-100", -100),
    ("10.5", 10.5),
    ("-3.141", -3.141),
    ("0.625", 0.625),
    ("-0.03125", -0.03125),
    ("1e3", 1000),
    ("1e+2", 100),
    ("-1e-2", -0.01),
    ("0.03125e+5", 3125),
    ("1E2", 100),
    ("0", 0),
    ("-0", 0),
])
def test_numeric_literals(source, expected):
    assert jp.parse_text(source) == expected


def test_integral_literals_stay_int():
    assert type(jp.parse_text("42")) is int
    assert type(jp.parse_text("42.0")) is float
    assert type(jp.parse_text("4e1")) is float
    assert jp.parse_text("123456789012345678901234567890") == 123456789012345678901234567890


@pytest.mark.parametrize("source", ["+1", "1.", ".1", "1e", "1e-", "1e+", "--1", "1-+", "0xaf", "- 5", "-", "1.e5", "\u0661\u0662"])
def test_malformed_numbers_rejected(source):
    with pytest.raises(SyntaxError):
        jp.parse_text(source)


def test_lex_yields_tokens_with_offsets():
    tokens = list(lex('{"a": [1, true]}'))
    assert tokens == [
        Token("BRACE", "{", 0),
        Token("STRING", "a", 1),
        Token("COLON", ":", 4),
        Token("BRACKET", "[", 6),
        Token("NUMBER", 1, 7),
        Token("COMMA", ",", 8),
        Token("LITERAL", True, 10),
        Token("BRACKET", "]", 14),
        Token("BRACE", "}", 15),
    ]
    assert tokens[1].kind == "STRING"
    assert tokens[4].offset == 7


def test_lex_is_lazy():
    tokens = lex("[1, @]")
    assert next(tokens) == Token("BRACKET", "[", 0)
    assert next(tokens) == Token("NUMBER", 1, 1)
    assert next(tokens) == Token("COMMA", ",", 2)
    with pytest.raises(SyntaxError) as ei:
        next(tokens)
    assert "invalid character '@' at offset 4" in str(ei.value)


def test_lookahead_peek_does_not_consume():
    la = LookAhead(iter([Token("COMMA", ",", 0), Token("COLON", ":", 1)]))
    assert la.peek().kind == "COMMA"
    assert la.peek().kind == "COMMA"
    assert next(la).kind == "COMMA"
    assert next(la).kind == "COLON"
    with pytest.raises(StopIteration):
        la.peek()
