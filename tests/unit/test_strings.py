import pytest

import json_parser as jp
import lexer


def test_invalid_hex_escape_reports_offset():
    bad = '["\\u123g"]'
    with pytest.raises(SyntaxError) as ei:
        jp.parse_text(bad)
    msg = str(ei.value)
    assert "invalid hex escape \\u123g" in msg
    assert "offset 2" in msg


def test_short_unicode_escape_reports_offset():
    with pytest.raises(SyntaxError) as ei:
        jp.parse_text('["\\u12"]')
    assert "short unicode escape" in str(ei.value)
    with pytest.raises(SyntaxError):
        jp.parse_text('"\\u005"')


def test_non_hex_unicode_escape_rejected():
    with pytest.raises(SyntaxError):
        jp.parse_text('"\\u0X50"')


@pytest.mark.parametrize("escape", ["\\q", "\\x61", "\\'", "\\0", "\\a", "\\U"])
def test_invalid_single_escape_reports_offset(escape):
    with pytest.raises(SyntaxError) as ei:
        jp.parse_text('["' + escape + '"]')
    assert "invalid escape \\" + escape[1] in str(ei.value)


@pytest.mark.parametrize("value", ["00", "01", "07", "010", "011", "08", "018"])
def test_octal_and_hex_escapes_rejected(value):
    with pytest.raises(SyntaxError):
        jp.parse_text('"\\' + value + '"')
    with pytest.raises(SyntaxError):
        jp.parse_text('"\\x' + value + '"')


@pytest.mark.parametrize("source, expected", [
    ('"value"', "value"),
    ('""', ""),
    ('"\\u2028"', "\u2028"),
    ('"\\u2029"', "\u2029"),
    ('"\\u0001"', "\u0001"),
    ('"\\u0058"', "X"),
    ('"\\b"', "\b"),
    ('"\\f"', "\f"),
    ('"\\n"', "\n"),
    ('"\\r"', "\r"),
    ('"\\t"', "\t"),
    ('"hello\\/world"', "hello/world"),
    ('"hello\\\\world"', "hello\\world"),
    ('"hello\\"world"', 'hello"world'),
])
def test_string_literals_decode(source, expected):
    assert jp.parse_text(source) == expected


def test_escaped_and_raw_surrogate_pairs_decode_identically():
    escaped = jp.parse_text('"\\ud834\\udf06"')
    raw = jp.parse_text('"\U0001d306"')
    assert escaped == raw == "\U0001d306"
    assert jp.parse_text('"\ud834\udf06"') == escaped


def test_lone_surrogate_is_kept():
    assert jp.parse_text('"\\ud800x"') == "\ud800x"
    assert jp.parse_text('"\\udf06\\ud834"') == "\udf06\ud834"


@pytest.mark.parametrize("code", range(0x20))
def test_unescaped_control_character_rejected(code):
    with pytest.raises(SyntaxError) as ei:
        jp.parse_text('"a' + chr(code) + 'b"')
    assert "unescaped control character" in str(ei.value)


def test_unescaped_crlf_rejected():
    with pytest.raises(SyntaxError):
        jp.parse_text('"hello \r\n world"')


def test_unterminated_string_reports_start():
    with pytest.raises(SyntaxError) as ei:
        jp.parse_text('["abc')
    assert "unterminated string starting at offset 1" in str(ei.value)


def test_escaped_quote_does_not_terminate():
    with pytest.raises(SyntaxError) as ei:
        jp.parse_text('"abc\\"')
    assert "unterminated string" in str(ei.value)


def test_backslash_before_control_character():
    with pytest.raises(SyntaxError) as ei:
        jp.parse_text('"line\\\nbreak"')
    assert "unescaped control character" in str(ei.value)


@pytest.mark.parametrize("source", ["'hello'", "{'key': 1}", '"ab' + "c'", "\\u0022abc\\u0022"])
def test_only_double_quotes_delimit_strings(source):
    with pytest.raises(SyntaxError):
        jp.parse_text(source)


def test_decode_string_direct_call():
    # token_start is 0 because the function is tested in isolation.
    assert lexer._decode_string('"a\\tb"', 0, '"a\\tb"') == "a\tb"
    with pytest.raises(SyntaxError) as ei:
        lexer._decode_string('"\\', 0, '"\\')
    assert "unterminated string" in str(ei.value)
