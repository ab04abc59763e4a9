# lexer.py
# Strict JSON lexer for the prim codec.
#
# =============================================================================
#  LEXER IMPLEMENTATION: ONE REGEX, ONE PASS
# =============================================================================
#
# The lexer is a single compiled regex with named groups driven by finditer.
# Every character of the source must be covered by a match; any gap is a
# lexical error at the first uncovered offset [craftinginterpreters.com, Scanning].
#
# Grammar notes:
# 1. Insignificant whitespace is exactly TAB, LF, CR and SPACE [RFC 8259, 2].
#    NBSP, BOM, U+2028/U+2029, VT, FF and the other Unicode separators are
#    gaps and therefore errors.
# 2. Digit classes are spelled [0-9]; \d would admit non-ASCII digits.
# 3. Numbers have no leading zeros, no leading '+', no bare '.', and an
#    exponent needs at least one digit [RFC 8259, 6]. A malformed tail such
#    as the '8' in '08' or the '.' in '1.' is left uncovered, or becomes a
#    second value the parser rejects.
# 4. The string pattern never fails once it sees a quote: it stops at a
#    control character or end of input, and _decode_string reports which.
#
# The lexer never evaluates text: it can only yield the token kinds below.
#
# =============================================================================
#  REFERENCES
# =============================================================================
# [1] RFC 8259 - The JavaScript Object Notation (JSON) standard
# [2] craftinginterpreters.com - Scanning
# [3] ECMA-262 5.1 - 15.12.1 The JSON Grammar
# =============================================================================

import re
from typing import Any, Iterator, List, NamedTuple

# ---------------------------------------------------------------------------
# REGEX BLUEPRINT
# ---------------------------------------------------------------------------
_WHITESPACE = r"[\t\n\r ]+"
_NUMBER     = r"-?(?:0|[1-9][0-9]*)(?:\.[0-9]+)?(?:[eE][+-]?[0-9]+)?"
_ESCAPE     = r"\\[^\x00-\x1F]?"
_STRING     = r'"(?:[^"\\\x00-\x1F]|' + _ESCAPE + r')*"?'
_LITERAL    = r"true|false|null"

_TOKEN_RE = re.compile(
    rf"(?P<STRING>{_STRING})|"
    rf"(?P<NUMBER>{_NUMBER})|"
    rf"(?P<LITERAL>{_LITERAL})|"
    r"(?P<BRACE>[{}])|"          # { or }
    r"(?P<BRACKET>[\[\]])|"      # [ or ]
    r"(?P<COMMA>,)|"
    r"(?P<COLON>:)|"
    rf"(?P<WHITESPACE>{_WHITESPACE})",
)

_HEX_DIGITS     = frozenset("0123456789abcdefABCDEF")
_SIMPLE_ESCAPES = {
    '"': '"', "\\": "\\", "/": "/",
    "b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t",
}
_SURROGATE_PAIR_RE = re.compile("[\ud800-\udbff][\udc00-\udfff]")
_LITERALS = {"true": True, "false": False, "null": None}

# ---------------------------------------------------------------------------
# TOKEN RECORD
# ---------------------------------------------------------------------------
class Token(NamedTuple):
    """
    Immutable token record: (kind, value, absolute_offset).

    STRING and NUMBER tokens carry decoded Python values; punctuation carries
    its own character. Offsets exist only for error messages.
    """
    kind: str
    value: Any
    offset: int

# ---------------------------------------------------------------------------
# LOOKAHEAD RING
# ---------------------------------------------------------------------------
class LookAhead:
    """
    One-slot pushback iterator.

    LL(1) parsing needs exactly one token of lookahead [geeksforgeeks.org,
    Top Down Parsing].
    """
    def __init__(self, iterable: Iterator[Token]):
        self._iter = iter(iterable)
        self._buf: List[Token] = []

    def __iter__(self):
        return self

    def __next__(self):
        if self._buf:
            return self._buf.pop()
        return next(self._iter)

    def peek(self) -> Token:
        if not self._buf:
            self._buf.append(next(self._iter))
        return self._buf[-1]

# ---------------------------------------------------------------------------
# STRING DECODING
# ---------------------------------------------------------------------------
def _join_pair(match: "re.Match") -> str:
    high, low = match.group()
    return chr(0x10000 + ((ord(high) - 0xD800) << 10) + (ord(low) - 0xDC00))


def _decode_string(raw: str, token_start: int, text: str) -> str:
    """
    Validate and unescape one string token.

    Error classes, each with the offending offset:
    1) Structure - unescaped control character, unterminated string.
    2) Escape syntax - unknown escape, short or non-hex unicode escape.

    Surrogate pairs are joined whether they were escaped or raw, so both
    spellings of a supplementary-plane character decode identically. Lone
    surrogates are kept as they are.
    """
    # The closing quote is the first unescaped quote after the opening one.
    i, n = 1, len(raw)
    while i < n and raw[i] != '"':
        i += 2 if raw[i] == "\\" else 1
    if i >= n:
        stop = token_start + n
        if stop < len(text):
            raise SyntaxError(f"unescaped control character {text[stop]!r} in string at offset {stop}")
        raise SyntaxError(f"unterminated string starting at offset {token_start}")

    inner = raw[1:-1]
    if "\\" not in inner:
        return _SURROGATE_PAIR_RE.sub(_join_pair, inner)

    out: List[str] = []
    i, n = 0, len(inner)
    while i < n:
        ch = inner[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue
        esc = inner[i + 1]
        if esc == "u":
            hexpart = inner[i + 2:i + 6]
            if len(hexpart) < 4:
                raise SyntaxError(f"short unicode escape at offset {token_start + 1 + i}")
            if not all(c in _HEX_DIGITS for c in hexpart):
                raise SyntaxError(f"invalid hex escape \\u{hexpart} at offset {token_start + 1 + i}")
            out.append(chr(int(hexpart, 16)))
            i += 6
        elif esc in _SIMPLE_ESCAPES:
            out.append(_SIMPLE_ESCAPES[esc])
            i += 2
        else:
            raise SyntaxError(f"invalid escape \\{esc} at offset {token_start + 1 + i}")
    return _SURROGATE_PAIR_RE.sub(_join_pair, "".join(out))


def _decode_number(raw: str):
    """Integral literals stay int; a fraction or exponent makes a float."""
    if "." in raw or "e" in raw or "E" in raw:
        return float(raw)
    try:
        return int(raw)
    except ValueError:
        # past sys.get_int_max_str_digits()
        return float(raw)

# ---------------------------------------------------------------------------
# TOKEN STREAM
# ---------------------------------------------------------------------------
def lex(text: str) -> Iterator[Token]:
    """
    Single-pass generator producing tokens. Rejects any gap in regex coverage.

    Values are decoded here so the parser only shuffles ready-made Python
    objects.
    """
    pos = 0
    for m in _TOKEN_RE.finditer(text):
        kind  = m.lastgroup
        value = m.group()
        start = m.start()

        if start != pos:
            raise SyntaxError(f"invalid character {text[pos]!r} at offset {pos}")
        pos = m.end()

        if kind == "WHITESPACE":
            continue
        if kind == "STRING":
            value = _decode_string(value, start, text)
        elif kind == "NUMBER":
            value = _decode_number(value)
        elif kind == "LITERAL":
            value = _LITERALS[value]

        yield Token(kind, value, start)

    if pos != len(text):
        raise SyntaxError(f"invalid character {text[pos]!r} at offset {pos}")
