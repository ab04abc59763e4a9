# serializer.py
# JSON serializer for the prim codec.
#
# =============================================================================
#  SERIALIZER IMPLEMENTATION: DEPTH-FIRST WALK WITH AN ANCESTOR STACK
# =============================================================================
#
# One depth-first pass turns an arbitrary Python value into JSON text,
# following the SerializeJSONProperty / JA / JO algorithm of ECMA-262 5.1
# (15.12.3) adapted to Python types:
#
# 1. to_json hook (the Convertible capability) replaces the value.
# 2. A replacer function, if given, sees (key, value) and replaces it.
# 3. Boxed values, enum members and numeric subclasses become primitives.
# 4. Primitives are emitted directly; containers recurse.
#
# Containers are pushed onto an ancestor stack by identity on entry and
# popped on exit. Meeting an identity already on the stack is a cycle and
# raises CyclicStructureError; equal-but-distinct containers are fine.
#
# Arrays never drop a slot (UNDEFINED and callables become null); objects
# drop such members entirely. At the root, the same values make the whole
# call return UNDEFINED.
#
# =============================================================================
#  REFERENCES
# =============================================================================
# [1] ECMA-262 5.1 - 15.12.3 JSON.stringify
# [2] ECMA-262 5.1 - 9.8.1 ToString Applied to the Number Type
# [3] RFC 8259 - The JavaScript Object Notation (JSON) standard
# =============================================================================

import datetime as _dt
import decimal
import enum
import logging
import math
import numbers
import re
from collections.abc import Mapping, Sequence
from dataclasses import fields, is_dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from values import UNDEFINED, Boxed, CyclicStructureError, DepthLimitError, Timestamp

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
INDENT_LIMIT        = 10         # Longest indent unit, numeric or string [ECMA-262 15.12.3]
DEPTH_LIMIT_DEFAULT = 256        # Matches the parser's guard

_ESCAPE_RE = re.compile(r'[\x00-\x1f"\\]')
_ESCAPES = {
    '"': '\\"', "\\": "\\\\",
    "\b": "\\b", "\f": "\\f", "\n": "\\n", "\r": "\\r", "\t": "\\t",
}

Replacer = Callable[[str, Any], Any]

# ---------------------------------------------------------------------------
# PRIMITIVE EMITTERS
# ---------------------------------------------------------------------------
def _escape(match: "re.Match") -> str:
    ch = match.group()
    return _ESCAPES.get(ch) or f"\\u{ord(ch):04x}"


def quote(text: str) -> str:
    """Double-quote a string, escaping '"', '\\' and U+0000..U+001F only."""
    return '"' + _ESCAPE_RE.sub(_escape, text) + '"'


def format_number(value) -> str:
    """
    Number to text.

    ints keep every digit. Floats use the shortest digits that round-trip
    (Python's repr) laid out by the ECMAScript Number-to-String rules
    [ECMA-262 5.1, 9.8.1]: plain notation from 1e-6 up to 1e21, exponent
    notation outside it, and no trailing '.0'. Non-finite values are null.
    """
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        return "null"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    mantissa, _, exp = repr(abs(value)).partition("e")
    int_part, _, frac_part = mantissa.partition(".")
    digits = int_part + frac_part
    # n is the decimal point position relative to the first digit.
    n = (int(exp) if exp else 0) + len(int_part)
    stripped = digits.lstrip("0")
    n -= len(digits) - len(stripped)
    digits = stripped.rstrip("0")
    k = len(digits)

    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * -n + digits
    exponent = f"e{'+' if n - 1 >= 0 else '-'}{abs(n - 1)}"
    if k == 1:
        return sign + digits + exponent
    return sign + digits[0] + "." + digits[1:] + exponent

# ---------------------------------------------------------------------------
# ARGUMENT RESOLUTION
# ---------------------------------------------------------------------------
def resolve_indent(width) -> str:
    """
    Turn the width argument into one indent unit.

    Numbers (Decimal included) are truncated toward zero and capped at
    INDENT_LIMIT spaces; strings are cut to INDENT_LIMIT characters.
    Anything else, including bools and values below one, means no
    indentation.
    """
    if isinstance(width, Boxed):
        width = width.value
    if isinstance(width, bool):
        return ""
    if isinstance(width, decimal.Decimal):
        if width.is_nan():
            return ""
        width = float(width)
    if isinstance(width, numbers.Real):
        if math.isnan(width) or width < 1:
            return ""
        return " " * int(min(INDENT_LIMIT, width))
    if isinstance(width, str):
        return width[:INDENT_LIMIT]
    return ""


def resolve_filter(filter) -> Tuple[Optional[Replacer], Optional[List[str]]]:
    """
    Split the filter argument into (replacer, allow_list).

    A callable is a replacer. A list or tuple is an allow-list of member
    names: strings are kept, numbers become their JSON text, other items are
    skipped and repeats dropped. Anything else disables filtering.
    """
    if callable(filter):
        return filter, None
    if not isinstance(filter, (list, tuple)):
        return None, None
    names: List[str] = []
    for item in filter:
        if isinstance(item, Boxed):
            item = item.value
        if isinstance(item, bool):
            continue
        if isinstance(item, str):
            name = item
        elif isinstance(item, numbers.Real):
            name = format_number(_unwrap(item))
        else:
            continue
        if name not in names:
            names.append(name)
    return None, names

# ---------------------------------------------------------------------------
# VALUE NORMALIZATION
# ---------------------------------------------------------------------------
def _unwrap(value):
    """Reduce boxed values, enum members and numeric look-alikes to primitives."""
    if isinstance(value, Boxed):
        return value.value
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, bool):
        return value
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, numbers.Real):
        return float(value)
    if isinstance(value, decimal.Decimal):
        return float(value)
    return value


def _key_text(key) -> str:
    if isinstance(key, str):
        return key
    if key is None:
        return "null"
    if isinstance(key, bool):
        return "true" if key else "false"
    if isinstance(key, (int, float)):
        return format_number(key)
    return str(key)


def _members(value) -> List[Tuple[str, Any]]:
    if is_dataclass(value):
        return [(f.name, getattr(value, f.name)) for f in fields(value)]
    # Keys that coerce to the same text collapse: the last value wins in
    # the first slot.
    members: Dict[str, Any] = {}
    for k, v in value.items():
        members[_key_text(k)] = v
    return list(members.items())

# ---------------------------------------------------------------------------
# GRAPH WALK
# ---------------------------------------------------------------------------
class _Serializer:
    """
    Per-call walk state: filter, indent unit and the ancestor stack.

    A fresh instance serves one stringify call, so concurrent calls share
    nothing.
    """

    def __init__(self, replacer: Optional[Replacer], allow: Optional[List[str]],
                 indent: str, max_depth: int):
        self.replacer = replacer
        self.allow = allow
        self.indent = indent
        self.max_depth = max_depth
        self.stack: List[int] = []

    def emit(self, key: str, value, level: int):
        """Serialize `value` found under `key`; UNDEFINED means "emit nothing"."""
        if not isinstance(value, type):
            hook = getattr(value, "to_json", None)
            if callable(hook):
                value = hook(key)
        if self.replacer is not None:
            value = self.replacer(key, value)
        value = _unwrap(value)

        if value is None:
            return "null"
        if value is True:
            return "true"
        if value is False:
            return "false"
        if isinstance(value, str):
            return quote(value)
        if isinstance(value, (int, float)):
            return format_number(value)
        if isinstance(value, Timestamp):
            return quote(value.isoformat())
        if isinstance(value, _dt.date):
            return quote(Timestamp.from_datetime(value).isoformat())
        if value is UNDEFINED or callable(value):
            return UNDEFINED
        if isinstance(value, Mapping) or is_dataclass(value):
            return self.emit_object(value, level)
        if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
            return self.emit_array(value, level)
        raise TypeError(f"Object of type {type(value).__name__} is not serializable")

    def _enter(self, value):
        ident = id(value)
        if ident in self.stack:
            raise CyclicStructureError()
        if len(self.stack) >= self.max_depth:
            raise DepthLimitError(f"nesting depth exceeds {self.max_depth}")
        self.stack.append(ident)

    def _wrap(self, open_: str, parts: List[str], close: str, level: int) -> str:
        if not parts:
            return open_ + close
        if not self.indent:
            return open_ + ",".join(parts) + close
        inner = "\n" + self.indent * (level + 1)
        outer = "\n" + self.indent * level
        return open_ + inner + ("," + inner).join(parts) + outer + close

    def emit_array(self, value, level: int) -> str:
        self._enter(value)
        parts = []
        for index, item in enumerate(value):
            text = self.emit(str(index), item, level + 1)
            parts.append("null" if text is UNDEFINED else text)
        self.stack.pop()
        return self._wrap("[", parts, "]", level)

    def emit_object(self, value, level: int) -> str:
        self._enter(value)
        members = _members(value)
        if self.allow is not None:
            present = dict(members)
            members = [(name, present[name]) for name in self.allow if name in present]
        colon = ": " if self.indent else ":"
        parts = []
        for name, member in members:
            text = self.emit(name, member, level + 1)
            if text is not UNDEFINED:
                parts.append(quote(name) + colon + text)
        self.stack.pop()
        return self._wrap("{", parts, "}", level)

# ---------------------------------------------------------------------------
# PUBLIC API
# ---------------------------------------------------------------------------
def serialize(value, filter=None, width=None, *, max_depth: int = DEPTH_LIMIT_DEFAULT):
    """
    Serialize a Python value to JSON text.

    Returns UNDEFINED instead of text when the root resolves to UNDEFINED or
    a callable. Raises CyclicStructureError on cycles, RangeError on
    unrepresentable time values and TypeError on unsupported types.
    """
    replacer, allow = resolve_filter(filter)
    indent = resolve_indent(width)
    logger.debug("serializing %s (replacer=%s, allow=%s, indent=%r)",
                 type(value).__name__, replacer is not None, allow, indent)
    return _Serializer(replacer, allow, indent, max_depth).emit("", value, 0)
