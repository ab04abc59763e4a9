# values.py
# Shared value model for the prim JSON codec: the absent sentinel, boxed
# primitives, the custom-conversion capability, time values and error kinds.
#
# =============================================================================
#  VALUE MODEL
# =============================================================================
#
# JSON values map onto plain Python objects:
#
#     null -> None      true/false -> bool     number -> int | float
#     string -> str     array -> list          object -> dict
#
# Two things JSON text cannot say need an explicit Python spelling:
# 1. "No value at all" (a removed member, an unrepresentable root). None is
#    already JSON null, so absence gets its own singleton, UNDEFINED.
# 2. Wrapped primitives and time values, which the serializer reduces to
#    primitives [ECMA-262 5.1, 15.12.3; ECMA-262 5.1, 15.9.5.43].
#
# =============================================================================
#  REFERENCES
# =============================================================================
# [1] RFC 8259 - The JavaScript Object Notation (JSON) standard
# [2] ECMA-262 5.1 - 15.12 The JSON Object
# [3] ECMA-262 5.1 - 15.9.1 Time Values and Time Range
# [4] Hinnant - chrono-Compatible Low-Level Date Algorithms
# =============================================================================

import datetime as _dt
import math
from typing import Any, Dict, List, Protocol, Tuple, Union, runtime_checkable

# ---------------------------------------------------------------------------
# CONSTANTS AND TUNABLES
# ---------------------------------------------------------------------------
MS_PER_DAY      = 86400000
TIME_VALUE_MAX  = 8.64e15        # +/- 100,000,000 days around the epoch [ECMA-262 15.9.1.1]
_EPOCH          = _dt.datetime(1970, 1, 1, tzinfo=_dt.timezone.utc)

# ---------------------------------------------------------------------------
# JSON VALUE TYPES
# ---------------------------------------------------------------------------
JSONScalar = Union[str, int, float, bool, None]
JSONValue  = Union[JSONScalar, List["JSONValue"], Dict[str, "JSONValue"]]
JSONObject = Dict[str, JSONValue]
JSONArray  = List[JSONValue]

# ---------------------------------------------------------------------------
# ERROR KINDS
# ---------------------------------------------------------------------------
# Syntax violations use the builtin SyntaxError directly; the classes below
# cover the serializer and the resource guard.
class CyclicStructureError(TypeError):
    """Raised when the serializer meets a container that is its own ancestor."""

    def __init__(self, message: str = "Cyclic structures cannot be serialized."):
        super().__init__(message)


class RangeError(ValueError):
    """Raised for time values outside the representable range."""


class DepthLimitError(RecursionError):
    """Nesting exceeded the configured depth guard."""


# ---------------------------------------------------------------------------
# ABSENT SENTINEL
# ---------------------------------------------------------------------------
class _Undefined:
    """
    The "no value" marker, distinct from JSON null.

    Returned by a reviver or filter it removes an object member (array slots
    become null). Returned by stringify it means the root had no JSON text.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNDEFINED"

    def __bool__(self):
        return False

    def __reduce__(self):
        return (_Undefined, ())


UNDEFINED = _Undefined()

# ---------------------------------------------------------------------------
# BOXED PRIMITIVES AND CONVERSION HOOKS
# ---------------------------------------------------------------------------
class Boxed:
    """
    Object wrapper around a bool, number or str.

    The serializer treats a Boxed value exactly like the primitive it holds,
    both as a value and as a width or allow-list entry.
    """
    __slots__ = ("value",)

    def __init__(self, value: Union[bool, int, float, str]):
        if not isinstance(value, (bool, int, float, str)):
            raise TypeError(f"cannot box {type(value).__name__}")
        self.value = value

    def __repr__(self):
        return f"Boxed({self.value!r})"


@runtime_checkable
class Convertible(Protocol):
    """
    Capability interface for custom conversion.

    `to_json(key)` receives the member name (or array index as a string) the
    object was found under and returns the value to serialize in its place.
    """

    def to_json(self, key: str) -> Any:
        ...


# ---------------------------------------------------------------------------
# TIME VALUES
# ---------------------------------------------------------------------------
class Timestamp:
    """
    Millisecond time value relative to 1970-01-01T00:00:00Z.

    Covers the full +/-8.64e15 ms range, which reaches far past what
    datetime can hold (years 1..9999). Fractional milliseconds are truncated
    toward zero; NaN and out-of-range values are kept and rejected when the
    value is formatted.
    """
    __slots__ = ("ms",)

    def __init__(self, ms: Union[int, float]):
        if isinstance(ms, float) and math.isfinite(ms):
            ms = int(ms)
        self.ms = ms

    @classmethod
    def from_datetime(cls, value: Union[_dt.datetime, _dt.date]) -> "Timestamp":
        """Naive datetimes are local time; bare dates are midnight UTC."""
        if not isinstance(value, _dt.datetime):
            value = _dt.datetime(value.year, value.month, value.day, tzinfo=_dt.timezone.utc)
        elif value.tzinfo is None:
            value = value.astimezone()
        delta = value - _EPOCH
        return cls(delta.days * MS_PER_DAY + delta.seconds * 1000 + delta.microseconds // 1000)

    def isoformat(self) -> str:
        """
        Render as `YYYY-MM-DDTHH:mm:ss.sssZ`, switching to a signed six-digit
        year outside 0000..9999 [ECMA-262 5.1, 15.9.1.15.1].
        """
        ms = self.ms
        if not isinstance(ms, int) or abs(ms) > TIME_VALUE_MAX:
            raise RangeError("Invalid time value")
        days, ms_in_day = divmod(ms, MS_PER_DAY)
        year, month, day = _civil_from_days(days)
        seconds, millis = divmod(ms_in_day, 1000)
        minutes, seconds = divmod(seconds, 60)
        hours, minutes = divmod(minutes, 60)
        if 0 <= year <= 9999:
            year_text = f"{year:04d}"
        else:
            year_text = f"{'-' if year < 0 else '+'}{abs(year):06d}"
        return f"{year_text}-{month:02d}-{day:02d}T{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}Z"

    def __eq__(self, other):
        if isinstance(other, Timestamp):
            return self.ms == other.ms
        return NotImplemented

    def __hash__(self):
        return hash(self.ms)

    def __repr__(self):
        return f"Timestamp({self.ms!r})"


def _civil_from_days(days: int) -> Tuple[int, int, int]:
    """Proleptic Gregorian (year, month, day) for a day count since the epoch [4]."""
    z = days + 719468
    era = z // 146097
    doe = z - era * 146097
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (1 if month <= 2 else 0)
    return year, month, day
