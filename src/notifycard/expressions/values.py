"""Value model and weak-typing coercions for the expression language.

Values produced by evaluation are plain Python objects:

- ``str`` for strings
- ``float`` (or ``int`` straight from a context) for numbers
- ``bool`` for booleans
- ``None`` for null
- ``UNDEFINED`` for a path that resolved to nothing
- any ``Mapping`` or ``list``/``tuple`` for structured values

Structured values take part in truthiness and stringification only; every
numeric coercion turns them into NaN. None of the functions here raise:
non-numeric operands become NaN and propagate.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Final

__all__ = [
    "UNDEFINED",
    "is_nil",
    "is_number",
    "is_structured",
    "is_numeric_like",
    "truthy",
    "to_number",
    "coerce_numeric_string",
    "format_number",
    "natural_string",
    "stringify",
    "to_json_compatible",
    "loose_equal",
    "strict_equal",
    "add",
    "subtract",
    "multiply",
    "divide",
    "remainder",
]


class _Undefined:
    """Marker for "no value here", distinct from JSON null."""

    __slots__ = ()
    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Final = _Undefined()

_NAN = float("nan")
_INF = float("inf")

# Loose/strict equality only treat plain decimal strings as numbers.
_NUMERIC_LIKE = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")

_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_RADIX = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+")
_INFINITY = {"Infinity": _INF, "+Infinity": _INF, "-Infinity": -_INF}


def is_nil(value: Any) -> bool:
    """True for None and UNDEFINED."""
    return value is None or value is UNDEFINED


def is_number(value: Any) -> bool:
    """True for int and float, but not bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_structured(value: Any) -> bool:
    """True for mappings, lists and tuples."""
    return isinstance(value, (Mapping, list, tuple))


def is_numeric_like(value: Any) -> bool:
    """A number, or a string of optional ``-``, digits and an optional fraction."""
    if is_number(value):
        return True
    return isinstance(value, str) and _NUMERIC_LIKE.fullmatch(value) is not None


def truthy(value: Any) -> bool:
    """Falsy iff false, null, undefined, empty string, zero or NaN."""
    if is_nil(value):
        return False
    if isinstance(value, bool):
        return value
    if is_number(value):
        return not (value == 0 or value != value)
    if isinstance(value, str):
        return value != ""
    return True


def _int_to_float(value: int) -> float:
    """float(value), saturating to an infinity on overflow."""
    try:
        return float(value)
    except OverflowError:
        return _INF if value > 0 else -_INF


def _parse_number(text: str) -> float:
    """Decimal, Infinity or 0x/0o/0b text to a float; NaN otherwise."""
    stripped = text.strip()
    if not stripped:
        return 0.0
    if _DECIMAL.fullmatch(stripped):
        return float(stripped)
    if stripped in _INFINITY:
        return _INFINITY[stripped]
    if _RADIX.fullmatch(stripped):
        return _int_to_float(int(stripped, 0))
    return _NAN


def to_number(value: Any) -> float:
    """Numeric coercion used by arithmetic and relational operators.

    Booleans map to 1/0, strings go through decimal parsing (non-numeric
    strings give NaN), and null, undefined and structured values give NaN.
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, int):
        return _int_to_float(value)
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        return _parse_number(value)
    return _NAN


def coerce_numeric_string(value: Any) -> Any:
    """Turn a decimal-looking string into a number; pass anything else through."""
    if isinstance(value, str) and _NUMERIC_LIKE.fullmatch(value):
        return float(value)
    return value


def format_number(value: float) -> str:
    """Render a number the way the expression language prints it.

    Integral values drop the fractional part, non-finite values are spelled
    ``NaN``/``Infinity``, and exponent notation is only used outside the
    range [1e-7, 1e21).
    """
    if value != value:
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" not in text:
        return text
    mantissa, exponent_text = text.split("e")
    exponent = int(exponent_text)
    if -7 < exponent < 21:
        return format(Decimal(text), "f")
    sign = "+" if exponent > 0 else "-"
    return f"{mantissa}e{sign}{abs(exponent)}"


def natural_string(value: Any) -> str:
    """String form used by ``+`` concatenation and loose equality."""
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return format_number(to_number(value))
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return "[object Object]"
    if isinstance(value, (list, tuple)):
        return ",".join("" if is_nil(item) else natural_string(item) for item in value)
    return str(value)


def to_json_compatible(value: Any, *, nonfinite_as_string: bool = False) -> Any:
    """Convert a value into something json.dumps emits as canonical JSON.

    Undefined becomes null (and is dropped from mappings), integral floats
    become ints, and NaN/Infinity become null, or their spelled-out names
    when ``nonfinite_as_string`` is set.
    """
    if is_nil(value):
        return None
    if isinstance(value, float):
        if value != value or math.isinf(value):
            return format_number(value) if nonfinite_as_string else None
        if value.is_integer() and abs(value) < 1e21:
            return int(value)
        return value
    if isinstance(value, Mapping):
        return {
            str(key): to_json_compatible(item, nonfinite_as_string=nonfinite_as_string)
            for key, item in value.items()
            if item is not UNDEFINED
        }
    if isinstance(value, (list, tuple)):
        return [
            to_json_compatible(item, nonfinite_as_string=nonfinite_as_string)
            for item in value
        ]
    return value


def stringify(value: Any) -> str:
    """Template stringification of an evaluation result.

    null and undefined become the empty string, structured values become
    compact JSON text, and everything else uses its natural string form.
    """
    if is_nil(value):
        return ""
    if is_structured(value):
        return json.dumps(
            to_json_compatible(value),
            ensure_ascii=False,
            separators=(",", ":"),
            default=str,
        )
    return natural_string(value)


def _identical(left: Any, right: Any) -> bool:
    """Same kind and same value; structured values by identity."""
    if is_number(left) and is_number(right):
        return bool(left == right)
    if isinstance(left, bool) and isinstance(right, bool):
        return left is right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return left is right


def loose_equal(left: Any, right: Any) -> bool:
    """``==`` semantics.

    null and undefined equal each other; a boolean on either side compares
    numerically; two numeric-like operands compare numerically; otherwise
    operands match by identity or by natural string form.
    """
    if is_nil(left) and is_nil(right):
        return True
    if isinstance(left, bool) or isinstance(right, bool):
        return to_number(left) == to_number(right)
    if is_numeric_like(left) and is_numeric_like(right):
        return to_number(left) == to_number(right)
    return _identical(left, right) or natural_string(left) == natural_string(right)


def strict_equal(left: Any, right: Any) -> bool:
    """``===`` semantics: no cross-kind equality.

    A number never equals a string (``1 === '1'`` is false). Two strings
    that both look like decimal numbers compare numerically, so
    ``'1' === '1.0'`` is true.
    """
    if isinstance(left, str) and isinstance(right, str):
        if is_numeric_like(left) and is_numeric_like(right):
            return float(left) == float(right)
        return left == right
    return _identical(left, right)


def add(left: Any, right: Any) -> Any:
    """Concatenate if either side is a string, otherwise add numerically."""
    if isinstance(left, str) or isinstance(right, str):
        return natural_string(left) + natural_string(right)
    return to_number(left) + to_number(right)


def subtract(left: Any, right: Any) -> float:
    """Numeric subtraction; non-numeric operands give NaN."""
    return to_number(left) - to_number(right)


def multiply(left: Any, right: Any) -> float:
    """Numeric multiplication; non-numeric operands give NaN."""
    return to_number(left) * to_number(right)


def divide(left: Any, right: Any) -> float:
    """Numeric division that never raises."""
    # IEEE-754: x/0 is a signed infinity, 0/0 and NaN/0 are NaN.
    dividend, divisor = to_number(left), to_number(right)
    if divisor == 0:
        if dividend == 0 or dividend != dividend:
            return _NAN
        return math.copysign(_INF, dividend) * math.copysign(1.0, divisor)
    return dividend / divisor


def remainder(left: Any, right: Any) -> float:
    """Numeric remainder that never raises."""
    # Truncated remainder: the result takes the sign of the dividend.
    dividend, divisor = to_number(left), to_number(right)
    if divisor == 0 or math.isinf(dividend) or dividend != dividend:
        return _NAN
    if divisor != divisor:
        return _NAN
    if math.isinf(divisor):
        return dividend
    return math.fmod(dividend, divisor)
