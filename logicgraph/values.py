"""
Coercion and rendering helpers for the dynamically typed values stored in a
node's ``data`` map.

Numbers follow the editor's scripting semantics: a single numeric type,
integral results print without a fractional part, and non-numeric text
becomes NaN. Vectors are plain ``{"x", "y", "z"}`` mappings so they survive
a JSON snapshot unchanged.
"""

from __future__ import annotations

import json
import math
import re
from decimal import Decimal
from typing import Any, Dict, Mapping, Union

Number = Union[int, float]

ZERO_VECTOR: Mapping[str, Number] = {"x": 0, "y": 0, "z": 0}

_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_RADIX_RE = re.compile(r"0(?:[xX](?P<hex>[0-9a-fA-F]+)|[oO](?P<oct>[0-7]+)|[bB](?P<bin>[01]+))")
_RADIX_BASES = {"hex": 16, "oct": 8, "bin": 2}
_INFINITIES = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}


def to_number(value: Any, default: Number = 0) -> Number:
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        return _parse_number(value.strip())
    return math.nan


def _parse_number(text: str) -> Number:
    if not text:
        return 0
    if text in _INFINITIES:
        return _INFINITIES[text]
    if _DECIMAL_RE.fullmatch(text):
        if "." in text or "e" in text or "E" in text:
            return float(text)
        return int(text)
    match = _RADIX_RE.fullmatch(text)
    if match:
        group = match.lastgroup
        return int(match.group(group), _RADIX_BASES[group])
    return math.nan


def to_vector(value: Any) -> Dict[str, Number]:
    """
    Read a 3-component value; anything that is not a mapping is the zero
    vector and missing components count as 0.
    """

    if not isinstance(value, Mapping):
        value = ZERO_VECTOR
    return {axis: to_number(value.get(axis)) for axis in ("x", "y", "z")}


def format_number(value: Number) -> str:
    """
    Render a number the way the editor's script console does: shortest
    round-trip digits, plain notation for magnitudes in ``[1e-6, 1e21)`` and
    ``1e+21`` / ``1e-7`` style exponents outside it.
    """

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(map(str, digit_tuple)).rstrip("0")
    exponent += len(digit_tuple) - len(digits)
    # value == 0.<digits> * 10 ** point
    point = len(digits) + exponent

    if len(digits) <= point <= 21:
        text = digits + "0" * (point - len(digits))
    elif 0 < point <= 21:
        text = f"{digits[:point]}.{digits[point:]}"
    elif -6 < point <= 0:
        text = "0." + "0" * -point + digits
    else:
        power = point - 1
        mantissa = digits if len(digits) == 1 else f"{digits[0]}.{digits[1:]}"
        text = f"{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"
    return sign + text


def format_value(value: Any) -> str:
    """
    Render a value for the run log: structural values as compact JSON,
    everything else as plain text.
    """

    if isinstance(value, (bool, int, float)):
        return format_number(value)
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(
            _json_ready(value), separators=(",", ":"), ensure_ascii=False, allow_nan=False, default=str
        )
    return str(value)


def _json_ready(value: Any) -> Any:
    # Non-finite numbers serialize as null; integral floats lose their ".0".
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer() and abs(value) < 1e21:
            return int(value)
        return value
    if isinstance(value, Mapping):
        return {str(key): _json_ready(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_ready(item) for item in value]
    return value
