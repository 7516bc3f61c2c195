"""
Value semantics for script evaluation.

Scripts are written by non-programmers, so operators coerce rather than fail:
arithmetic on junk yields NaN, member access through null yields null, and
equality is loose across numbers, numeric strings and booleans.
"""

from __future__ import annotations

import json
import math
import operator
import re
from typing import Any, Callable

from ..errors import EvaluationError

NAN = float("nan")

# Plain decimal text only: no digit separators, no inf/nan words.
_NUMERIC_TEXT = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_INFINITIES = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_truthy(value: Any) -> bool:
    """None, false, 0, NaN and "" are falsy. Empty lists and dicts are truthy."""
    if value is None or value is False:
        return False
    if is_number(value):
        return value != 0 and not math.isnan(value)
    if isinstance(value, str):
        return value != ""
    return True


def to_number(value: Any) -> float | int:
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if is_number(value):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        if text in _INFINITIES:
            return _INFINITIES[text]
        if not text.isascii() or not _NUMERIC_TEXT.fullmatch(text):
            return NAN
        try:
            return int(text)
        except ValueError:
            return float(text)
    return NAN


def normalize_number(value: float | int) -> float | int:
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return value


def _number_text(value: float | int) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def to_text(value: Any) -> str:
    """Render a value the way it appears when interpolated or concatenated."""
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if is_number(value):
        return _number_text(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ",".join("" if item is None else to_text(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, default=str)
    return str(value)


def _index(prop: Any) -> int | None:
    if isinstance(prop, bool):
        return None
    if isinstance(prop, int):
        return prop
    if isinstance(prop, float) and prop.is_integer():
        return int(prop)
    if isinstance(prop, str) and prop.isascii() and prop.isdigit():
        try:
            return int(prop)
        except ValueError as exc:
            raise EvaluationError(f"Invalid index '{prop}'") from exc
    return None


def get_member(obj: Any, prop: Any) -> Any:
    """Read obj[prop] permissively; anything missing is None."""
    if obj is None:
        return None
    if isinstance(obj, dict):
        if isinstance(prop, str):
            return obj.get(prop)
        if is_number(prop) and prop in obj:
            return obj[prop]
        return obj.get(to_text(prop))
    if isinstance(obj, (list, tuple, str)):
        if prop == "length":
            return len(obj)
        index = _index(prop)
        if index is None or index < 0 or index >= len(obj):
            return None
        return obj[index]
    return None


def loose_equals(left: Any, right: Any) -> bool:
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, bool) or isinstance(right, bool):
        if isinstance(left, bool) and isinstance(right, bool):
            return left == right
        return loose_equals(to_number(left), to_number(right))
    if is_number(left) and isinstance(right, str):
        return left == to_number(right)
    if isinstance(left, str) and is_number(right):
        return to_number(left) == right
    return left == right


def compare(symbol: str, left: Any, right: Any) -> bool:
    if isinstance(left, str) and isinstance(right, str):
        a, b = left, right
    else:
        a, b = to_number(left), to_number(right)
        if math.isnan(a) or math.isnan(b):
            return False
    if symbol == ">":
        return a > b
    if symbol == "<":
        return a < b
    if symbol == ">=":
        return a >= b
    return a <= b


def _arithmetic(op: Callable[[Any, Any], Any], left: Any, right: Any) -> Any:
    try:
        return normalize_number(op(to_number(left), to_number(right)))
    except OverflowError as exc:
        raise EvaluationError("Numeric result is out of range") from exc


def add(left: Any, right: Any) -> Any:
    if isinstance(left, (str, list, dict)) or isinstance(right, (str, list, dict)):
        return to_text(left) + to_text(right)
    return _arithmetic(operator.add, left, right)


def subtract(left: Any, right: Any) -> Any:
    return _arithmetic(operator.sub, left, right)


def multiply(left: Any, right: Any) -> Any:
    return _arithmetic(operator.mul, left, right)


def divide(left: Any, right: Any) -> Any:
    a, b = to_number(left), to_number(right)
    if b == 0:
        if a == 0 or math.isnan(a):
            return NAN
        return math.inf if (a > 0) == (math.copysign(1.0, b) > 0) else -math.inf
    return _arithmetic(operator.truediv, a, b)


def remainder(left: Any, right: Any) -> Any:
    a, b = to_number(left), to_number(right)
    if b == 0 or math.isnan(a) or math.isnan(b) or math.isinf(a):
        return NAN
    if math.isinf(b):
        return a
    # Sign follows the dividend.
    return _arithmetic(math.fmod, a, b)


def contains(left: Any, right: Any) -> bool:
    """
    Case-insensitive membership. A dict is first reduced to its ``input`` or
    ``message`` field so `input contains "help"` works on structured input.
    """
    subject = left
    if isinstance(subject, dict):
        subject = subject.get("input") or subject.get("message") or to_text(subject)
    if isinstance(subject, str) and isinstance(right, str):
        return right.lower() in subject.lower()
    if isinstance(subject, (list, tuple)):
        needle = to_text(right).lower()
        return any(to_text(item).lower() == needle for item in subject)
    return False
