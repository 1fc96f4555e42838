"""
Value coercion helpers shared by every validation rule.

Each helper branches once on the ValueKind of an untyped answer value so
the rules themselves stay one-line predicates.

- as_number: numbers as-is, all-digit strings as int, otherwise None
  (NaN is not a number here, it has no ordering)
- as_string: strings as-is, None stays None, anything else through str()
- as_list: lists and tuples only, scalars are never wrapped
- is_not_number: universal guard before numeric comparisons
"""

import math
import re
from decimal import Decimal
from numbers import Real
from typing import Any, Callable, Optional, Sequence

from quiz_validation.validations.answer import ValueKind, kind_of


# Unsigned ASCII digits only: "-3" and "2.5" are not numbers as text
DIGITS_PATTERN = re.compile(r"\d+", re.ASCII)


def _is_digit_string(value: str) -> bool:
    return DIGITS_PATTERN.fullmatch(value) is not None


def _is_nan(number: Real) -> bool:
    # Decimal first: float() of a signaling NaN raises
    if isinstance(number, Decimal):
        return number.is_nan()
    return isinstance(number, float) and math.isnan(number)


def as_number(value: Any) -> Optional[Real]:
    """
    Interpret a value as a number.

    Returns:
        The number itself for native numerics, an int for all-digit
        strings, None for NaN and anything else
    """
    kind = kind_of(value)
    if kind is ValueKind.NUMBER:
        return None if _is_nan(value) else value
    if kind is ValueKind.TEXT and _is_digit_string(value):
        return int(value)
    return None


def as_string(value: Any) -> Optional[str]:
    """
    Interpret a value as text.

    Non-string answers (numbers, lists) are checked through their default
    textual form so length and pattern rules still apply to them.
    """
    kind = kind_of(value)
    if kind is ValueKind.NULL:
        return None
    if kind is ValueKind.TEXT:
        return value
    return str(value)


def as_list(value: Any) -> Optional[Sequence[Any]]:
    """Interpret a value as a list; scalars return None."""
    if kind_of(value) is ValueKind.LIST:
        return value
    return None


def is_not_number(value: Any) -> bool:
    """True unless the value is numeric or an all-digit string."""
    return as_number(value) is None


def to_integer(number: Real) -> Real:
    """
    Truncate a number toward zero for threshold comparisons.

    Infinities are returned unchanged.
    """
    if isinstance(number, Decimal) and not number.is_finite():
        return number
    if isinstance(number, float) and not math.isfinite(number):
        return number
    return math.trunc(number)


def number_operation(value: Any, operation: Callable[[Real], bool]) -> bool:
    """
    Apply a predicate to the integer view of a number-coercible value.

    Returns:
        The predicate result, or False when the value is not a number
    """
    number = as_number(value)
    if number is None:
        return False
    return operation(to_integer(number))


def string_operation(value: Any, operation: Callable[[str], bool]) -> bool:
    """Apply a predicate to the textual view of a value; False for None."""
    text = as_string(value)
    if text is None:
        return False
    return operation(text)


def list_operation(value: Any, operation: Callable[[Sequence[Any]], bool]) -> bool:
    """Apply a predicate to a list value; False for non-lists."""
    items = as_list(value)
    if items is None:
        return False
    return operation(items)
