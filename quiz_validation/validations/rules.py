"""
Built-in validation rule types.

Every rule type is registered in ``rule_registry`` and returns a check
closing over its parsed arguments. Numeric rules guard with
is_not_number first, so a non-numeric answer always gets the generic
"debe ser un número" message before any comparison is attempted.
"""

import re
from typing import Callable, Optional

from quiz_validation.validations import messages
from quiz_validation.validations.answer import Answer
from quiz_validation.validations.ci import CiValidator, validate_ci
from quiz_validation.validations.coercion import (
    is_not_number,
    list_operation,
    number_operation,
    string_operation,
)
from quiz_validation.validations.errors import InvalidArgument, ValidationUnavailable
from quiz_validation.validations.registry import Check, RuleRegistry, ValidationRule


rule_registry = RuleRegistry("quiz")
rule_type = rule_registry.rule_type

EMAIL_PATTERN = re.compile(r"[\w\-.]+@([\w-]+\.)+[\w-]{2,4}", re.ASCII)


# =============================================================================
# PRESENCE
# =============================================================================

def check_required(answer: Answer) -> Optional[str]:
    if answer.value is None:
        return messages.for_question(answer.question_id, messages.REQUIRED)

    if list_operation(answer.value, lambda items: len(items) == 0):
        return messages.no_selection(answer.question_id)

    if string_operation(answer.value, lambda text: text == ""):
        return messages.for_question(answer.question_id, messages.EMPTY)

    return None


def exists_value(answer: Answer) -> bool:
    """True when the answer passes the required rule."""
    return check_required(answer) is None


@rule_type("required", category="presence")
def required() -> Check:
    """Value must be present; lists must be non-empty and text non-empty."""
    return check_required


# =============================================================================
# TEXT
# =============================================================================

@rule_type("maxLength", category="text")
def max_length(length: int) -> Check:
    """Textual form must have at most `length` characters."""
    def check(answer: Answer) -> Optional[str]:
        if string_operation(answer.value, lambda text: len(text) > length):
            return messages.for_question(answer.question_id, messages.MAX_LENGTH, length=length)
        return None
    return check


@rule_type("minLength", category="text")
def min_length(length: int) -> Check:
    """Textual form must have at least `length` characters."""
    def check(answer: Answer) -> Optional[str]:
        if string_operation(answer.value, lambda text: len(text) < length):
            return messages.for_question(answer.question_id, messages.MIN_LENGTH, length=length)
        return None
    return check


@rule_type("email", category="text")
def email() -> Check:
    """Textual form must look like local@domain.tld."""
    def check(answer: Answer) -> Optional[str]:
        if string_operation(answer.value, lambda text: EMAIL_PATTERN.fullmatch(text) is not None):
            return None
        return messages.for_question(answer.question_id, messages.EMAIL)
    return check


@rule_type("ci", category="text")
def ci(*, validator: CiValidator = validate_ci) -> Check:
    """
    Value must be present and a valid national ID (cédula).

    Pass ``validator=`` to replace the checksum implementation. If it
    raises, ValidationUnavailable is raised instead of reporting the
    answer as invalid.
    """
    def is_invalid(text: str) -> bool:
        try:
            return not validator(text)
        except Exception as e:
            raise ValidationUnavailable("ci", e) from e

    def check(answer: Answer) -> Optional[str]:
        if not exists_value(answer) or string_operation(answer.value, is_invalid):
            return messages.for_question(answer.question_id, messages.CI)
        return None
    return check


# =============================================================================
# NUMERIC
# =============================================================================

def _numeric(valid: Callable[[int], bool], template: str, **params: int) -> Check:
    def check(answer: Answer) -> Optional[str]:
        if is_not_number(answer.value):
            return messages.for_question(answer.question_id, messages.NUMBER)
        if not number_operation(answer.value, valid):
            return messages.for_question(answer.question_id, template, **params)
        return None
    return check


@rule_type("number", category="numeric")
def number() -> Check:
    """Value must be numeric or a string of digits."""
    return _numeric(lambda n: True, messages.NUMBER)


@rule_type("positive", category="numeric")
def positive() -> Check:
    """Numeric value must be > 0."""
    return _numeric(lambda n: n > 0, messages.POSITIVE)


@rule_type("negative", category="numeric")
def negative() -> Check:
    """Numeric value must be < 0."""
    return _numeric(lambda n: n < 0, messages.NEGATIVE)


@rule_type("positiveOrZero", category="numeric")
def positive_or_zero() -> Check:
    """Numeric value must be >= 0."""
    return _numeric(lambda n: n >= 0, messages.POSITIVE_OR_ZERO)


@rule_type("negativeOrZero", category="numeric")
def negative_or_zero() -> Check:
    """Numeric value must be <= 0."""
    return _numeric(lambda n: n <= 0, messages.NEGATIVE_OR_ZERO)


@rule_type("greaterThan", category="numeric")
def greater_than(min: int) -> Check:
    """Numeric value must be > min."""
    return _numeric(lambda n: n > min, messages.GREATER_THAN, min=min)


@rule_type("lessThan", category="numeric")
def less_than(max: int) -> Check:
    """Numeric value must be < max."""
    return _numeric(lambda n: n < max, messages.LESS_THAN, max=max)


@rule_type("greaterThanOrEqual", category="numeric")
def greater_than_or_equal(min: int) -> Check:
    """Numeric value must be >= min."""
    return _numeric(lambda n: n >= min, messages.GREATER_THAN_OR_EQUAL, min=min)


@rule_type("lessThanOrEqual", category="numeric")
def less_than_or_equal(max: int) -> Check:
    """Numeric value must be <= max."""
    return _numeric(lambda n: n <= max, messages.LESS_THAN_OR_EQUAL, max=max)


@rule_type("inRange", category="numeric")
def in_range(min: int, max: int) -> Check:
    """Numeric value must be within [min, max]."""
    if min > max:
        raise InvalidArgument("inRange", f"min ({min}) is greater than max ({max})")
    return _numeric(lambda n: min <= n <= max, messages.IN_RANGE, min=min, max=max)


# =============================================================================
# CHOICE
# =============================================================================

@rule_type("inList", category="choice")
def in_list(*values: str) -> Check:
    """
    Value must be a list whose every element contains one of `values`.

    Containment is a substring test on each element's textual form, so
    "opción a" matches the allowed value "a". Scalars are never treated
    as lists and always fail.
    """
    if not values:
        raise InvalidArgument("inList", "at least one allowed value is required")
    allowed = tuple(values)
    options = messages.format_options(allowed)

    def element_matches(element) -> bool:
        return string_operation(element, lambda text: any(v in text for v in allowed))

    def check(answer: Answer) -> Optional[str]:
        if list_operation(answer.value, lambda items: all(element_matches(e) for e in items)):
            return None
        return messages.for_question(answer.question_id, messages.IN_LIST, options=options)
    return check


def create(type_name: str, args=None, **options) -> ValidationRule:
    """Build a rule from the built-in registry. See RuleRegistry.create."""
    return rule_registry.create(type_name, args, **options)
