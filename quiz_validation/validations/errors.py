"""
Exceptions raised by the answer validation engine.

Construction-time problems (unknown rule type, bad arguments, malformed
configuration) are raised so setup fails fast. Per-answer failures are
never raised: rules return a message string instead.
"""

from typing import List


class QuizValidationError(Exception):
    """Base class for validation engine errors."""


class UnknownRuleType(QuizValidationError):
    """Raised when a rule type name is not registered."""

    def __init__(self, type_name: str, registry_name: str = ""):
        self.type_name = type_name
        self.registry_name = registry_name
        message = f"Invalid type: {type_name!r} is not a known validation rule"
        if registry_name:
            message += f" in registry '{registry_name}'"
        super().__init__(message)


class InvalidArgument(QuizValidationError):
    """Raised when rule arguments are missing, extra or malformed."""

    def __init__(self, type_name: str, reason: str):
        self.type_name = type_name
        self.reason = reason
        super().__init__(f"Invalid arguments for rule '{type_name}': {reason}")


class ValidationUnavailable(QuizValidationError):
    """Raised when an external validator fails instead of answering."""

    def __init__(self, type_name: str, original_error: Exception):
        self.type_name = type_name
        self.original_error = original_error
        super().__init__(
            f"Validator for rule '{type_name}' is unavailable: {original_error}"
        )


class RuleAlreadyRegisteredError(QuizValidationError):
    """Raised when trying to register a rule type that already exists."""

    def __init__(self, type_name: str, registry_name: str = ""):
        self.type_name = type_name
        self.registry_name = registry_name
        message = f"Rule type '{type_name}' already registered"
        if registry_name:
            message += f" in registry '{registry_name}'"
        super().__init__(message)


class InvalidRuleSignatureError(QuizValidationError):
    """Raised when a rule factory has a signature the registry cannot parse into."""

    def __init__(self, type_name: str, reason: str):
        self.type_name = type_name
        self.reason = reason
        super().__init__(f"Invalid signature for rule type '{type_name}': {reason}")


class RuleConfigError(QuizValidationError):
    """Raised when a rules configuration document is malformed."""

    def __init__(self, errors: List[str], source: str = ""):
        self.errors = errors
        self.source = source
        message = "Rule configuration"
        if source:
            message += f" '{source}'"
        message += f" is invalid with {len(errors)} error(s):\n"
        message += "\n".join(f"  - {e}" for e in errors)
        super().__init__(message)
