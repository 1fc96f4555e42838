"""
Answer validation engine.

Rules are built from a type name plus string arguments and applied to
answers, returning None for a valid answer or a Spanish error message.

Main components:
- Answer / ValueKind: submitted value and its shape
- coercion helpers: number / string / list views of untyped values
- RuleRegistry / ValidationRule: rule factory and constructed rules
- rule_registry / create: built-in rule types
- QuestionRules: rules bound per question, whole-submission validation
- load_rules / load_rules_file: YAML and dict rule configuration

Example:
    from quiz_validation.validations import Answer, create

    rule = create("inRange", ["1", "5"])
    rule(Answer("q1", "3"))    # None
    rule(Answer("q1", 7))      # "La respuesta de la pregunta q1 debe estar entre 1 y 5"
"""

from quiz_validation.validations.answer import Answer, ValueKind, kind_of
from quiz_validation.validations.coercion import (
    as_list,
    as_number,
    as_string,
    is_not_number,
    list_operation,
    number_operation,
    string_operation,
)
from quiz_validation.validations.ci import validate_ci
from quiz_validation.validations.config import (
    QuizRulesConfig,
    RuleSpecModel,
    load_rules,
    load_rules_file,
    parse_rules_config,
)
from quiz_validation.validations.errors import (
    InvalidArgument,
    InvalidRuleSignatureError,
    QuizValidationError,
    RuleAlreadyRegisteredError,
    RuleConfigError,
    UnknownRuleType,
    ValidationUnavailable,
)
from quiz_validation.validations.messages import INITIAL_MESSAGE
from quiz_validation.validations.question_rules import QuestionRules
from quiz_validation.validations.registry import (
    RuleRegistry,
    RuleTypeMetadata,
    ValidationRule,
)
from quiz_validation.validations.rules import create, exists_value, rule_registry


__all__ = [
    # Model
    "Answer",
    "ValueKind",
    "kind_of",
    # Coercion
    "as_number",
    "as_string",
    "as_list",
    "is_not_number",
    "number_operation",
    "string_operation",
    "list_operation",
    "exists_value",
    # Factory
    "RuleRegistry",
    "RuleTypeMetadata",
    "ValidationRule",
    "rule_registry",
    "create",
    "validate_ci",
    "INITIAL_MESSAGE",
    # Binding and configuration
    "QuestionRules",
    "QuizRulesConfig",
    "RuleSpecModel",
    "load_rules",
    "load_rules_file",
    "parse_rules_config",
    # Errors
    "QuizValidationError",
    "UnknownRuleType",
    "InvalidArgument",
    "ValidationUnavailable",
    "RuleAlreadyRegisteredError",
    "InvalidRuleSignatureError",
    "RuleConfigError",
]
