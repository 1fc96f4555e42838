"""
Loading of question rule configuration.

A rules document maps question ids to rule specs. Each spec is either a
mapping with ``type`` and ``args`` or a shorthand string
``"type:arg1,arg2"``:

    questions:
      name:
        - required
        - {type: maxLength, args: [40]}
      age:
        - required
        - "inRange:18,99"

Shape problems raise RuleConfigError listing every problem found.
Unknown rule types and bad arguments raise the factory's own errors, so a
broken configuration fails at load time rather than when answers arrive.
"""

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from quiz_validation.logger import logger
from quiz_validation.validations.errors import RuleConfigError
from quiz_validation.validations.question_rules import QuestionRules
from quiz_validation.validations.registry import RuleRegistry


class RuleSpecModel(BaseModel):
    """One rule: type name plus positional string arguments."""
    type: str = Field(..., min_length=1, description="Registered rule type name")
    args: List[str] = Field(default_factory=list, description="Positional arguments")

    @field_validator("type")
    @classmethod
    def _strip_type(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("rule type cannot be blank")
        return value

    @field_validator("args", mode="before")
    @classmethod
    def _stringify_args(cls, value: Any) -> Any:
        # YAML turns `[40]` into ints; the factory parses strings
        if value is None:
            return []
        if isinstance(value, (str, int, float)):
            value = [value]
        if isinstance(value, (list, tuple)):
            return [v if isinstance(v, str) else str(v) for v in value]
        return value

    @classmethod
    def from_shorthand(cls, text: str) -> "RuleSpecModel":
        """Parse 'inRange:1,5' into type='inRange', args=['1', '5']."""
        type_name, _, raw_args = text.partition(":")
        args = [a.strip() for a in raw_args.split(",")] if raw_args else []
        return cls(type=type_name, args=args)


class QuizRulesConfig(BaseModel):
    """Rule specs keyed by question id."""
    questions: Dict[Union[int, str], List[RuleSpecModel]] = Field(default_factory=dict)

    @field_validator("questions", mode="before")
    @classmethod
    def _expand_shorthand(cls, value: Any) -> Any:
        if not isinstance(value, Mapping):
            return value
        expanded = {}
        for question_id, specs in value.items():
            if isinstance(specs, (str, Mapping)):
                specs = [specs]
            if isinstance(specs, list):
                specs = [
                    RuleSpecModel.from_shorthand(s) if isinstance(s, str) else s
                    for s in specs
                ]
            expanded[question_id] = specs
        return expanded


def _format_errors(error: ValidationError) -> List[str]:
    return [
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
        for err in error.errors()
    ]


def parse_rules_config(data: Any, source: str = "") -> QuizRulesConfig:
    """
    Validate the shape of a rules document.

    Accepts either ``{"questions": {...}}`` or the bare question mapping.

    Raises:
        RuleConfigError: If the document is malformed
    """
    if data is None:
        data = {}
    if isinstance(data, Mapping) and "questions" not in data:
        data = {"questions": data}
    if not isinstance(data, Mapping):
        raise RuleConfigError(
            [f"expected a mapping, got {type(data).__name__}"], source
        )
    try:
        return QuizRulesConfig.model_validate(data)
    except ValidationError as e:
        errors = _format_errors(e)
        logger.warning("Rule configuration rejected", source=source, errors=len(errors))
        raise RuleConfigError(errors, source) from e


def build_question_rules(
    config: QuizRulesConfig,
    registry: Optional[RuleRegistry] = None
) -> QuestionRules:
    """Build every configured rule through the registry."""
    question_rules = QuestionRules(registry)
    for question_id, specs in config.questions.items():
        for spec in specs:
            question_rules.bind(question_id, spec.type, spec.args)
    return question_rules


def load_rules(
    data: Any,
    registry: Optional[RuleRegistry] = None,
    source: str = ""
) -> QuestionRules:
    """
    Build QuestionRules from an already parsed document (dict).

    Raises:
        RuleConfigError: If the document is malformed
        UnknownRuleType: If a rule type is not registered
        InvalidArgument: If a rule's arguments are malformed
    """
    config = parse_rules_config(data, source)
    question_rules = build_question_rules(config, registry)
    logger.info(
        "Question rules loaded",
        source=source or "<dict>",
        questions=len(question_rules.question_ids),
        rules=len(question_rules),
    )
    return question_rules


def load_rules_file(
    path: Union[str, Path],
    registry: Optional[RuleRegistry] = None
) -> QuestionRules:
    """
    Build QuestionRules from a YAML file.

    Raises:
        RuleConfigError: If the file is missing, not YAML or malformed
    """
    path = Path(path)
    if not path.exists():
        raise RuleConfigError(["file not found"], str(path))

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RuleConfigError([f"invalid YAML: {e}"], str(path)) from e

    return load_rules(data, registry, source=str(path))
