"""
Binding of validation rules to quiz questions.

QuestionRules holds the rules configured for each question and validates
a whole submission, collecting every message instead of stopping at the
first failure.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from quiz_validation.logger import logger
from quiz_validation.settings import settings
from quiz_validation.validations.answer import Answer
from quiz_validation.validations.registry import RuleRegistry, ValidationRule
from quiz_validation.validations.rules import rule_registry


AnswerInput = Union[Answer, Mapping[str, Any]]


class QuestionRules:
    """
    Rules bound to question ids.

    Example:
        rules = QuestionRules()
        rules.bind("name", "required")
        rules.bind("age", "inRange", ["18", "99"])

        errors = rules.validate([Answer("name", ""), Answer("age", "17")])
        # {"name": [...vacía], "age": [...entre 18 y 99]}
    """

    def __init__(self, registry: Optional[RuleRegistry] = None):
        self.registry = registry or rule_registry
        self._rules: Dict[Any, List[ValidationRule]] = {}

    def add(self, question_id: Any, rule: ValidationRule) -> "QuestionRules":
        """Attach an already built rule to a question."""
        self._rules.setdefault(question_id, []).append(rule)
        return self

    def bind(
        self,
        question_id: Any,
        type_name: str,
        args: Optional[Sequence[Any]] = None,
        **options: Any
    ) -> ValidationRule:
        """
        Build a rule through the registry and attach it to a question.

        Raises:
            UnknownRuleType: If type_name is not registered
            InvalidArgument: If arguments are malformed
        """
        rule = self.registry.create(type_name, args, **options)
        self.add(question_id, rule)
        return rule

    def rules_for(self, question_id: Any) -> List[ValidationRule]:
        return list(self._rules.get(question_id, []))

    @property
    def question_ids(self) -> List[Any]:
        return list(self._rules.keys())

    def validate_answer(self, answer: AnswerInput) -> List[str]:
        """
        Apply every rule bound to the answer's question.

        Returns:
            Messages in rule order; empty when the answer is valid
        """
        answer = _as_answer(answer)
        errors = []
        for rule in self._rules.get(answer.question_id, []):
            message = rule.apply(answer)
            if message is not None:
                errors.append(message)
        return errors

    def validate(self, answers: Iterable[AnswerInput]) -> Dict[Any, List[str]]:
        """
        Validate a submission.

        Questions that have rules but no submitted answer are validated
        with a null value, so a missing required answer is reported. When
        a question is answered more than once the last answer wins and a
        warning is logged.

        Returns:
            Messages keyed by question id, only for questions with errors
        """
        submitted: Dict[Any, Answer] = {}
        for item in answers:
            answer = _as_answer(item)
            if answer.question_id in submitted:
                logger.warning(
                    "Duplicate answer, keeping the last one",
                    question_id=answer.question_id,
                )
            submitted[answer.question_id] = answer

        errors: Dict[Any, List[str]] = {}
        for question_id in self._rules:
            answer = submitted.get(question_id) or Answer(question_id=question_id)
            messages = self.validate_answer(answer)
            if messages:
                errors[question_id] = messages

        if settings.get_nested("validation.log_submissions", True):
            logger.event(
                "submission_validated",
                questions=len(self._rules),
                answers=len(submitted),
                invalid_questions=len(errors),
            )
        return errors

    def is_valid(self, answers: Iterable[AnswerInput]) -> bool:
        return not self.validate(answers)

    def __len__(self) -> int:
        return sum(len(rules) for rules in self._rules.values())

    def __contains__(self, question_id: Any) -> bool:
        return question_id in self._rules

    def __repr__(self) -> str:
        return f"QuestionRules(questions={len(self._rules)}, rules={len(self)})"


def _as_answer(item: AnswerInput) -> Answer:
    if isinstance(item, Answer):
        return item
    return Answer.from_dict(item)
