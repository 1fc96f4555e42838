"""
Tests for QuestionRules: binding rules per question and validating whole
submissions.
"""

from unittest.mock import patch

import pytest

from quiz_validation.validations import (
    Answer,
    InvalidArgument,
    QuestionRules,
    UnknownRuleType,
    create,
)


@pytest.fixture
def question_rules():
    """Rules for a small registration quiz."""
    rules = QuestionRules()
    rules.bind("name", "required")
    rules.bind("name", "maxLength", ["10"])
    rules.bind("age", "required")
    rules.bind("age", "inRange", ["18", "99"])
    rules.bind("email", "email")
    rules.bind("topics", "required")
    rules.bind("topics", "inList", ["python", "java"])
    return rules


class TestBinding:
    """Tests for building the question binding."""

    def test_bind_returns_rule(self):
        rules = QuestionRules()
        rule = rules.bind("q1", "minLength", ["2"])
        assert rule.type_name == "minLength"
        assert rules.rules_for("q1") == [rule]

    def test_add_prebuilt_rule(self):
        rules = QuestionRules().add("q1", create("required"))
        assert "q1" in rules
        assert len(rules) == 1

    def test_bind_fails_fast(self):
        rules = QuestionRules()
        with pytest.raises(UnknownRuleType):
            rules.bind("q1", "bogus")
        with pytest.raises(InvalidArgument):
            rules.bind("q1", "maxLength", ["x"])
        assert "q1" not in rules

    def test_counts(self, question_rules):
        assert question_rules.question_ids == ["name", "age", "email", "topics"]
        assert len(question_rules) == 7
        assert repr(question_rules) == "QuestionRules(questions=4, rules=7)"


class TestValidate:
    """Tests for validating answers and submissions."""

    def test_valid_submission(self, question_rules):
        answers = [
            Answer("name", "Ana"),
            Answer("age", "30"),
            Answer("email", "ana@example.com"),
            Answer("topics", ["python"]),
        ]
        assert question_rules.validate(answers) == {}
        assert question_rules.is_valid(answers) is True

    def test_collects_errors_across_questions(self, question_rules):
        answers = [
            Answer("name", "Maximiliano Jose"),
            Answer("age", "abc"),
            Answer("email", "ana"),
            Answer("topics", []),
        ]
        errors = question_rules.validate(answers)

        assert set(errors) == {"name", "age", "email", "topics"}
        assert errors["name"] == [
            "La respuesta de la pregunta name no puede tener más de 10 caracteres"
        ]
        assert errors["age"] == ["La respuesta de la pregunta age debe ser un número"]
        assert errors["topics"] == [
            "Debe seleccionar al menos una opción en la pregunta topics",
        ]

    def test_all_messages_for_one_question_in_rule_order(self, question_rules):
        messages = question_rules.validate_answer(Answer("topics", "python"))
        assert messages == [
            "La respuesta de la pregunta topics debe ser una de las opciones: [python, java]"
        ]

        messages = question_rules.validate_answer(Answer("name", ""))
        assert messages == ["La respuesta de la pregunta name no puede estar vacía"]

    def test_missing_answers_validated_as_null(self, question_rules):
        errors = question_rules.validate([Answer("name", "Ana")])
        assert errors["age"][0] == "La respuesta de la pregunta age es requerida"
        assert "email" in errors
        assert "name" not in errors

    def test_answers_without_rules_are_ignored(self, question_rules):
        errors = question_rules.validate([Answer("unknown", None)])
        assert "unknown" not in errors

    def test_accepts_payload_dicts(self, question_rules):
        answers = [
            {"questionId": "name", "value": "Ana"},
            {"question_id": "age", "value": 44},
            {"questionId": "email", "value": "ana@example.com"},
            {"questionId": "topics", "value": ["java"]},
        ]
        assert question_rules.validate(answers) == {}

    def test_payload_without_question_id(self, question_rules):
        with pytest.raises(KeyError):
            question_rules.validate([{"value": 1}])

    def test_does_not_raise_for_invalid_answers(self, question_rules):
        answers = [Answer(q, None) for q in question_rules.question_ids]
        errors = question_rules.validate(answers)
        assert len(errors) == 4

    def test_duplicate_answer_last_one_wins(self, question_rules):
        answers = [
            Answer("name", "Ana"),
            Answer("age", 44),
            Answer("email", "ana@example.com"),
            Answer("topics", ["python"]),
            Answer("age", 12),
        ]
        with patch("quiz_validation.validations.question_rules.logger") as log:
            errors = question_rules.validate(answers)

        assert errors == {"age": ["La respuesta de la pregunta age debe estar entre 18 y 99"]}
        log.warning.assert_called_once_with(
            "Duplicate answer, keeping the last one", question_id="age"
        )


class TestAnswer:
    """Tests for the Answer model."""

    def test_from_dict_and_back(self):
        answer = Answer.from_dict({"questionId": 5, "value": [1, 2]})
        assert answer.question_id == 5
        assert answer.value == [1, 2]
        assert answer.to_dict() == {"questionId": 5, "value": [1, 2]}

    def test_missing_value_is_null(self):
        assert Answer.from_dict({"question_id": "q"}).value is None

    def test_answer_is_immutable(self):
        answer = Answer("q", 1)
        with pytest.raises(AttributeError):
            answer.value = 2
