"""
Tests for loading question rules from dicts and YAML files.
"""

import pytest

from quiz_validation.validations import (
    Answer,
    InvalidArgument,
    QuizRulesConfig,
    RuleConfigError,
    RuleSpecModel,
    UnknownRuleType,
    load_rules,
    load_rules_file,
    parse_rules_config,
)


RULES_YAML = """
questions:
  name:
    - required
    - {type: maxLength, args: [10]}
  age:
    - required
    - "inRange:18,99"
  topics:
    - type: inList
      args: [python, java]
  7: required
"""


@pytest.fixture
def rules_file(tmp_path):
    """Write a rules document to a temporary YAML file."""
    path = tmp_path / "rules.yaml"
    path.write_text(RULES_YAML, encoding="utf-8")
    return path


class TestRuleSpecModel:
    """Tests for the rule spec schema."""

    def test_shorthand(self):
        spec = RuleSpecModel.from_shorthand("inRange:1, 5")
        assert spec.type == "inRange"
        assert spec.args == ["1", "5"]

    def test_shorthand_without_args(self):
        spec = RuleSpecModel.from_shorthand("email")
        assert spec.type == "email"
        assert spec.args == []

    def test_numeric_args_become_strings(self):
        spec = RuleSpecModel(type="maxLength", args=[3])
        assert spec.args == ["3"]

    def test_single_arg_is_wrapped(self):
        spec = RuleSpecModel(type="maxLength", args=3)
        assert spec.args == ["3"]

    def test_blank_type_rejected(self):
        with pytest.raises(ValueError):
            RuleSpecModel(type="  ")


class TestParseRulesConfig:
    """Tests for shape validation of rules documents."""

    def test_bare_mapping(self):
        config = parse_rules_config({"q1": ["required"]})
        assert isinstance(config, QuizRulesConfig)
        assert config.questions["q1"][0].type == "required"

    def test_empty_document(self):
        assert parse_rules_config(None).questions == {}

    def test_not_a_mapping(self):
        with pytest.raises(RuleConfigError) as exc_info:
            parse_rules_config(["required"])
        assert "expected a mapping" in exc_info.value.errors[0]

    def test_reports_every_problem(self):
        data = {
            "questions": {
                "q1": [{"args": ["1"]}],
                "q2": [{"type": "maxLength", "args": {"n": 1}}],
            }
        }
        with pytest.raises(RuleConfigError) as exc_info:
            parse_rules_config(data, source="broken.yaml")
        error = exc_info.value
        assert len(error.errors) == 2
        assert error.source == "broken.yaml"
        assert "broken.yaml" in str(error)


class TestLoadRules:
    """Tests for building QuestionRules from configuration."""

    def test_load_from_dict(self):
        rules = load_rules({"q1": ["required", "maxLength:3"]})
        assert [r.type_name for r in rules.rules_for("q1")] == ["required", "maxLength"]
        assert rules.validate([Answer("q1", "abcd")]) == {
            "q1": ["La respuesta de la pregunta q1 no puede tener más de 3 caracteres"]
        }

    def test_unknown_rule_type_fails_at_load(self):
        with pytest.raises(UnknownRuleType):
            load_rules({"q1": ["bogus"]})

    def test_invalid_argument_fails_at_load(self):
        with pytest.raises(InvalidArgument):
            load_rules({"q1": ["inRange:1"]})

    def test_load_from_file(self, rules_file):
        rules = load_rules_file(rules_file)

        assert set(rules.question_ids) == {"name", "age", "topics", 7}
        assert rules.rules_for("name")[1].params == (10,)
        assert rules.rules_for("age")[1].params == (18, 99)
        assert rules.rules_for("topics")[0].params == ("python", "java")

        errors = rules.validate([
            Answer("name", "Ana"),
            Answer("age", "12"),
            Answer("topics", ["python"]),
        ])
        assert errors == {
            "age": ["La respuesta de la pregunta age debe estar entre 18 y 99"],
            7: ["La respuesta de la pregunta 7 es requerida"],
        }

    def test_missing_file(self, tmp_path):
        with pytest.raises(RuleConfigError) as exc_info:
            load_rules_file(tmp_path / "nope.yaml")
        assert exc_info.value.errors == ["file not found"]

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("questions: [unclosed", encoding="utf-8")
        with pytest.raises(RuleConfigError):
            load_rules_file(path)
