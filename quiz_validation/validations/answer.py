"""
Answer model and value classification.

Answers arrive from a generic form-submission model, so their values are
untyped. ValueKind tags the shapes the rules know how to handle.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from numbers import Real
from typing import Any, Dict, Mapping


class ValueKind(str, Enum):
    """
    Shape of an untyped answer value.

    - NULL: no value submitted
    - NUMBER: real number or Decimal (bool is not a number)
    - TEXT: string
    - LIST: ordered sequence (list or tuple)
    - OTHER: anything else, handled through its textual form
    """
    NULL = "null"
    NUMBER = "number"
    TEXT = "text"
    LIST = "list"
    OTHER = "other"


def kind_of(value: Any) -> ValueKind:
    """Classify an untyped answer value."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.OTHER
    if isinstance(value, (Real, Decimal)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.TEXT
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    return ValueKind.OTHER


@dataclass(frozen=True)
class Answer:
    """
    A submitted value for one quiz question.

    Attributes:
        question_id: Identifier of the question, echoed in every message
        value: None, a number, a string or a list of untyped values

    Example:
        answer = Answer(question_id="q1", value="abc")
        rule = create("maxLength", ["3"])
        assert rule(answer) is None
    """
    question_id: Any
    value: Any = None

    @property
    def kind(self) -> ValueKind:
        return kind_of(self.value)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Answer":
        """
        Build an Answer from a form payload.

        Accepts both ``questionId`` and ``question_id`` keys.

        Raises:
            KeyError: If no question id key is present
        """
        if "questionId" in data:
            question_id = data["questionId"]
        elif "question_id" in data:
            question_id = data["question_id"]
        else:
            raise KeyError("answer payload has no 'questionId' or 'question_id'")
        return cls(question_id=question_id, value=data.get("value"))

    def to_dict(self) -> Dict[str, Any]:
        return {"questionId": self.question_id, "value": self.value}
