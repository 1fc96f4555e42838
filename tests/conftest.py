"""
Shared pytest fixtures for quiz validation tests.
"""

import pytest

from quiz_validation.validations import Answer


@pytest.fixture
def make_answer():
    """Factory for answers to a fixed question id."""
    def _create(value=None, question_id="q1"):
        return Answer(question_id=question_id, value=value)
    return _create
