"""
Pytest configuration and shared fixtures for testing.
"""
import pytest

from adaptive_cat.difficulty import DifficultyRange
from adaptive_cat.domain_types import GradedState
from adaptive_cat.history import InMemoryResponseHistory


@pytest.fixture
def difficulty_range() -> DifficultyRange:
    """The 1-10 scale used by a default activity."""
    return DifficultyRange(low=1, high=10)


@pytest.fixture
def empty_history() -> InMemoryResponseHistory:
    return InMemoryResponseHistory()


@pytest.fixture
def one_correct_history() -> InMemoryResponseHistory:
    history = InMemoryResponseHistory()
    history.record(GradedState.CORRECT_GRADED, 1.0)
    return history


@pytest.fixture
def correct_then_wrong_history() -> InMemoryResponseHistory:
    return InMemoryResponseHistory.from_marks([1.0, 0.0])
