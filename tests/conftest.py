"""Shared fixtures and fakes for the calculator tests."""
from typing import List, Optional

import pytest

from remote_calculator.client.client import CalculationClientError
from remote_calculator.common.config import get_settings
from remote_calculator.common.operations import HistoryEntry


class FakeService:
    """In-memory stand-in for the calculation service."""

    def __init__(
        self,
        result=None,
        error: Optional[str] = None,
        history: Optional[List[dict]] = None,
        history_error: Optional[str] = None,
    ):
        self.result = result
        self.error = error
        self.history = history or []
        self.history_error = history_error
        self.compute_calls: list = []
        self.history_calls = 0

    async def compute(self, a, b, operation):
        self.compute_calls.append((a, b, operation))
        if self.error is not None:
            raise CalculationClientError(self.error)
        return self.result

    async def fetch_history(self):
        self.history_calls += 1
        if self.history_error is not None:
            raise CalculationClientError(self.history_error)
        return [HistoryEntry.model_validate(entry) for entry in self.history]


@pytest.fixture
def fake_service() -> FakeService:
    return FakeService(result=15)


@pytest.fixture
def clean_settings():
    """Drop cached settings so environment changes are picked up."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_service():
    """Factory building a FakeService with the given behaviour."""
    return FakeService
