"""Load and render the calculation history once."""
from datetime import datetime
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from remote_calculator.client.client import CalculationService
from remote_calculator.common.logger import logger
from remote_calculator.common.operations import HistoryEntry, format_number

EMPTY_MESSAGE = "No calculation history found"
LOADING_MESSAGE = "Loading history..."


class HistoryLoading(BaseModel):
    """The history request is in flight."""

    model_config = ConfigDict(frozen=True)


class HistoryEmpty(BaseModel):
    """The service has no stored calculations."""

    model_config = ConfigDict(frozen=True)


class HistorySuccess(BaseModel):
    """Stored calculations in server order."""

    model_config = ConfigDict(frozen=True)

    entries: Tuple[HistoryEntry, ...]


class HistoryFailure(BaseModel):
    """The history could not be loaded."""

    model_config = ConfigDict(frozen=True)

    message: str


HistoryState = Union[HistoryLoading, HistoryEmpty, HistorySuccess, HistoryFailure]


class HistoryRow(BaseModel):
    """One rendered history line."""

    model_config = ConfigDict(frozen=True)

    expression: str
    result: str
    created_at: Optional[datetime] = None

    def __str__(self) -> str:
        return f"{self.expression} = {self.result}"


class HistoryLoader(BaseModel):
    """
    Fetch the history list once and expose its state.

    Lifecycle:
        - Starts in HistoryLoading
        - load() moves to HistoryEmpty, HistorySuccess or HistoryFailure
        - There is no refresh and no retry; a failed load stays failed
    """

    # Allow arbitrary types like the injected CalculationService
    model_config = ConfigDict(arbitrary_types_allowed=True)

    service: CalculationService = Field(..., description="Remote calculation service")

    _state: HistoryState = PrivateAttr(default_factory=HistoryLoading)
    _started: bool = PrivateAttr(default=False)

    @property
    def state(self) -> HistoryState:
        return self._state

    async def load(self) -> HistoryState:
        """
        Fetch the history from the service.

        :return: Settled history state
        :rtype: HistoryState
        :raises RuntimeError: If the history has already been loaded
        """
        if self._started:
            raise RuntimeError("History can only be loaded once")
        self._started = True

        logger.info("📜🏁 Loading history")
        try:
            entries = await self.service.fetch_history()
        except Exception as exc:
            logger.error(f"📜❌ Loading history failed: {exc}")
            self._state = HistoryFailure(message=str(exc) or type(exc).__name__)
            return self._state

        if entries:
            self._state = HistorySuccess(entries=tuple(entries))
        else:
            self._state = HistoryEmpty()
        logger.info(f"📜✅ Loaded {len(entries)} history entries")
        return self._state

    def rows(self) -> List[HistoryRow]:
        """
        Render the loaded entries in server order.

        :return: One row per entry; empty unless the load succeeded with entries
        :rtype: List[HistoryRow]
        """
        if not isinstance(self._state, HistorySuccess):
            return []
        return [
            HistoryRow(expression=entry.expression, result=format_number(entry.result), created_at=entry.created_at)
            for entry in self._state.entries
        ]

    def render(self) -> List[str]:
        """Lines displayed for the current state."""
        if isinstance(self._state, HistoryLoading):
            return [LOADING_MESSAGE]
        if isinstance(self._state, HistoryEmpty):
            return [EMPTY_MESSAGE]
        if isinstance(self._state, HistoryFailure):
            return [f"Error: {self._state.message}"]
        return [str(row) for row in self.rows()]
