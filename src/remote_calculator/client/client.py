"""HTTP client for the remote calculation service."""
from typing import Any, List, Optional, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from remote_calculator.common.config import get_settings
from remote_calculator.common.logger import logger
from remote_calculator.common.operations import (
    CalculationRequest,
    CalculationResponse,
    HistoryEntry,
    HistoryResponse,
    Number,
    Operation,
)

DEFAULT_CALCULATION_ERROR = "Calculation error"
DEFAULT_HISTORY_ERROR = "Failed to fetch history"


class CalculationClientError(Exception):
    """A request to the calculation service failed; the message is meant for display."""


@runtime_checkable
class CalculationService(Protocol):
    """Operations the calculator and history views need from the service."""

    async def compute(self, a: Number, b: Number, operation: Operation) -> Number:
        ...

    async def fetch_history(self) -> List[HistoryEntry]:
        ...


class CalculationClient(BaseModel):
    """
    Async HTTP client for the calculation service.

    Each call:
    - opens its own connection and closes it when the response is read
    - is sent once, without retry or caching
    - raises CalculationClientError on transport failures and non-200 responses
    """

    # Make the Pydantic instance immutable (read-only) so the target service cannot change mid-request.
    # Allow arbitrary types like httpx.AsyncBaseTransport
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    base_url: str = Field(default="http://localhost:5000", description="Base address of the service")
    timeout: float = Field(default=5.0, gt=0, description="Request timeout in seconds")
    transport: Optional[httpx.AsyncBaseTransport] = Field(
        default=None, description="Transport override, e.g. httpx.MockTransport in tests"
    )

    @classmethod
    def from_settings(cls) -> "CalculationClient":
        """Build a client from the environment configuration."""
        settings = get_settings()
        return cls(base_url=settings.api_base_url, timeout=settings.request_timeout)

    async def compute(self, a: Number, b: Number, operation: Operation) -> Number:
        """
        Ask the service to apply an operation to two operands.

        :param Number a: First operand
        :param Number b: Second operand
        :param Operation operation: Operation to apply

        :return: Result computed by the service
        :rtype: Number
        :raises CalculationClientError: If the request fails or the service rejects it
        """
        body = CalculationRequest(a=a, b=b, operation=operation)
        logger.debug(f"🧮 POST /calculate {body.model_dump(mode='json')}")

        response = await self._send(
            "POST",
            "/calculate",
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            json=body.model_dump(mode="json"),
        )
        self._raise_for_error(response, DEFAULT_CALCULATION_ERROR)

        try:
            return CalculationResponse.model_validate(response.json()).result
        except (ValueError, ValidationError) as exc:
            raise CalculationClientError(f"Malformed calculation response: {exc}") from exc

    async def fetch_history(self) -> List[HistoryEntry]:
        """
        Fetch past calculations in the order the service returns them.

        :return: History entries, possibly empty
        :rtype: List[HistoryEntry]
        :raises CalculationClientError: If the request fails or the service rejects it
        """
        logger.debug("📜 GET /history")

        response = await self._send("GET", "/history", headers={"Accept": "application/json"})
        self._raise_for_error(response, DEFAULT_HISTORY_ERROR)

        try:
            return HistoryResponse.model_validate(response.json()).history
        except (ValueError, ValidationError) as exc:
            raise CalculationClientError(f"Malformed history response: {exc}") from exc

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """
        Issue a single request and translate transport failures.

        :param str method: HTTP method
        :param str path: Endpoint path relative to the base URL

        :return: Response received from the service
        :rtype: httpx.Response
        :raises CalculationClientError: If the service cannot be reached
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self.transport
            ) as client:
                return await client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error(f"🔌❌ {method} {path} failed: {exc}")
            raise CalculationClientError(str(exc) or type(exc).__name__) from exc

    @staticmethod
    def _raise_for_error(response: httpx.Response, default_message: str) -> None:
        """
        Raise the service error message carried by a non-200 response.

        :param httpx.Response response: Response to inspect
        :param str default_message: Message used when the body has no ``error`` field

        :raises CalculationClientError: If the response status is not 200
        """
        if response.status_code == 200:
            return

        message = default_message
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("error"):
            message = str(payload["error"])

        logger.warning(f"⚠️ Service answered {response.status_code}: {message}")
        raise CalculationClientError(message)
