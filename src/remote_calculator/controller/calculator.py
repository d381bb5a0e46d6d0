"""Calculator state: operands, selected operation and the request lifecycle."""
from typing import FrozenSet, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from remote_calculator.client.client import CalculationService
from remote_calculator.common.logger import logger
from remote_calculator.common.operations import Number, Operation, format_number
from remote_calculator.common.validator import InputField, Invalid, validate

VALIDATION_MESSAGE = "Please enter valid numbers in both fields"
FIELD_MESSAGE = "Please enter a valid number"


class Idle(BaseModel):
    """No request has completed since the last submit."""

    model_config = ConfigDict(frozen=True)


class Loading(BaseModel):
    """A calculation request is in flight."""

    model_config = ConfigDict(frozen=True)


class Success(BaseModel):
    """The service returned a result."""

    model_config = ConfigDict(frozen=True)

    result: Number


class Failure(BaseModel):
    """The request failed; message is shown as is."""

    model_config = ConfigDict(frozen=True)

    message: str


RequestState = Union[Idle, Loading, Success, Failure]


class CalculationController(BaseModel):
    """
    Interaction controller of the calculator.

    State machine:
        - Idle --submit(invalid)--> Idle, with field errors
        - Idle --submit(valid)--> Loading --ok--> Success
        - Loading --error--> Failure
        - any state --select_operation--> same state

    Only the latest submit may update the state: each submit takes a new request
    token and responses carrying an older token are dropped.
    """

    # Allow arbitrary types like the injected CalculationService
    # Re-validate assignments so operand text always stays a string
    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    service: CalculationService = Field(..., description="Remote calculation service")
    first_operand: str = Field(default="", description="Raw text of the first operand")
    second_operand: str = Field(default="", description="Raw text of the second operand")
    operation: Operation = Field(default=Operation.ADD, description="Selected operation")

    _state: RequestState = PrivateAttr(default_factory=Idle)
    _field_errors: FrozenSet[InputField] = PrivateAttr(default_factory=frozenset)
    _request_token: int = PrivateAttr(default=0)

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def field_errors(self) -> FrozenSet[InputField]:
        """Fields to highlight after a failed validation."""
        return self._field_errors

    @property
    def busy(self) -> bool:
        return isinstance(self._state, Loading)

    @property
    def message(self) -> Optional[str]:
        """
        Text displayed under the calculator.

        :return: Validation, error or result text; None while idle or loading
        :rtype: Optional[str]
        """
        if self._field_errors:
            return VALIDATION_MESSAGE
        if isinstance(self._state, Success):
            return f"Result: {format_number(self._state.result)}"
        if isinstance(self._state, Failure):
            return f"Error: {self._state.message}"
        return None

    def field_message(self, field: InputField) -> Optional[str]:
        """Helper text shown next to an operand field, if it is invalid."""
        return FIELD_MESSAGE if field in self._field_errors else None

    def set_operand(self, field: InputField, text: str) -> None:
        """Replace the text of one operand field."""
        if InputField(field) is InputField.FIRST:
            self.first_operand = text
        else:
            self.second_operand = text

    def select_operation(self, operation: Union[Operation, str]) -> None:
        """
        Select the operation applied on the next submit.

        Accepts an Operation or its value, as sent by a select control.
        The request state is left untouched.

        :param operation: Operation to select
        :raises ValueError: If the value names no operation
        """
        self.operation = Operation(operation)

    async def submit(self) -> RequestState:
        """
        Validate the operands and, if they are valid, ask the service for the result.

        Invalid input returns immediately without calling the service.

        :return: Request state once this submit has settled
        :rtype: RequestState
        """
        self._request_token += 1
        token = self._request_token

        outcome = validate(self.first_operand, self.second_operand)
        if isinstance(outcome, Invalid):
            self._field_errors = outcome.fields
            self._state = Idle()
            logger.info(f"✏️❌ Invalid operands: {sorted(f.value for f in outcome.fields)}")
            return self._state

        self._field_errors = frozenset()
        self._state = Loading()
        operation = self.operation
        logger.info(f"🧮🏁 Request {token}: {outcome.a} {operation.value} {outcome.b}")

        try:
            result = await self.service.compute(outcome.a, outcome.b, operation)
        except Exception as exc:
            new_state: RequestState = Failure(message=str(exc) or type(exc).__name__)
            logger.error(f"🧮❌ Request {token} failed: {exc}")
        else:
            new_state = Success(result=result)
            logger.info(f"🧮✅ Request {token} finished: {result}")

        if token != self._request_token:
            logger.debug(f"🧮 Dropping stale response of request {token}")
            return self._state

        self._state = new_state
        return self._state
