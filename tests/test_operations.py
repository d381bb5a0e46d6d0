"""Test operations, display helpers and wire models."""
from datetime import datetime, timezone

from pydantic import ValidationError
import pytest

from remote_calculator.common.operations import (
    OPERATORS,
    CalculationRequest,
    CalculationResponse,
    HistoryEntry,
    HistoryResponse,
    Operation,
    format_number,
    symbol_for,
)


@pytest.mark.parametrize("operation,symbol", [
    (Operation.ADD, "+"),
    (Operation.SUBTRACT, "−"),
    (Operation.MULTIPLY, "×"),
    (Operation.DIVIDE, "÷"),
])
def test_symbol_for(operation: Operation, symbol: str) -> None:
    """Every operation maps to its display glyph."""
    assert symbol_for(operation) == symbol


def test_symbol_for_accepts_value() -> None:
    """Operation values are accepted as well as members."""
    assert symbol_for("subtract") == "−"


@pytest.mark.parametrize("symbol,operation", [
    ("+", Operation.ADD),
    ("-", Operation.SUBTRACT),
    ("*", Operation.MULTIPLY),
    ("/", Operation.DIVIDE),
    ("×", Operation.MULTIPLY),
    ("÷", Operation.DIVIDE),
])
def test_operators_lookup(symbol: str, operation: Operation) -> None:
    """Typed symbols, ASCII or glyph, resolve to operations."""
    assert OPERATORS[symbol] is operation


@pytest.mark.parametrize("value,expected", [
    (15, "15"),
    (15.0, "15"),
    (2.5, "2.5"),
    (-3, "-3"),
])
def test_format_number(value, expected: str) -> None:
    """Integral floats are displayed without a fractional part."""
    assert format_number(value) == expected


def test_calculation_request_serializes_operation_value() -> None:
    """The request body carries the operation as its string value."""
    req = CalculationRequest(a=3, b=5, operation=Operation.MULTIPLY)
    assert req.model_dump(mode="json") == {"a": 3, "b": 5, "operation": "multiply"}


def test_calculation_request_invalid_operation() -> None:
    """Unknown operations are rejected."""
    with pytest.raises(ValidationError):
        CalculationRequest(a=1, b=2, operation="modulo")


def test_calculation_response_keeps_int() -> None:
    """Integer results stay integers."""
    res = CalculationResponse.model_validate({"result": 8})
    assert res.result == 8
    assert isinstance(res.result, int)


def test_calculation_response_invalid_result_type() -> None:
    """Non-numeric results raise a validation error."""
    with pytest.raises(ValidationError):
        CalculationResponse(result="not a number")


def test_history_entry_from_wire() -> None:
    """A wire entry is parsed with its timestamp and operation."""
    entry = HistoryEntry.model_validate({
        "created_at": "2023-08-08T15:00:00Z",
        "operand1": 5,
        "operand2": 3,
        "operation": "add",
        "result": 8,
    })
    assert entry.created_at == datetime(2023, 8, 8, 15, 0, tzinfo=timezone.utc)
    assert entry.operation is Operation.ADD
    assert entry.expression == "5 + 3"


def test_history_entry_without_timestamp_and_with_extra_keys() -> None:
    """Missing timestamps are tolerated and unknown keys ignored."""
    entry = HistoryEntry.model_validate(
        {"id": 1, "operand1": 10, "operand2": 4, "operation": "subtract", "result": 6}
    )
    assert entry.created_at is None
    assert entry.expression == "10 − 4"


def test_history_entry_is_immutable() -> None:
    """Received entries cannot be modified."""
    entry = HistoryEntry(operand1=1, operand2=2, operation=Operation.ADD, result=3)
    with pytest.raises(ValidationError):
        entry.result = 4


def test_history_response_requires_history() -> None:
    """A body without the history list is malformed."""
    with pytest.raises(ValidationError):
        HistoryResponse.model_validate({"entries": []})
