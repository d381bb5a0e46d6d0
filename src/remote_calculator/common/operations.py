"""Operations and wire models exchanged with the calculation service."""
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]


class Operation(str, Enum):
    """Arithmetic operation applied by the service."""

    ADD = "add"
    SUBTRACT = "subtract"
    MULTIPLY = "multiply"
    DIVIDE = "divide"


# Display glyph of each operation
SYMBOLS: Dict[Operation, str] = {
    Operation.ADD: "+",
    Operation.SUBTRACT: "−",
    Operation.MULTIPLY: "×",
    Operation.DIVIDE: "÷",
}

# Symbols accepted when typing an operation, including the ASCII forms
OPERATORS: Dict[str, Operation] = {
    "+": Operation.ADD,
    "-": Operation.SUBTRACT,
    "*": Operation.MULTIPLY,
    "/": Operation.DIVIDE,
    **{symbol: op for op, symbol in SYMBOLS.items()},
}


def symbol_for(operation: Operation) -> str:
    """
    Return the display glyph of an operation.

    :param Operation operation: Operation to render

    :return: Glyph such as ``+`` or ``÷``
    :rtype: str
    """
    return SYMBOLS[Operation(operation)]


def format_number(value: Number) -> str:
    """
    Render a number the way the service reports it.

    Integral floats drop their fractional part so ``15.0`` displays as ``15``.

    :param Number value: Number to render

    :return: Display text
    :rtype: str
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class CalculationRequest(BaseModel):
    """Body of ``POST /calculate``."""

    a: Number = Field(..., description="First operand")
    b: Number = Field(..., description="Second operand")
    operation: Operation = Field(..., description="Operation to apply")


class CalculationResponse(BaseModel):
    """Successful body of ``POST /calculate``."""

    result: Number = Field(..., description="Numeric result computed by the service")


class HistoryEntry(BaseModel):
    """One past calculation stored by the service."""

    model_config = ConfigDict(frozen=True)

    created_at: Optional[datetime] = Field(default=None, description="When the calculation was stored")
    operand1: Number = Field(..., description="First operand")
    operand2: Number = Field(..., description="Second operand")
    operation: Operation = Field(..., description="Operation applied")
    result: Number = Field(..., description="Stored result")

    @property
    def expression(self) -> str:
        """Expression text, e.g. ``5 + 3``."""
        return f"{format_number(self.operand1)} {symbol_for(self.operation)} {format_number(self.operand2)}"


class HistoryResponse(BaseModel):
    """Successful body of ``GET /history``."""

    history: List[HistoryEntry] = Field(..., description="Entries in server order")
