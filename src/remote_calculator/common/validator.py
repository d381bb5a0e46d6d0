"""Validate raw operand text before it reaches the calculation service."""
from enum import Enum
import math
import re
from typing import FrozenSet, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from remote_calculator.common.operations import Number

# Plain decimal notation: optional sign, digits with an optional fraction, optional exponent
NUMBER_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)


class InputField(str, Enum):
    """Operand input fields of the calculator."""

    FIRST = "first"
    SECOND = "second"


class Valid(BaseModel):
    """Both operands parsed as finite numbers."""

    model_config = ConfigDict(frozen=True)

    a: Number
    b: Number


class Invalid(BaseModel):
    """At least one operand could not be parsed."""

    model_config = ConfigDict(frozen=True)

    fields: FrozenSet[InputField] = Field(..., min_length=1, description="Fields that failed validation")


ValidationResult = Union[Valid, Invalid]


def parse_number(raw: str) -> Optional[Number]:
    """
    Parse operand text into a finite number.

    Integer literals stay integers so they are sent to the service unchanged.

    :param str raw: Raw text typed by the user

    :return: Parsed number, or None when the text is blank or not a finite number
    :rtype: Optional[Number]
    """
    text = raw.strip()
    if not NUMBER_PATTERN.fullmatch(text):
        return None

    value = float(text)
    if not math.isfinite(value):
        return None
    if re.fullmatch(r"[+-]?\d+", text, re.ASCII):
        return int(text)
    return value


def validate(raw_a: str, raw_b: str) -> ValidationResult:
    """
    Check both operand fields and report every one that fails.

    :param str raw_a: Text of the first operand
    :param str raw_b: Text of the second operand

    :return: Valid with the parsed operands, or Invalid naming the bad fields
    :rtype: ValidationResult
    """
    a = parse_number(raw_a)
    b = parse_number(raw_b)

    invalid = set()
    if a is None:
        invalid.add(InputField.FIRST)
    if b is None:
        invalid.add(InputField.SECOND)

    if invalid:
        return Invalid(fields=frozenset(invalid))
    return Valid(a=a, b=b)
