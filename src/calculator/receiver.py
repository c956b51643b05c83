"""
Calculator - the receiver of calculator commands.

Holds a single numeric accumulator. It knows nothing about history;
commands ask it to mutate itself through apply().
"""
import math
import numbers
from decimal import Decimal
from typing import Union

from loguru import logger

from src.core.commands.errors import InvalidOperation
from src.core.events import Signal
from .operations import OperationKind

Number = Union[int, float, Decimal, numbers.Real]


def _check_number(value, role: str):
    if isinstance(value, bool) or not isinstance(value, (numbers.Real, Decimal)):
        raise InvalidOperation(f"{role} must be a real number, got {value!r}")
    if isinstance(value, numbers.Rational):
        # Integers and fractions are exact and always finite.
        return value
    if isinstance(value, Decimal):
        finite = value.is_finite()
    else:
        try:
            finite = math.isfinite(value)
        except OverflowError:
            finite = False
    if not finite:
        raise InvalidOperation(f"{role} must be finite, got {value!r}")
    return value


def format_number(value) -> str:
    """str() of a value, abbreviated for ints past the interpreter's digit limit."""
    try:
        return str(value)
    except ValueError:
        return f"<{value.bit_length()}-bit integer>"


class Calculator:
    """
    Numeric accumulator mutated by apply(kind, operand).

    apply() is all-or-nothing: the new value is computed first and only
    stored when the operation is defined.

    Signals:
        on_changed(value, kind, operand): emitted after every applied operation
    """

    def __init__(self, initial: Number = 0, trace: bool = True):
        self._value = _check_number(initial, "Initial value")
        self.trace = trace
        self.on_changed = Signal("CalculatorChanged")

    @property
    def value(self) -> Number:
        return self._value

    def apply(self, kind: OperationKind, operand: Number) -> None:
        """
        Apply `kind` with `operand` to the current value.

        Raises:
            InvalidOperation: Division by zero, a non-numeric or non-finite
                operand, or a non-finite result. The value is unchanged.
            UnsupportedAction: If kind is not an OperationKind.
        """
        kind = OperationKind.parse(kind)
        _check_number(operand, "Operand")

        result = self._compute(kind, self._value, operand)

        self._value = result
        if self.trace:
            logger.debug(f"Current value = {format_number(result)} (following {kind.symbol} {format_number(operand)})")
        self.on_changed.emit(result, kind, operand)

    @staticmethod
    def _compute(kind: OperationKind, current: Number, operand: Number) -> Number:
        if kind is OperationKind.DIVIDE and operand == 0:
            raise InvalidOperation(f"Division by zero ({format_number(current)} / {operand})")
        try:
            if kind is OperationKind.ADD:
                result = current + operand
            elif kind is OperationKind.SUBTRACT:
                result = current - operand
            elif kind is OperationKind.MULTIPLY:
                result = current * operand
            elif isinstance(current, int) and isinstance(operand, int) and current % operand == 0:
                # Exact integer quotients stay integers.
                result = current // operand
            else:
                result = current / operand
        except (ArithmeticError, TypeError) as e:
            raise InvalidOperation(
                f"Cannot compute {format_number(current)} {kind.symbol} {format_number(operand)}: {e}"
            ) from e
        return _check_number(result, "Result")

    def __repr__(self) -> str:
        return f"Calculator(value={format_number(self._value)})"
