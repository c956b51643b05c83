from src.core.commands.base import UndoableCommand
from .operations import OperationKind, invert
from .receiver import Calculator, Number, format_number


class CalculatorCommand(UndoableCommand):
    """
    One arithmetic step on a Calculator.

    Holds only the receiver handle, the kind and the operand; undo applies
    the inverse kind with the same operand.
    """

    def __init__(self, calculator: Calculator, kind: OperationKind, operand: Number):
        self.calculator = calculator
        self.kind = OperationKind.parse(kind)
        self.operand = operand

    @property
    def description(self) -> str:
        return f"{self.kind.symbol} {format_number(self.operand)}"

    def execute(self) -> None:
        self.calculator.apply(self.kind, self.operand)

    def undo(self) -> None:
        self.calculator.apply(invert(self.kind), self.operand)
