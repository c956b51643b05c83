"""
Calculator - arithmetic receiver driven through the HistoryEngine.

Provides:
- OperationKind / invert: the closed set of operations and their inverses
- Calculator: the numeric receiver
- CalculatorCommand: one reversible arithmetic step
- CalculatorSession: invoker exposing execute / undo / redo
"""
from .operations import OperationKind, invert
from .receiver import Calculator, format_number
from .commands import CalculatorCommand
from .session import CalculatorSession

__all__ = [
    "OperationKind",
    "invert",
    "Calculator",
    "format_number",
    "CalculatorCommand",
    "CalculatorSession",
]
