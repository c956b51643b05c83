"""
Calculator Session - the invoker.

Ties one Calculator receiver to one HistoryEngine and exposes the
execute / undo / redo surface used by callers such as the CLI.
"""
from typing import List, Optional, Union

from loguru import logger

from src.core.commands import HistoryEngine, HistoryEntry
from src.core.config import AppConfig, ConfigManager
from .commands import CalculatorCommand
from .operations import OperationKind
from .receiver import Calculator, Number


class CalculatorSession:
    """
    Invoker owning a calculator and its command history.

    Usage:
        session = CalculatorSession()
        session.execute("+", 100)
        session.execute(OperationKind.DIVIDE, 4)
        session.undo(2)
        session.redo()
        session.value  # 25
    """

    def __init__(self, calculator: Optional[Calculator] = None,
                 engine: Optional[HistoryEngine] = None,
                 config: Optional[ConfigManager] = None):
        if calculator is None:
            settings = config.data.calculator if config is not None else AppConfig().calculator
            calculator = Calculator(settings.initial_value, trace=settings.trace)
        self.calculator = calculator
        self.engine = engine if engine is not None else HistoryEngine(config=config)

    @classmethod
    def from_config(cls, config: ConfigManager) -> "CalculatorSession":
        """Build receiver and engine from the calculator/history settings."""
        return cls(config=config)

    @property
    def value(self) -> Number:
        return self.calculator.value

    def execute(self, kind: Union[OperationKind, str], operand: Number) -> None:
        """
        Apply one operation and record it.

        Raises:
            UnsupportedAction: Unknown kind; nothing is applied or recorded.
            InvalidOperation: The calculator rejected the operation; nothing
                is applied or recorded.
        """
        command = CalculatorCommand(self.calculator, OperationKind.parse(kind), operand)
        self.engine.execute(command)

    def undo(self, levels: int = 1) -> int:
        return self.engine.undo(levels)

    def redo(self, levels: int = 1) -> int:
        return self.engine.redo(levels)

    def history(self) -> List[HistoryEntry]:
        return self.engine.history()

    def reset(self) -> None:
        """Forget the history; the current value is kept."""
        logger.debug(f"Resetting history at value {self.value}")
        self.engine.clear()
