"""
Command Errors.

Error kinds raised by receivers and by the HistoryEngine:
- InvalidOperation: receiver cannot perform the mutation; state unchanged
- UnsupportedAction: operation kind outside the supported set
- ReplayFailure: a recorded effect failed while undoing/redoing
"""
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .base import UndoableCommand


class CommandError(Exception):
    """Base class for all command errors."""
    pass


class InvalidOperation(CommandError):
    """Raised when a receiver cannot perform the requested mutation."""
    pass


class UnsupportedAction(CommandError, ValueError):
    """Raised for an operation kind outside the supported set."""
    pass


class ReplayFailure(CommandError):
    """
    Raised when a recorded command fails during undo or redo.

    The original error is chained as __cause__.

    Attributes:
        direction: "undo" or "redo"
        command: The command whose effect failed
        completed: Levels applied in the same call before the failure
    """

    def __init__(self, direction: str, command: 'UndoableCommand',
                 completed: int = 0, message: Optional[str] = None):
        self.direction = direction
        self.command = command
        self.completed = completed
        if message is None:
            message = (
                f"{direction.capitalize()} of '{command.description}' failed "
                f"after {completed} completed level(s)"
            )
        super().__init__(message)
