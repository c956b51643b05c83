"""
Foundation Command System.

Provides Command pattern infrastructure:
- UndoableCommand: Commands with undo/redo support
- CallableCommand: Undoable command from a forward/inverse pair of callables
- HistoryEngine: Cursor-based multi-level undo/redo
- Error kinds: InvalidOperation, UnsupportedAction, ReplayFailure
"""
from .base import UndoableCommand, CallableCommand
from .errors import CommandError, InvalidOperation, UnsupportedAction, ReplayFailure
from .history import HistoryEngine, HistoryEntry

__all__ = [
    # Base interfaces
    "UndoableCommand",
    "CallableCommand",
    # Errors
    "CommandError",
    "InvalidOperation",
    "UnsupportedAction",
    "ReplayFailure",
    # Systems
    "HistoryEngine",
    "HistoryEntry",
]
