"""
Foundation Core - Application Infrastructure.

Provides core systems for reversible, command-driven state changes:
- BaseSystem: Abstract base for all systems
- ConfigManager: Configuration with persistence
- Signal: Synchronous observer notifications
- HistoryEngine: Command pattern with multi-level undo/redo

Usage:
    from src.core import HistoryEngine, CallableCommand

    engine = HistoryEngine()
    engine.execute(CallableCommand(do_it, undo_it, "Do it"))
    engine.undo()
"""
from .base_system import BaseSystem
from .config import (
    ConfigManager,
    AppConfig,
    GeneralSettings,
    HistorySettings,
    CalculatorSettings,
)
from .events import Signal
from .logging import setup_logging
from .commands import (
    UndoableCommand,
    CallableCommand,
    CommandError,
    InvalidOperation,
    UnsupportedAction,
    ReplayFailure,
    HistoryEngine,
    HistoryEntry,
)

__all__ = [
    # Core infrastructure
    "BaseSystem",
    "setup_logging",

    # Configuration
    "ConfigManager",
    "AppConfig",
    "GeneralSettings",
    "HistorySettings",
    "CalculatorSettings",

    # Events
    "Signal",

    # Commands
    "UndoableCommand",
    "CallableCommand",
    "CommandError",
    "InvalidOperation",
    "UnsupportedAction",
    "ReplayFailure",
    "HistoryEngine",
    "HistoryEntry",
]
