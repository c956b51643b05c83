"""
History Engine - cursor-based undo/redo management.

Keeps an ordered log of executed UndoableCommands and a cursor splitting it
into applied ([0, cursor)) and undone ([cursor, len)) entries. Supports
multi-level undo/redo and signals for UI binding.
"""
import operator
import threading
from dataclasses import dataclass
from typing import List, Optional, Tuple

from loguru import logger

from .base import UndoableCommand
from .errors import ReplayFailure
from ..base_system import BaseSystem
from ..events import Signal
from ..service_decorator import Service


@dataclass(frozen=True)
class HistoryEntry:
    """Snapshot of one log entry, for display."""
    index: int
    description: str
    applied: bool


class _HistorySignals:
    """Signal holder for history state changes."""

    def __init__(self):
        self.can_undo_changed = Signal("CanUndoChanged")
        self.can_redo_changed = Signal("CanRedoChanged")
        self.state_changed = Signal("HistoryStateChanged")


@Service
class HistoryEngine(BaseSystem):
    """
    Records executed commands and replays them backwards or forwards.

    Features:
    - Linear history: executing after an undo discards the redo tail
    - Multi-level undo(n)/redo(n), silently clamped at the history ends
    - Optional retention limit (oldest applied entries are dropped first)
    - Signals for UI binding (via signals property)
    - One lock per operation, so log, cursor and receiver change together

    Usage:
        engine = HistoryEngine()

        engine.execute(RenameFileCommand(file, "old.txt", "new.txt"))

        engine.undo()   # Reverts to old.txt
        engine.redo()   # Back to new.txt

        engine.signals.can_undo_changed.connect(undo_action.setEnabled)
    """

    def __init__(self, locator=None, config=None, max_history: Optional[int] = None):
        """
        Initialize HistoryEngine.

        Args:
            locator: Optional service locator of the host application
            config: Optional ConfigManager; supplies history.max_history
                when max_history is not given and keeps it in sync
            max_history: Maximum number of entries kept (None = unbounded)
        """
        super().__init__(locator, config)

        self._signals = _HistorySignals()
        self._lock = threading.RLock()

        self._log: List[UndoableCommand] = []
        self._cursor = 0

        if max_history is None and config is not None:
            max_history = config.data.history.max_history
            config.on_changed.connect(self._on_config_changed)
        self._max_history = self._check_max_history(max_history)

        # Track previous state for signal emission
        self._last_can_undo = False
        self._last_can_redo = False

    @property
    def signals(self) -> _HistorySignals:
        """Get signals object for UI binding."""
        return self._signals

    async def initialize(self):
        """Initialize the HistoryEngine."""
        await super().initialize()

    async def shutdown(self):
        """Shutdown and clear history."""
        self.clear()
        await super().shutdown()

    # --- State ---

    @property
    def cursor(self) -> int:
        """Number of applied entries; the boundary between undo and redo."""
        return self._cursor

    def __len__(self) -> int:
        return len(self._log)

    @property
    def commands(self) -> Tuple[UndoableCommand, ...]:
        """All recorded commands in execution order."""
        with self._lock:
            return tuple(self._log)

    @property
    def undo_count(self) -> int:
        return self._cursor

    @property
    def redo_count(self) -> int:
        return len(self._log) - self._cursor

    @property
    def can_undo(self) -> bool:
        """Check if undo is available."""
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        """Check if redo is available."""
        return self._cursor < len(self._log)

    @property
    def undo_description(self) -> Optional[str]:
        """Get description of next undo action."""
        with self._lock:
            if self._cursor > 0:
                return self._log[self._cursor - 1].description
            return None

    @property
    def redo_description(self) -> Optional[str]:
        """Get description of next redo action."""
        with self._lock:
            if self._cursor < len(self._log):
                return self._log[self._cursor].description
            return None

    def history(self) -> List[HistoryEntry]:
        """Describe every log entry and whether it is currently applied."""
        with self._lock:
            return [
                HistoryEntry(index, command.description, index < self._cursor)
                for index, command in enumerate(self._log)
            ]

    @property
    def max_history(self) -> Optional[int]:
        return self._max_history

    @max_history.setter
    def max_history(self, value: Optional[int]) -> None:
        with self._lock:
            self._max_history = self._check_max_history(value)
            if self._trim_oldest():
                self._emit_state_changes()

    # --- Operations ---

    def execute(self, command: UndoableCommand) -> None:
        """
        Execute a command and record it.

        Any undone entries are discarded. If the command raises, its error
        propagates unchanged and the history is left untouched.

        Args:
            command: UndoableCommand to execute
        """
        with self._lock:
            try:
                command.execute()
            except Exception as e:
                logger.error(f"Command execution failed: {command.description}: {e}")
                raise

            discarded = len(self._log) - self._cursor
            if discarded:
                del self._log[self._cursor:]
                logger.debug(f"Discarded {discarded} redo entr{'y' if discarded == 1 else 'ies'}")

            self._log.append(command)
            self._cursor += 1
            self._trim_oldest()

            logger.debug(f"Executed: {command.description}")
            self._emit_state_changes()

    def undo(self, levels: int = 1) -> int:
        """
        Undo up to `levels` commands, newest first.

        Running out of history is not an error: the remaining levels are
        skipped.

        Args:
            levels: Number of commands to undo

        Returns:
            Number of commands actually undone

        Raises:
            ReplayFailure: If a command's undo raised. Levels completed
                before it stay undone; the failing one stays applied.
        """
        levels = self._check_levels(levels)
        with self._lock:
            logger.info(f"---- Undo {levels} levels")
            completed = 0
            try:
                while completed < levels and self._cursor > 0:
                    command = self._log[self._cursor - 1]
                    try:
                        command.undo()
                    except Exception as e:
                        logger.error(f"Undo failed: {command.description}: {e}")
                        raise ReplayFailure("undo", command, completed) from e
                    self._cursor -= 1
                    completed += 1
                    logger.debug(f"Undone: {command.description}")
            finally:
                if completed:
                    self._emit_state_changes()
            return completed

    def redo(self, levels: int = 1) -> int:
        """
        Redo up to `levels` previously undone commands, oldest first.

        Args:
            levels: Number of commands to redo

        Returns:
            Number of commands actually redone

        Raises:
            ReplayFailure: If a command's redo raised. Levels completed
                before it stay redone; the failing one stays undone.
        """
        levels = self._check_levels(levels)
        with self._lock:
            logger.info(f"---- Redo {levels} levels")
            completed = 0
            try:
                while completed < levels and self._cursor < len(self._log):
                    command = self._log[self._cursor]
                    try:
                        command.redo()
                    except Exception as e:
                        logger.error(f"Redo failed: {command.description}: {e}")
                        raise ReplayFailure("redo", command, completed) from e
                    self._cursor += 1
                    completed += 1
                    logger.debug(f"Redone: {command.description}")
            finally:
                if completed:
                    self._emit_state_changes()
            return completed

    def clear(self) -> None:
        """Clear all undo/redo history. Receiver state is not touched."""
        with self._lock:
            self._log.clear()
            self._cursor = 0
            logger.debug("History cleared")
            self._emit_state_changes()

    # --- Internals ---

    @staticmethod
    def _check_levels(levels: int) -> int:
        if isinstance(levels, bool):
            raise TypeError("levels must be an integer, not bool")
        levels = operator.index(levels)
        if levels < 0:
            raise ValueError(f"levels must be non-negative, got {levels}")
        return levels

    @staticmethod
    def _check_max_history(value: Optional[int]) -> Optional[int]:
        if value is None:
            return None
        value = operator.index(value)
        if value < 1:
            raise ValueError(f"max_history must be at least 1, got {value}")
        return value

    def _trim_oldest(self) -> int:
        """Drop applied entries from the oldest end above max_history."""
        if self._max_history is None:
            return 0
        # Undone entries are never dropped, only applied ones.
        overflow = min(len(self._log) - self._max_history, self._cursor)
        if overflow <= 0:
            return 0
        del self._log[:overflow]
        self._cursor -= overflow
        logger.debug(f"History limit {self._max_history} reached, dropped {overflow} oldest")
        return overflow

    def _on_config_changed(self, section: str, key: str, value) -> None:
        if section == "history" and key == "max_history":
            self.max_history = value

    def _emit_state_changes(self) -> None:
        """Emit signals if can_undo/can_redo state changed."""
        current_can_undo = self.can_undo
        current_can_redo = self.can_redo

        if current_can_undo != self._last_can_undo:
            self._last_can_undo = current_can_undo
            self._signals.can_undo_changed.emit(current_can_undo)

        if current_can_redo != self._last_can_redo:
            self._last_can_redo = current_can_redo
            self._signals.can_redo_changed.emit(current_can_redo)

        self._signals.state_changed.emit()
