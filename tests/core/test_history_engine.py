"""
Tests for HistoryEngine (cursor-based undo/redo over any UndoableCommand).
"""
import threading
import pytest
from unittest.mock import MagicMock

from src.core.commands import CallableCommand, HistoryEngine, ReplayFailure, UndoableCommand
from src.core.config import ConfigManager


class Counter:
    def __init__(self):
        self.value = 0


def add(counter, amount):
    def forward():
        counter.value += amount

    def inverse():
        counter.value -= amount

    return CallableCommand(forward, inverse, f"add {amount}")


class FlakyCommand(UndoableCommand):
    """Succeeds on execute, then fails on undo and/or redo when told to."""

    def __init__(self, counter, fail_undo=False, fail_redo=False):
        self.counter = counter
        self.fail_undo = fail_undo
        self.fail_redo = fail_redo

    @property
    def description(self):
        return "flaky"

    def execute(self):
        self.counter.value += 1

    def undo(self):
        if self.fail_undo:
            raise RuntimeError("undo broke")
        self.counter.value -= 1

    def redo(self):
        if self.fail_redo:
            raise RuntimeError("redo broke")
        self.execute()


@pytest.fixture
def counter():
    return Counter()


# ============================================================
# execute
# ============================================================

class TestExecute:

    def test_initial_state(self, engine):
        assert engine.cursor == 0
        assert len(engine) == 0
        assert not engine.can_undo
        assert not engine.can_redo
        assert engine.undo_description is None
        assert engine.redo_description is None

    def test_execute_applies_and_records(self, engine, counter):
        engine.execute(add(counter, 5))

        assert counter.value == 5
        assert engine.cursor == 1
        assert len(engine) == 1
        assert engine.undo_description == "add 5"
        assert engine.undo_count == 1
        assert [c.description for c in engine.commands] == ["add 5"]

    def test_failed_execute_leaves_no_trace(self, engine, counter):
        engine.execute(add(counter, 1))

        def explode():
            raise ValueError("nope")

        with pytest.raises(ValueError, match="nope"):
            engine.execute(CallableCommand(explode, lambda: None))

        assert counter.value == 1
        assert engine.cursor == 1
        assert len(engine) == 1

    def test_failed_execute_keeps_redo_tail(self, engine, counter):
        engine.execute(add(counter, 1))
        engine.execute(add(counter, 2))
        engine.undo(1)

        def explode():
            raise ValueError("nope")

        with pytest.raises(ValueError):
            engine.execute(CallableCommand(explode, lambda: None))

        assert engine.redo_count == 1
        assert engine.redo_description == "add 2"

    def test_execute_discards_redo_tail(self, engine, counter):
        for amount in (1, 2, 3, 4):
            engine.execute(add(counter, amount))
        engine.undo(2)

        engine.execute(add(counter, 100))

        assert [e.description for e in engine.history()] == ["add 1", "add 2", "add 100"]
        assert engine.cursor == 3
        assert engine.redo(1) == 0
        assert counter.value == 103


# ============================================================
# undo / redo
# ============================================================

class TestUndoRedo:

    def test_undo_and_redo_single_level(self, engine, counter):
        engine.execute(add(counter, 10))

        assert engine.undo() == 1
        assert counter.value == 0
        assert engine.redo_description == "add 10"

        assert engine.redo() == 1
        assert counter.value == 10

    def test_undo_is_clamped(self, engine, counter):
        engine.execute(add(counter, 1))
        engine.execute(add(counter, 2))

        assert engine.undo(10) == 2
        assert engine.cursor == 0
        assert counter.value == 0
        assert engine.undo(1) == 0

    def test_redo_is_clamped(self, engine, counter):
        engine.execute(add(counter, 1))
        engine.execute(add(counter, 2))
        engine.undo(2)

        assert engine.redo(99) == 2
        assert engine.cursor == 2
        assert counter.value == 3

    def test_redo_reaches_last_entry(self, engine, counter):
        for amount in (1, 2, 3):
            engine.execute(add(counter, amount))
        engine.undo(3)

        engine.redo(3)

        assert engine.cursor == len(engine) == 3
        assert counter.value == 6

    def test_zero_levels_change_nothing(self, engine, counter):
        engine.execute(add(counter, 1))
        engine.execute(add(counter, 2))
        engine.undo(1)
        observer = MagicMock()
        engine.signals.state_changed.connect(observer)

        assert engine.undo(0) == 0
        assert engine.redo(0) == 0

        assert engine.cursor == 1
        assert len(engine) == 2
        assert counter.value == 1
        observer.assert_not_called()

    def test_undo_all_then_redo_all_round_trip(self, engine, counter):
        for amount in (5, -3, 8, 13):
            engine.execute(add(counter, amount))
        final = counter.value

        engine.undo(len(engine))
        assert counter.value == 0
        engine.redo(len(engine))

        assert counter.value == final
        assert engine.cursor == 4

    @pytest.mark.parametrize("levels", [-1, -10])
    def test_negative_levels_rejected(self, engine, levels):
        with pytest.raises(ValueError):
            engine.undo(levels)
        with pytest.raises(ValueError):
            engine.redo(levels)

    @pytest.mark.parametrize("levels", [1.5, "2", True])
    def test_non_integer_levels_rejected(self, engine, levels):
        with pytest.raises(TypeError):
            engine.undo(levels)


# ============================================================
# Replay failures
# ============================================================

class TestReplayFailure:

    def test_undo_failure_keeps_partial_progress(self, engine, counter):
        engine.execute(FlakyCommand(counter, fail_undo=True))
        engine.execute(add(counter, 10))
        engine.execute(add(counter, 20))

        with pytest.raises(ReplayFailure) as exc_info:
            engine.undo(3)

        failure = exc_info.value
        assert failure.direction == "undo"
        assert failure.completed == 2
        assert failure.command.description == "flaky"
        assert isinstance(failure.__cause__, RuntimeError)
        # Two levels undone, the failing one stays applied
        assert engine.cursor == 1
        assert counter.value == 1

    def test_redo_failure_keeps_partial_progress(self, engine, counter):
        engine.execute(add(counter, 10))
        flaky = FlakyCommand(counter)
        engine.execute(flaky)
        engine.execute(add(counter, 20))
        engine.undo(3)
        flaky.fail_redo = True

        with pytest.raises(ReplayFailure) as exc_info:
            engine.redo(3)

        assert exc_info.value.direction == "redo"
        assert exc_info.value.completed == 1
        assert engine.cursor == 1
        assert counter.value == 10
        assert engine.redo_description == "flaky"

    def test_failure_on_first_level_does_not_move_cursor(self, engine, counter):
        engine.execute(FlakyCommand(counter, fail_undo=True))

        with pytest.raises(ReplayFailure) as exc_info:
            engine.undo(1)

        assert exc_info.value.completed == 0
        assert engine.cursor == 1
        assert counter.value == 1

    def test_failure_is_logged(self, engine, counter, log_messages):
        engine.execute(FlakyCommand(counter, fail_undo=True))

        with pytest.raises(ReplayFailure):
            engine.undo()

        assert any("Undo failed" in m and "undo broke" in m for m in log_messages)


# ============================================================
# Retention
# ============================================================

class TestRetention:

    def test_unbounded_by_default(self, engine, counter):
        for _ in range(500):
            engine.execute(add(counter, 1))
        assert len(engine) == 500
        assert engine.max_history is None

    def test_oldest_entries_dropped(self, counter):
        engine = HistoryEngine(max_history=3)
        for amount in (1, 2, 3, 4, 5):
            engine.execute(add(counter, amount))

        assert [e.description for e in engine.history()] == ["add 3", "add 4", "add 5"]
        assert engine.cursor == 3
        assert engine.undo(10) == 3
        assert counter.value == 3

    def test_lowering_limit_never_drops_redo_entries(self, counter):
        engine = HistoryEngine(max_history=10)
        for amount in (1, 2, 3, 4):
            engine.execute(add(counter, amount))
        engine.undo(3)

        engine.max_history = 2

        # Only one applied entry exists, so only it may go
        assert engine.cursor == 0
        assert len(engine) == 3
        assert engine.redo(3) == 3
        assert counter.value == 10

    def test_invalid_limit_rejected(self):
        with pytest.raises(ValueError):
            HistoryEngine(max_history=0)

    def test_limit_follows_config(self, counter):
        config = ConfigManager(None)
        config.update("history", "max_history", 4)
        engine = HistoryEngine(config=config)
        assert engine.max_history == 4

        for amount in range(4):
            engine.execute(add(counter, amount))
        config.update("history", "max_history", 2)

        assert engine.max_history == 2
        assert len(engine) == 2


# ============================================================
# Signals, lifecycle, clear
# ============================================================

class TestSignals:

    def test_can_undo_and_can_redo_emitted_on_change(self, engine, counter):
        can_undo = MagicMock()
        can_redo = MagicMock()
        engine.signals.can_undo_changed.connect(can_undo)
        engine.signals.can_redo_changed.connect(can_redo)

        engine.execute(add(counter, 1))
        engine.execute(add(counter, 2))
        engine.undo(2)
        engine.redo(1)

        assert [c.args for c in can_undo.call_args_list] == [(True,), (False,), (True,)]
        assert [c.args for c in can_redo.call_args_list] == [(True,)]

    def test_state_changed_once_per_operation(self, engine, counter):
        observer = MagicMock()
        engine.signals.state_changed.connect(observer)

        engine.execute(add(counter, 1))
        engine.execute(add(counter, 2))
        engine.undo(2)
        engine.undo(1)  # nothing left

        assert observer.call_count == 3

    def test_clear_resets_history_but_not_state(self, engine, counter):
        engine.execute(add(counter, 1))
        engine.execute(add(counter, 2))
        engine.undo(1)

        engine.clear()

        assert len(engine) == 0
        assert engine.cursor == 0
        assert counter.value == 1

    @pytest.mark.asyncio
    async def test_async_lifecycle(self, counter):
        async with HistoryEngine() as engine:
            assert engine.is_ready
            engine.execute(add(counter, 1))
            assert len(engine) == 1

        assert not engine.is_ready
        assert len(engine) == 0


# ============================================================
# Concurrency
# ============================================================

def test_concurrent_execute_keeps_log_and_state_consistent(engine, counter):
    def worker():
        for _ in range(200):
            engine.execute(add(counter, 1))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(engine) == engine.cursor == 800
    assert counter.value == 800

    engine.undo(800)
    assert counter.value == 0
