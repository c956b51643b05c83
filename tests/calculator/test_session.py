"""
End-to-end behaviour of CalculatorSession (receiver + history engine).
"""
import pytest

from src.calculator import CalculatorSession, OperationKind
from src.core.commands.errors import InvalidOperation, ReplayFailure, UnsupportedAction
from src.core.config import ConfigManager


def compute_demo(session):
    session.execute(OperationKind.ADD, 100)
    assert session.value == 100
    session.execute(OperationKind.SUBTRACT, 50)
    assert session.value == 50
    session.execute(OperationKind.MULTIPLY, 10)
    assert session.value == 500
    session.execute(OperationKind.DIVIDE, 2)
    assert session.value == 250


def test_undo_four_redo_three(session):
    compute_demo(session)

    assert session.undo(4) == 4
    assert session.value == 0
    assert session.engine.cursor == 0

    assert session.redo(3) == 3
    assert session.value == 500
    assert session.engine.cursor == 3
    assert session.engine.redo_description == "/ 2"


def test_division_by_zero_is_rejected_without_trace(session):
    session.execute("+", 9)

    with pytest.raises(InvalidOperation):
        session.execute("/", 0)

    assert session.value == 9
    assert len(session.engine) == 1
    assert session.engine.cursor == 1


def test_unsupported_kind_is_rejected_before_mutation(session):
    session.execute("+", 1)

    with pytest.raises(UnsupportedAction):
        session.execute("%", 3)

    assert session.value == 1
    assert len(session.engine) == 1


def test_execute_mid_history_truncates_redo_tail(session):
    compute_demo(session)
    session.undo(2)
    assert session.engine.cursor == 2

    session.execute("+", 1)

    assert len(session.engine) == 3
    assert session.engine.cursor == 3
    assert session.value == 51
    assert session.redo(1) == 0
    assert session.value == 51
    assert [e.description for e in session.history()] == ["+ 100", "- 50", "+ 1"]


@pytest.mark.parametrize("levels", [5, 10, 1000])
def test_undo_past_start_equals_undo_cursor(session, levels):
    compute_demo(session)

    assert session.undo(levels) == 4
    assert session.value == 0
    assert session.engine.cursor == 0


def test_full_undo_redo_restores_final_value(session):
    steps = [("+", 7), ("*", 6), ("-", 2), ("/", 4), ("+", 0.5), ("*", -3)]
    for kind, operand in steps:
        session.execute(kind, operand)
    final = session.value

    session.undo(len(session.engine))
    assert session.value == 0
    session.redo(len(session.engine))

    assert session.value == final


def test_zero_levels_are_no_ops(session):
    compute_demo(session)
    session.undo(1)
    before = (session.value, session.engine.cursor, len(session.engine))

    session.undo(0)
    session.redo(0)

    assert (session.value, session.engine.cursor, len(session.engine)) == before


def test_multiply_by_zero_cannot_be_undone(session):
    session.execute("+", 5)
    session.execute("*", 0)

    with pytest.raises(ReplayFailure) as exc_info:
        session.undo(2)

    assert isinstance(exc_info.value.__cause__, InvalidOperation)
    assert exc_info.value.completed == 0
    assert session.engine.cursor == 2
    assert session.value == 0


def test_session_from_config():
    config = ConfigManager(None)
    config.update("calculator", "initial_value", 10)
    config.update("history", "max_history", 2)

    session = CalculatorSession.from_config(config)
    session.execute("+", 1)
    session.execute("+", 2)
    session.execute("+", 3)

    assert session.value == 16
    assert len(session.engine) == 2
    session.undo(5)
    assert session.value == 11


def test_reset_keeps_value(session):
    compute_demo(session)

    session.reset()

    assert session.value == 250
    assert len(session.engine) == 0
    assert session.undo(1) == 0


def test_big_integer_history_round_trip(session):
    session.execute("+", 10 ** 200)
    session.execute("*", 10 ** 200)

    assert session.value == 10 ** 400
    assert len(session.engine) == 2

    session.undo(2)
    assert session.value == 0
    session.redo(2)
    assert session.value == 10 ** 400
