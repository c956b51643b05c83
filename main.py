import sys

from loguru import logger

from src.core.commands import ReplayFailure, InvalidOperation
from src.core.config import ConfigManager
from src.core.logging import setup_logging
from src.calculator import CalculatorSession


def main():
    config = ConfigManager(sys.argv[1] if len(sys.argv) > 1 else None)
    setup_logging(debug_mode=True, log_dir=config.data.general.log_dir)

    session = CalculatorSession.from_config(config)
    session.engine.signals.state_changed.connect(
        lambda: logger.debug(f"History: {session.engine.cursor}/{len(session.engine)} applied")
    )

    print("--- 1. Compute ---")
    session.execute("+", 100)
    session.execute("-", 50)
    session.execute("*", 10)
    session.execute("/", 2)
    print(f"Value: {session.value}")

    print("--- 2. Undo 4 levels ---")
    session.undo(4)
    print(f"Value: {session.value}")

    print("--- 3. Redo 3 levels ---")
    session.redo(3)
    print(f"Value: {session.value}")

    print("--- 4. Invalid operation leaves no trace ---")
    try:
        session.execute("/", 0)
    except InvalidOperation as e:
        print(f"Rejected: {e} (value {session.value}, {len(session.engine)} entries)")

    print("--- 5. New command discards redo tail ---")
    session.execute("+", 1)
    print(f"Value: {session.value}, redo available: {session.engine.can_redo}")

    print("--- 6. Replay failure ---")
    session.execute("*", 0)
    try:
        session.undo(2)
    except ReplayFailure as e:
        print(f"Undo stopped: {e} (cause: {e.__cause__})")

    for entry in session.history():
        print(f"  {'*' if entry.applied else ' '} {entry.description}")


if __name__ == "__main__":
    main()
