import pytest
from loguru import logger

from src.core.commands import HistoryEngine
from src.calculator import Calculator, CalculatorSession


@pytest.fixture
def engine():
    return HistoryEngine()


@pytest.fixture
def calculator():
    return Calculator(0)


@pytest.fixture
def session(calculator, engine):
    return CalculatorSession(calculator=calculator, engine=engine)


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages = []
    handler_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
