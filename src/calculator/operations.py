"""
Calculator operation kinds.

The set is closed: add, subtract, multiply, divide. Every kind has an
inverse in the same set, so every calculator command can be undone.
"""
from enum import Enum
from typing import Union

from src.core.commands.errors import UnsupportedAction


class OperationKind(Enum):
    """Arithmetic operations understood by the Calculator receiver."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def parse(cls, kind: Union["OperationKind", str]) -> "OperationKind":
        """
        Resolve a kind from a member, a symbol or a name.

        Raises:
            UnsupportedAction: If the kind is not one of the four operations
        """
        if isinstance(kind, cls):
            return kind
        if isinstance(kind, str):
            resolved = _ALIASES.get(kind.strip().lower())
            if resolved is not None:
                return resolved
        raise UnsupportedAction(f"Unsupported operation: {kind!r}")


_ALIASES = {
    "+": OperationKind.ADD,
    "add": OperationKind.ADD,
    "plus": OperationKind.ADD,
    "-": OperationKind.SUBTRACT,
    "sub": OperationKind.SUBTRACT,
    "subtract": OperationKind.SUBTRACT,
    "minus": OperationKind.SUBTRACT,
    "*": OperationKind.MULTIPLY,
    "x": OperationKind.MULTIPLY,
    "mul": OperationKind.MULTIPLY,
    "multiply": OperationKind.MULTIPLY,
    "/": OperationKind.DIVIDE,
    "div": OperationKind.DIVIDE,
    "divide": OperationKind.DIVIDE,
}

_INVERSES = {
    OperationKind.ADD: OperationKind.SUBTRACT,
    OperationKind.SUBTRACT: OperationKind.ADD,
    OperationKind.MULTIPLY: OperationKind.DIVIDE,
    OperationKind.DIVIDE: OperationKind.MULTIPLY,
}


def invert(kind: OperationKind) -> OperationKind:
    """Return the operation that reverses `kind`."""
    try:
        return _INVERSES[kind]
    except KeyError:
        raise UnsupportedAction(f"Unsupported operation: {kind!r}") from None
