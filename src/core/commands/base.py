"""
Foundation Command Pattern - Base Interfaces.

Provides:
- UndoableCommand: Command with undo/redo support
- CallableCommand: Command assembled from a forward and an inverse callable
"""
from abc import ABC, abstractmethod
from typing import Callable, Optional


class UndoableCommand(ABC):
    """
    Command that supports undo/redo operations.
    
    Use this for operations that modify state and should be reversible.
    Execute via HistoryEngine to enable undo/redo functionality.
    
    Example:
        class RenameFileCommand(UndoableCommand):
            def __init__(self, file, old_name, new_name):
                self.file = file
                self.old_name = old_name
                self.new_name = new_name
            
            @property
            def description(self) -> str:
                return f"Rename to {self.new_name}"
            
            def execute(self):
                self.file.name = self.new_name
            
            def undo(self):
                self.file.name = self.old_name
    """
    
    @property
    def description(self) -> str:
        """
        Human-readable description for UI display.
        
        Returns:
            Description string (default: class name)
        """
        return self.__class__.__name__
    
    @abstractmethod
    def execute(self) -> None:
        """
        Execute the command (forward operation).
        
        This is called when the command is first run and on redo.
        """
        pass
    
    @abstractmethod
    def undo(self) -> None:
        """
        Reverse the command.
        
        Must restore state to exactly what it was before execute().
        """
        pass
    
    def redo(self) -> None:
        """
        Re-execute the command after undo.
        
        Default implementation calls execute().
        Override if redo requires different logic.
        """
        self.execute()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.description!r}>"


class CallableCommand(UndoableCommand):
    """
    Reversible command built from two zero-argument callables.

    The inverse must restore the state the forward callable changed;
    the engine does not check it.

    Example:
        items = []
        cmd = CallableCommand(lambda: items.append(1), items.pop, "Append 1")
        engine.execute(cmd)
    """

    def __init__(self, forward: Callable[[], object], inverse: Callable[[], object],
                 description: Optional[str] = None):
        if not callable(forward) or not callable(inverse):
            raise TypeError("forward and inverse must be callable")
        self._forward = forward
        self._inverse = inverse
        self._description = description

    @property
    def description(self) -> str:
        if self._description:
            return self._description
        return getattr(self._forward, "__name__", super().description)

    def execute(self) -> None:
        self._forward()

    def undo(self) -> None:
        self._inverse()
