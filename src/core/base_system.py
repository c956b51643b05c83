from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .config import ConfigManager


class BaseSystem(ABC):
    """
    Abstract Base Class for core systems (HistoryEngine, ...).
    Ensures consistent initialization and access to shared config.

    Systems may be used standalone: both locator and config are optional.
    The async lifecycle is only needed by hosts that start/stop systems
    together:

        async with HistoryEngine() as engine:
            engine.execute(command)
    """
    def __init__(self, locator: Optional[object] = None,
                 config: Optional['ConfigManager'] = None):
        self.locator = locator
        self.config = config
        self._is_ready = False

    @abstractmethod
    async def initialize(self):
        """
        Async initialization logic.
        Subclasses must call super().initialize() to become ready.
        """
        self._is_ready = True

    @abstractmethod
    async def shutdown(self):
        """
        Cleanup logic.
        """
        self._is_ready = False

    @property
    def is_ready(self) -> bool:
        return self._is_ready

    async def __aenter__(self):
        """Async context manager entry: Initialize system."""
        if not self._is_ready:
            await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit: Shutdown system."""
        if self._is_ready:
            await self.shutdown()
