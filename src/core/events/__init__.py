"""
Event System - synchronous observer signals.

Provides:
- Signal: observer pattern for sync notifications (config changes,
  receiver state traces, history state changes)

Usage:
    from src.core.events import Signal

    changed = Signal("ValueChanged")
    changed.connect(print)
    changed.emit(42)
"""
from .observer import Signal


__all__ = ["Signal"]
