"""
Reversible Calc - command history with multi-level undo/redo.

src.core holds the reusable command/history infrastructure,
src.calculator the arithmetic receiver and its console front end.
"""

__version__ = "0.1.0"
