#!/usr/bin/env python3
"""
Reversible Calculator - Console Application

Runs arithmetic steps through the history engine and lets you walk the
history back and forth.

Usage:
    reversible-calc add:100 sub:50 mul:10 div:2 undo:4 redo:3
    reversible-calc --config settings.json "+:1" value history
    reversible-calc --interactive

Steps:
    <op>:<operand>   op is add, sub, mul, div (or + - * /; in a shell,
                     a step may not start with "-", use sub)
    undo[:N]         undo N levels (default 1)
    redo[:N]         redo N levels (default 1)
    value            print the current value
    history          print the command log
    reset            forget the history, keep the value
"""
import argparse
import sys
from typing import List, Optional, Sequence, TextIO, Tuple, Union

from loguru import logger

from src.core.commands.errors import CommandError, UnsupportedAction
from src.core.config import ConfigManager
from src.core.logging import setup_logging
from .operations import OperationKind
from .receiver import format_number
from .session import CalculatorSession

Step = Tuple[str, Union[int, float, OperationKind, None], Union[int, float, None]]

HISTORY_COMMANDS = ("undo", "redo")
QUERY_COMMANDS = ("value", "history", "reset")
QUIT_COMMANDS = ("quit", "exit")


class StepSyntaxError(ValueError):
    """Raised for a step that cannot be parsed."""
    pass


def parse_number(text: str) -> Union[int, float]:
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        raise StepSyntaxError(f"Not a number: {text!r}") from None


def parse_step(text: str) -> Step:
    """
    Parse one step such as 'add:100', '/ 2', 'undo:3' or 'history'.

    Returns:
        ("apply", kind, operand), ("undo", levels, None), ("redo", levels, None)
        or (query, None, None)
    """
    head, _, tail = text.strip().replace(":", " ", 1).partition(" ")
    name = head.strip().lower()
    arg = tail.strip()
    if not name:
        raise StepSyntaxError("Empty step")

    if name in HISTORY_COMMANDS:
        if not arg:
            return (name, 1, None)
        levels = parse_number(arg)
        if not isinstance(levels, int) or levels < 0:
            raise StepSyntaxError(f"{name} needs a non-negative integer, got {arg!r}")
        return (name, levels, None)

    if name in QUERY_COMMANDS or name in QUIT_COMMANDS:
        if arg:
            raise StepSyntaxError(f"{name} takes no argument")
        return (name, None, None)

    try:
        kind = OperationKind.parse(name)
    except UnsupportedAction:
        raise StepSyntaxError(f"Unknown step: {text.strip()!r}") from None
    if not arg:
        raise StepSyntaxError(f"{name} needs an operand")
    return ("apply", kind, parse_number(arg))


def format_history(session: CalculatorSession) -> List[str]:
    entries = session.history()
    if not entries:
        return ["(history is empty)"]
    lines = []
    for entry in entries:
        marker = "*" if entry.applied else " "
        lines.append(f"{marker} {entry.index + 1:>3}. {entry.description}")
    return lines


def run_step(session: CalculatorSession, step: Step, out: TextIO) -> bool:
    """
    Execute one parsed step.

    Returns:
        False when the step asks to quit, True otherwise
    """
    name, first, second = step
    if name == "apply":
        session.execute(first, second)
        print(f"Current value = {format_number(session.value)} (following {first.symbol} {format_number(second)})", file=out)
    elif name == "undo":
        done = session.undo(first)
        print(f"Undo {done}/{first} levels -> {format_number(session.value)}", file=out)
    elif name == "redo":
        done = session.redo(first)
        print(f"Redo {done}/{first} levels -> {format_number(session.value)}", file=out)
    elif name == "value":
        print(format_number(session.value), file=out)
    elif name == "history":
        for line in format_history(session):
            print(line, file=out)
    elif name == "reset":
        session.reset()
        print(f"History cleared, value = {format_number(session.value)}", file=out)
    elif name in QUIT_COMMANDS:
        return False
    return True


def run_interactive(session: CalculatorSession, stdin: TextIO, out: TextIO, err: TextIO) -> int:
    """Read one step per line until EOF or quit. Errors do not stop the loop."""
    for line in stdin:
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        try:
            if not run_step(session, parse_step(line), out):
                break
        except (StepSyntaxError, CommandError) as e:
            print(f"✗ {e}", file=err)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reversible-calc",
        description="Calculator with multi-level undo/redo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="Steps:" + __doc__.split("Steps:", 1)[1],
    )
    parser.add_argument("steps", nargs="*", help="Steps to run in order")
    parser.add_argument("--config", "-c", help="Path to JSON or TOML config file")
    parser.add_argument("--debug", action="store_true", help="Show debug logging")
    parser.add_argument("--interactive", "-i", action="store_true",
                        help="Read steps from stdin, one per line")
    return parser


def main(argv: Optional[Sequence[str]] = None, stdin: Optional[TextIO] = None,
         stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    stderr = stderr or sys.stderr

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        steps = [parse_step(text) for text in args.steps]
    except StepSyntaxError as e:
        parser.error(str(e))

    try:
        config = ConfigManager(args.config) if args.config else ConfigManager(None)
    except (OSError, ValueError) as e:
        print(f"✗ Cannot load config: {e}", file=stderr)
        return 2

    setup_logging(debug_mode=args.debug or config.data.general.debug_mode,
                  log_dir=config.data.general.log_dir)

    session = CalculatorSession.from_config(config)

    for step in steps:
        try:
            if not run_step(session, step, stdout):
                return 0
        except CommandError as e:
            logger.debug(f"Step {step} failed: {e!r}")
            print(f"✗ {e}", file=stderr)
            return 1

    if args.interactive:
        return run_interactive(session, stdin, stdout, stderr)
    if not steps:
        parser.print_help(stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
