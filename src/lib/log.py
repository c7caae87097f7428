"""
Centralized logging using Loguru with context-aware verbosity.

This module provides a LOG() function that respects the current ProgramState's
verbosity level without requiring explicit state passing, and a WARN()
function for diagnostics that are always shown (unknown settings, missing
images, documents without slide delimiters).

Features:
- Context-aware logging tied to ProgramState verbosity
- Rich formatting with timestamps, colors, and metadata
- Thread-safe using contextvars
- Buffering while the terminal screen is owned by the presentation

Usage:
    from lib.log import LOG, WARN, state_connectToLogger

    # At start of pipeline function:
    state_connectToLogger(state)

    # Anywhere in that context:
    LOG("This message appears if verbosity >= 1", level=1)
    LOG("Debug details appear if verbosity >= 2", level=2)
    WARN("Unknown option 'colour' ignored")
"""

from loguru import logger
from typing import Any, Iterator, List, Optional
from contextlib import contextmanager
from contextvars import ContextVar
import sys

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

# Configure loguru with termdown-specific format
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
_handler_id: int = logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Call this at the start of each pipeline function to make the state's
    verbosity setting available to LOG() calls throughout that context.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata (e.g., exc_info=True for exceptions)

    Verbosity levels:
        1 = Normal output (default)
        2 = Verbose (-v)
        3 = Debug (-vv or higher)
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)


def WARN(message: str) -> None:
    """
    Emit a non-fatal diagnostic regardless of verbosity.

    Warnings go to the diagnostic channel (stderr, or the buffer while a
    presentation owns the screen), never into the rendered deck.

    Args:
        message: Single-line description including the source location
    """
    logger.opt(depth=1).warning(message)


@contextmanager
def log_buffer() -> Iterator[List[str]]:
    """
    Hold back log output while the terminal is in full-screen mode.

    Replaces the stderr handler with an in-memory sink for the duration of
    the block and replays the collected records to stderr afterwards, also
    when the block is left through an exception.

    Yields:
        The list collecting formatted records
    """
    global _handler_id
    records: List[str] = []
    logger.remove(_handler_id)
    buffer_id = logger.add(records.append, format=logger_format, level="DEBUG", colorize=False)
    try:
        yield records
    finally:
        logger.remove(buffer_id)
        _handler_id = logger.add(sys.stderr, format=logger_format, level="DEBUG")
        for record in records:
            sys.stderr.write(record)
