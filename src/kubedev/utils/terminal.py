"""Local terminal helpers for interactive sessions (POSIX only)."""

from __future__ import annotations

import select
import termios
import tty
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TextIO


def is_tty(stream: Any) -> bool:
    """Whether ``stream`` is attached to a terminal."""
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # Closed stream
        return False


@contextmanager
def raw_mode(stream: TextIO) -> Iterator[None]:
    """Put a terminal stream into raw mode, restoring its settings on exit.

    Streams that are not terminals are left untouched.
    """
    if not is_tty(stream):
        yield
        return

    fd = stream.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


def read_ready(stream: Any, timeout: float = 0) -> bool:
    """Whether ``stream`` has input available within ``timeout`` seconds."""
    readable, _, _ = select.select([stream], [], [], timeout)
    return bool(readable)
