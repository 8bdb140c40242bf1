"""Structured exceptions raised by ``throw`` and caught by ``try`` handlers."""

from __future__ import annotations

from typing import Optional

MAX_TRY_DEPTH = 64


class ThrownError(Exception):
    """An exception thrown by a program.

    ``handler`` is the depth of the ``try`` block that receives it, or ``None``
    when no handler was active and the exception is unhandled.
    """

    def __init__(self, message: Optional[str], handler: Optional[int] = None) -> None:
        text = message if message is not None else "(nil)"
        super().__init__(text if handler is not None else f"Unhandled exception: {text}")
        self.message = message
        self.handler = handler

    @property
    def handled(self) -> bool:
        """Whether a ``try`` block was active to receive this exception."""
        return self.handler is not None


class TryStack:
    """Tracks how deeply ``try`` blocks are nested and routes thrown messages."""

    def __init__(self, max_depth: int = MAX_TRY_DEPTH) -> None:
        if max_depth < 1:
            raise ValueError(f"maximum try depth must be positive: {max_depth}")
        self._max_depth = max_depth
        self._depth = 0
        self.last_message: Optional[str] = None

    def begin(self) -> int:
        """Enter a ``try`` block and return the depth it was entered at."""
        if self._depth >= self._max_depth:
            raise RuntimeError("try nesting too deep")
        entered = self._depth
        self._depth += 1
        return entered

    def end(self) -> None:
        """Leave the innermost ``try`` block, if any."""
        if self._depth > 0:
            self._depth -= 1

    def throw(self, message: Optional[str]) -> None:
        """Record ``message`` and raise it to the innermost handler."""
        self.last_message = message
        if self._depth > 0:
            self._depth -= 1
            raise ThrownError(message, self._depth)
        raise ThrownError(message)

    def depth(self) -> int:
        """Number of ``try`` blocks currently open."""
        return self._depth