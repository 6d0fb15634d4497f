from collections import deque
from typing import TextIO


class RuneReader:
    """Read a text stream one character at a time with bounded look-ahead.

    Tracks the 1-based line and column of the last character returned by
    ``read``. ``\\r\\n`` counts as a single line break.
    """

    def __init__(self, stream: TextIO, chunk_size: int = 4096) -> None:
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        self._stream = stream
        self._chunk_size = chunk_size
        self._pending: deque[str] = deque()
        self._eof = False
        self._last = ""
        self.line = 1
        self.column = 0

    def _fill(self, count: int) -> None:
        while len(self._pending) < count and not self._eof:
            chunk = self._stream.read(self._chunk_size)
            if not chunk:
                self._eof = True
            else:
                self._pending.extend(chunk)

    def _advance(self, char: str) -> None:
        if self._last == "\n" or (self._last == "\r" and char != "\n"):
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self._last = char

    def read(self) -> str | None:
        """Return the next character, or ``None`` once the stream is exhausted."""
        self._fill(1)
        if not self._pending:
            return None
        char = self._pending.popleft()
        self._advance(char)
        return char

    def peek(self, count: int) -> str:
        """Return up to ``count`` upcoming characters without consuming them."""
        self._fill(count)
        return "".join(self._pending[i] for i in range(min(count, len(self._pending))))

    def skip(self, count: int) -> None:
        for _ in range(count):
            if self.read() is None:
                break
