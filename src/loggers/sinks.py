"""
Sinks (output destinations).

The Dispatcher only needs one capability from a sink: emit(record).
Sink is a structural protocol, so any object with an emit() method can
be registered; flush() and close() are optional and called when present.

Concrete sinks here share BaseSink for formatter handling:
  - FileSink:    one line per record appended to a file (JSON by default)
  - ConsoleSink: stdout/stderr, ERROR to stderr
  - MemorySink:  ring buffer of recent records, for tests and inspection

Each sink does its own locking; the Dispatcher never serializes calls.
"""

import sys
import threading
from collections import deque
from pathlib import Path
from typing import Protocol, TextIO, runtime_checkable

from loggers.errors import SinkEmitError
from loggers.formatters import ConsoleFormatter, JsonFormatter, LogFormatter
from loggers.records import LogLevel, LogRecord


@runtime_checkable
class Sink(Protocol):
    """Capability: accept a LogRecord and emit it somewhere."""

    def emit(self, record: LogRecord) -> None: ...


class BaseSink:
    """Formatter plumbing shared by the bundled sinks."""

    def __init__(self, formatter: LogFormatter | None = None):
        self._formatter = formatter

    @property
    def formatter(self) -> LogFormatter:
        if self._formatter is None:
            self._formatter = self._default_formatter()
        return self._formatter

    @formatter.setter
    def formatter(self, value: LogFormatter) -> None:
        self._formatter = value

    def _default_formatter(self) -> LogFormatter:
        return ConsoleFormatter()

    def emit(self, record: LogRecord) -> None:
        raise NotImplementedError

    def flush(self) -> None:
        pass

    def close(self) -> None:
        self.flush()


class ConsoleSink(BaseSink):
    """
    Writes one line per record to the terminal.
    ERROR goes to stderr, everything else to stdout, unless a fixed
    stream is given.
    """

    def __init__(
        self,
        formatter: LogFormatter | None = None,
        stream: TextIO | None = None,
    ):
        super().__init__(formatter)
        self.stream = stream

    def emit(self, record: LogRecord) -> None:
        formatted = self.formatter.format(record)
        stream = self.stream
        if stream is None:
            stream = sys.stderr if record.level >= LogLevel.ERROR else sys.stdout
        print(formatted, file=stream, flush=True)


class FileSink(BaseSink):
    """
    Appends one formatted line per record to a file.

    The file is created (and truncated unless truncate=False) when the
    sink is built, so a fresh process starts a fresh log. Writes reopen
    the file in append mode, which lets several sinks share one path.
    With echo=True each record is also printed to stdout in console form.
    """

    def __init__(
        self,
        path: str | Path,
        formatter: LogFormatter | None = None,
        echo: bool = False,
        truncate: bool = True,
    ):
        super().__init__(formatter)
        self.path = Path(path)
        self.echo = echo
        self._echo_formatter = ConsoleFormatter()
        self._lock = threading.Lock()

        self.path.parent.mkdir(parents=True, exist_ok=True)
        if truncate:
            self.path.write_text("", encoding="utf-8")
        else:
            self.path.touch()

    def _default_formatter(self) -> LogFormatter:
        return JsonFormatter()

    def emit(self, record: LogRecord) -> None:
        formatted = self.formatter.format(record)
        with self._lock:
            try:
                with open(self.path, "a", encoding="utf-8") as f:
                    f.write(formatted + "\n")
            except OSError as exc:
                raise SinkEmitError(str(self.path), str(exc)) from exc
        if self.echo:
            print(self._echo_formatter.format(record), flush=True)


class MemorySink(BaseSink):
    """
    Ring buffer of the last N records. Does not grow unbounded.
    """

    def __init__(self, capacity: int = 10000, formatter: LogFormatter | None = None):
        super().__init__(formatter)
        self._buffer: deque[LogRecord] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def emit(self, record: LogRecord) -> None:
        with self._lock:
            self._buffer.append(record)

    @property
    def records(self) -> list[LogRecord]:
        with self._lock:
            return list(self._buffer)

    def get_recent(self, n: int = 100) -> list[LogRecord]:
        """Last n records, oldest first."""
        if n <= 0:
            return []
        return self.records[-n:]

    def lines(self) -> list[str]:
        """Buffered records rendered with this sink's formatter."""
        return [self.formatter.format(r) for r in self.records]

    def clear(self) -> None:
        with self._lock:
            self._buffer.clear()

    @property
    def count(self) -> int:
        return len(self._buffer)

    @property
    def capacity(self) -> int | None:
        return self._buffer.maxlen
