"""
loggers: route log records to named sinks by target.

One Dispatcher, one sink per target, an optional fallback for everything
else, and a process-wide level filter applied before routing.
"""

from loggers.records import LogRecord, LogLevel, LEVEL_OFF, DEFAULT_TARGET
from loggers.errors import (
    LoggersError,
    AlreadyInstalledError,
    DispatcherActiveError,
    SinkEmitError,
)
from loggers.formatters import LogFormatter, JsonFormatter, ConsoleFormatter
from loggers.sinks import Sink, BaseSink, ConsoleSink, FileSink, MemorySink
from loggers.config import DispatcherConfig, SinkConfig, SinkType
from loggers.dispatcher import Dispatcher
from loggers.facade import (
    install,
    get_dispatcher,
    set_max_level,
    max_level,
    log,
    trace,
    debug,
    info,
    warn,
    error,
)
from loggers.bridge import DispatchHandler, attach_to_stdlib

__all__ = [
    "LogRecord",
    "LogLevel",
    "LEVEL_OFF",
    "DEFAULT_TARGET",
    "LoggersError",
    "AlreadyInstalledError",
    "DispatcherActiveError",
    "SinkEmitError",
    "LogFormatter",
    "JsonFormatter",
    "ConsoleFormatter",
    "Sink",
    "BaseSink",
    "ConsoleSink",
    "FileSink",
    "MemorySink",
    "DispatcherConfig",
    "SinkConfig",
    "SinkType",
    "Dispatcher",
    "install",
    "get_dispatcher",
    "set_max_level",
    "max_level",
    "log",
    "trace",
    "debug",
    "info",
    "warn",
    "error",
    "DispatchHandler",
    "attach_to_stdlib",
]
