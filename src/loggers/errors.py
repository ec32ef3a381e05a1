"""Exceptions raised by the loggers package."""


class LoggersError(Exception):
    """Base class for loggers errors."""


class AlreadyInstalledError(LoggersError, RuntimeError):
    """A process-wide log destination is already installed."""


class DispatcherActiveError(LoggersError, RuntimeError):
    """Registration attempted on a dispatcher that is already installed."""


class SinkEmitError(LoggersError):
    """
    A sink could not write a record.

    Raised inside a sink's emit(); the Dispatcher catches it and never
    lets it reach the logging call site.
    """

    def __init__(self, sink: str, reason: str):
        self.sink = sink
        self.reason = reason
        super().__init__(f"Sink '{sink}' failed to emit: {reason}")
