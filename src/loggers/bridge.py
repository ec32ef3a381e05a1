"""
Bridge from the stdlib logging module into the Dispatcher.

Libraries that call logging.getLogger(__name__) keep working unchanged:
the stdlib logger name becomes the record target, so a sink registered
for "urllib3" receives urllib3's output.

    attach_to_stdlib()                      # root logger, installed dispatcher
    attach_to_stdlib(logging.getLogger("app"), dispatcher=my_dispatcher)
"""

import logging

from loggers import facade
from loggers.dispatcher import Dispatcher
from loggers.records import LogLevel, nearest_level


def stdlib_to_level(levelno: int) -> LogLevel:
    """Map a stdlib level number to the nearest LogLevel at or below it."""
    return nearest_level(levelno)


class DispatchHandler(logging.Handler):
    """
    logging.Handler that forwards records to a Dispatcher.

    Uses the given dispatcher, or whichever one is installed at emit time.
    Records from the root logger go to the default target.
    """

    def __init__(self, dispatcher: Dispatcher | None = None, level: int = logging.NOTSET):
        super().__init__(level)
        self._dispatcher = dispatcher

    @property
    def dispatcher(self) -> Dispatcher | None:
        return self._dispatcher or facade.get_dispatcher()

    def emit(self, record: logging.LogRecord) -> None:
        dispatcher = self.dispatcher
        if dispatcher is None:
            return
        try:
            level = stdlib_to_level(record.levelno)
            target = None if record.name == "root" else record.name
            if not dispatcher.enabled(level, target):
                return
            context = {}
            if record.exc_info and record.exc_info[1]:
                context["exception"] = logging.Formatter().formatException(record.exc_info)
            dispatcher.log(level, record.getMessage(), target, **context)
        except Exception:
            self.handleError(record)


def attach_to_stdlib(
    logger: logging.Logger | None = None,
    dispatcher: Dispatcher | None = None,
) -> DispatchHandler:
    """
    Attach a DispatchHandler to `logger` (root by default). Idempotent:
    an existing DispatchHandler on the logger is returned instead, rebound
    to `dispatcher` when one is given.
    """
    logger = logger or logging.getLogger()
    for handler in logger.handlers:
        if isinstance(handler, DispatchHandler):
            if dispatcher is not None:
                handler._dispatcher = dispatcher
            return handler
    handler = DispatchHandler(dispatcher)
    logger.addHandler(handler)
    return handler
