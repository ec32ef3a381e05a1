"""
Process-wide log destination and logging call sites.

The active Dispatcher lives in a single-assignment cell: install() claims
it once per process, and a second install() fails with
AlreadyInstalledError while the first dispatcher stays active.

Call sites never need a reference to the dispatcher:

    loggers.info("Hello, world!", target="test")
    loggers.debug("Default")

Before anything is installed these are no-ops.
"""

import threading
from typing import TYPE_CHECKING, Any

from loggers.errors import AlreadyInstalledError
from loggers.records import LogLevel, resolve_threshold

if TYPE_CHECKING:
    from loggers.dispatcher import Dispatcher


_installed: "Dispatcher | None" = None
_lock = threading.Lock()


def install(dispatcher: "Dispatcher", max_level: int | str | None = None) -> None:
    """
    Make `dispatcher` the process's log destination and set the
    process-wide minimum level (None keeps the dispatcher's own).
    One-time: raises AlreadyInstalledError if a destination is already
    installed.
    """
    global _installed

    # Validate before claiming the cell so a bad level leaves it empty.
    if max_level is not None:
        resolve_threshold(max_level)
    with _lock:
        if _installed is not None:
            raise AlreadyInstalledError(
                f"A log destination is already installed "
                f"({type(_installed).__name__} at {id(_installed):#x})"
            )
        dispatcher._activate(max_level)
        _installed = dispatcher


def get_dispatcher() -> "Dispatcher | None":
    """The installed dispatcher, or None."""
    return _installed


def set_max_level(level: int | str) -> None:
    """Change the process-wide level filter on the installed dispatcher."""
    dispatcher = _installed
    if dispatcher is None:
        raise RuntimeError("No log destination installed")
    dispatcher.max_level = level


def max_level() -> int | None:
    """Current process-wide level filter, or None if nothing is installed."""
    dispatcher = _installed
    return dispatcher.max_level if dispatcher is not None else None


def reset() -> None:
    """
    Close and uninstall the active dispatcher.
    For testing only, not for production use.
    """
    global _installed
    with _lock:
        try:
            if _installed is not None:
                _installed.close()
        finally:
            _installed = None


# ── Call sites ────────────────────────────────────────────────────────

def log(level: int | str, message: str, target: str | None = None, **ctx: Any) -> None:
    dispatcher = _installed
    if dispatcher is None:
        return
    dispatcher.log(level, message, target, **ctx)


def trace(message: str, target: str | None = None, **ctx: Any) -> None:
    log(LogLevel.TRACE, message, target, **ctx)


def debug(message: str, target: str | None = None, **ctx: Any) -> None:
    log(LogLevel.DEBUG, message, target, **ctx)


def info(message: str, target: str | None = None, **ctx: Any) -> None:
    log(LogLevel.INFO, message, target, **ctx)


def warn(message: str, target: str | None = None, **ctx: Any) -> None:
    log(LogLevel.WARN, message, target, **ctx)


def error(message: str, target: str | None = None, **ctx: Any) -> None:
    log(LogLevel.ERROR, message, target, **ctx)
