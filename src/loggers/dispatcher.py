"""
Dispatcher: routes each record to the sink registered for its target.

One dispatcher, many named sinks, one optional fallback:
  1. record.level below max_level → dropped, no sink touched
  2. sink registered for record's target → that sink
  3. otherwise the fallback sink, if set
  4. otherwise dropped silently

Two lifecycle phases. While configuring, add_logger()/set_fallback()
mutate the sink map; once installed as the process-wide destination the
map is frozen and only dispatch happens, so the hot path takes no lock.

Sink failures never reach the logging call site. They are counted per
target and reported once on stderr.
"""

import threading
from typing import Any

from loggers import facade
from loggers.config import DispatcherConfig, SinkConfig, SinkType
from loggers.errors import DispatcherActiveError
from loggers.formatters import build_formatter
from loggers.records import (
    DEFAULT_TARGET,
    LogLevel,
    LogRecord,
    level_name,
    nearest_level,
    resolve_threshold,
)
from loggers.sinks import ConsoleSink, FileSink, MemorySink, Sink


FALLBACK = "<fallback>"
# Failure key for log calls whose level could not be resolved.
BAD_LEVEL = "<level>"

# Internal diagnostics; written as ERROR so ConsoleSink picks stderr.
_diagnostics = ConsoleSink()


class Dispatcher:
    """
    Target-keyed multiplexer over sinks.

    Usage:
        dispatcher = Dispatcher()
        dispatcher.add_logger("test", FileSink("tests/output/system.log"))
        dispatcher.set_fallback(FileSink("tests/output/system.log", truncate=False))
        dispatcher.install(max_level=LogLevel.TRACE)

        loggers.info("Hello, world!", target="test")
        loggers.debug("Default")
    """

    def __init__(self, max_level: int | str = LogLevel.TRACE) -> None:
        self._sinks: dict[str, Sink] = {}
        self._fallback: Sink | None = None
        self._max_level: int = resolve_threshold(max_level)
        self._active = False
        self._failures: dict[str, int] = {}
        self._failure_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: DispatcherConfig | dict) -> "Dispatcher":
        """Build a configuring-phase dispatcher from config."""
        dispatcher = cls()
        dispatcher.configure(config)
        return dispatcher

    # ── Configuration ─────────────────────────────────────────────

    def configure(self, config: DispatcherConfig | dict) -> None:
        """
        Register sinks from a DispatcherConfig (or a dict that validates
        as one). Targets already present are overwritten.
        """
        if isinstance(config, dict):
            config = DispatcherConfig.from_dict(config)

        self.max_level = config.threshold
        for target, sink_cfg in config.loggers.items():
            self.add_logger(target, _build_sink(sink_cfg))
        if config.fallback is not None:
            self.set_fallback(_build_sink(config.fallback))

    def add_logger(self, target: str, sink: Sink) -> Sink | None:
        """
        Register `sink` for `target`. Last registration wins: the sink it
        replaces (if any) is returned so the caller can close it.
        """
        self._ensure_configuring()
        if not isinstance(sink, Sink):
            raise TypeError(
                f"Sink must provide emit(record), got {type(sink).__name__}"
            )
        previous = self._sinks.get(target)
        self._sinks[target] = sink
        return previous

    def set_fallback(self, sink: Sink) -> Sink | None:
        """Register the catch-all sink, replacing any previous one."""
        self._ensure_configuring()
        if not isinstance(sink, Sink):
            raise TypeError(
                f"Sink must provide emit(record), got {type(sink).__name__}"
            )
        previous = self._fallback
        self._fallback = sink
        return previous

    def _ensure_configuring(self) -> None:
        if self._active:
            raise DispatcherActiveError(
                "Dispatcher is installed; sinks can no longer be registered"
            )

    # ── Activation ────────────────────────────────────────────────

    def install(self, max_level: int | str | None = None) -> None:
        """
        Make this dispatcher the process-wide log destination, optionally
        setting its level filter.
        Raises AlreadyInstalledError if one is already installed.
        """
        facade.install(self, max_level)

    def _activate(self, max_level: int | str | None) -> None:
        """Called by facade.install() once the process-wide cell is claimed."""
        if max_level is not None:
            self.max_level = max_level
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    # ── Level ─────────────────────────────────────────────────────

    @property
    def max_level(self) -> int:
        return self._max_level

    @max_level.setter
    def max_level(self, value: int | str) -> None:
        self._max_level = resolve_threshold(value)

    # ── Accessors ─────────────────────────────────────────────────

    def get_logger(self, target: str) -> Sink | None:
        return self._sinks.get(target)

    @property
    def fallback(self) -> Sink | None:
        return self._fallback

    @property
    def targets(self) -> list[str]:
        return sorted(self._sinks)

    def _route(self, target: str) -> Sink | None:
        sink = self._sinks.get(target)
        if sink is None:
            return self._fallback
        return sink

    # ── Dispatch ──────────────────────────────────────────────────

    def enabled(self, level: int, target: str | None = None) -> bool:
        """
        Would a record at `level` for `target` reach a sink?
        Call sites use this to skip building expensive messages.
        """
        if level < self._max_level:
            return False
        key = target if target is not None else DEFAULT_TARGET
        return self._route(key) is not None

    def log(
        self,
        level: int | str,
        message: str,
        target: str | None = None,
        **context: Any,
    ) -> None:
        """
        Build a record and dispatch it. Filtered levels cost one comparison
        and build no record.

        Numeric levels between the named ones map down to the nearest
        level (25 logs as INFO). An unknown level name drops the call and
        is counted under BAD_LEVEL; it never raises.
        """
        try:
            level = nearest_level(level)
        except (ValueError, TypeError) as exc:
            source = f"log call for '{target or DEFAULT_TARGET}'"
            self._record_failure(BAD_LEVEL, source, exc)
            return
        if level < self._max_level:
            return
        self.dispatch(LogRecord.create(level, message, target, **context))

    def dispatch(self, record: LogRecord) -> None:
        """Route one record. Never raises into the caller."""
        if record.level < self._max_level:
            return

        key = record.target_name
        sink = self._route(key)
        if sink is None:
            return

        try:
            sink.emit(record)
        except Exception as exc:
            key = key if key in self._sinks else FALLBACK
            self._record_failure(key, f"sink {type(sink).__name__} for '{key}'", exc)

    def _record_failure(self, key: str, source: str, exc: Exception) -> None:
        with self._failure_lock:
            count = self._failures.get(key, 0) + 1
            self._failures[key] = count
        if count == 1:
            try:
                _diagnostics.emit(LogRecord.create(
                    LogLevel.ERROR,
                    f"{source} failed: {exc}",
                    target="loggers",
                ))
            except Exception:
                pass

    # ── Status ────────────────────────────────────────────────────

    def status(self) -> dict:
        """Snapshot of dispatcher state for display."""
        with self._failure_lock:
            failures = dict(self._failures)
        return {
            "max_level": self._max_level,
            "max_level_name": level_name(self._max_level),
            "phase": "active" if self._active else "configuring",
            "targets": {
                target: type(sink).__name__
                for target, sink in sorted(self._sinks.items())
            },
            "fallback": type(self._fallback).__name__ if self._fallback else None,
            "failures": failures,
        }

    # ── Cleanup ───────────────────────────────────────────────────

    def _owned_sinks(self) -> list[Sink]:
        """Registered sinks, each instance once even if shared."""
        seen: dict[int, Sink] = {}
        for sink in self._sinks.values():
            seen.setdefault(id(sink), sink)
        if self._fallback is not None:
            seen.setdefault(id(self._fallback), self._fallback)
        return list(seen.values())

    def flush(self) -> None:
        """Flush every sink that supports it."""
        for sink in self._owned_sinks():
            flush = getattr(sink, "flush", None)
            if callable(flush):
                flush()

    def close(self) -> None:
        """Close every sink that supports it. Call during shutdown."""
        for sink in self._owned_sinks():
            close = getattr(sink, "close", None)
            if callable(close):
                close()


# ── Helpers ───────────────────────────────────────────────────────────

def _build_sink(cfg: SinkConfig) -> Sink:
    """Build a sink from its config entry."""
    formatter = build_formatter(cfg.formatter) if cfg.formatter else None

    if cfg.type == SinkType.FILE:
        return FileSink(
            path=cfg.path,
            formatter=formatter,
            echo=cfg.echo,
            truncate=cfg.truncate,
        )
    elif cfg.type == SinkType.CONSOLE:
        return ConsoleSink(formatter=formatter)
    elif cfg.type == SinkType.MEMORY:
        return MemorySink(capacity=cfg.capacity or 10000, formatter=formatter)
    else:
        raise ValueError(f"Unknown sink type '{cfg.type}'")
