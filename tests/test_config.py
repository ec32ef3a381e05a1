"""
Tests for Pydantic config schemas and building a Dispatcher from them.

Covers:
- SinkConfig validation (types, formatter names, file path requirement)
- DispatcherConfig defaults, level validation, YAML loading
- Dispatcher.from_config / configure
"""

import json

import pytest
from pydantic import ValidationError

from loggers import facade
from loggers.config import DispatcherConfig, SinkConfig, SinkType
from loggers.dispatcher import Dispatcher
from loggers.formatters import ConsoleFormatter, JsonFormatter
from loggers.records import LEVEL_OFF, LogLevel
from loggers.sinks import ConsoleSink, FileSink, MemorySink


@pytest.fixture(autouse=True)
def reset_destination():
    facade.reset()
    yield
    facade.reset()


# ═══════════════════════════════════════════════════════════════════
#  SinkConfig
# ═══════════════════════════════════════════════════════════════════

class TestSinkConfig:
    def test_file_requires_path(self):
        with pytest.raises(ValidationError, match="requires 'path'"):
            SinkConfig(type="file")

    def test_file_defaults(self):
        cfg = SinkConfig(type="file", path="logs/app.log")
        assert cfg.type == SinkType.FILE
        assert cfg.echo is False
        assert cfg.truncate is True

    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            SinkConfig(type="carrier_pigeon")

    def test_unknown_formatter(self):
        with pytest.raises(ValidationError, match="Unknown formatter"):
            SinkConfig(type="console", formatter="xml")

    def test_capacity_positive(self):
        with pytest.raises(ValidationError):
            SinkConfig(type="memory", capacity=0)


# ═══════════════════════════════════════════════════════════════════
#  DispatcherConfig
# ═══════════════════════════════════════════════════════════════════

class TestDispatcherConfig:
    def test_defaults(self):
        cfg = DispatcherConfig()
        assert cfg.max_level == "trace"
        assert cfg.threshold == LogLevel.TRACE
        assert cfg.loggers == {}
        assert cfg.fallback is None

    def test_level_by_int_and_off(self):
        assert DispatcherConfig(max_level=30).threshold == 30
        assert DispatcherConfig(max_level="off").threshold == LEVEL_OFF

    def test_unknown_level(self):
        with pytest.raises(ValidationError, match="Unknown log level"):
            DispatcherConfig(max_level="chatty")

    def test_from_yaml_string(self):
        cfg = DispatcherConfig.from_yaml_string("""
max_level: info
loggers:
  test:
    type: file
    path: tests/output/system.log
    echo: true
  metrics:
    type: memory
    capacity: 50
fallback:
  type: console
  formatter: json
""")
        assert cfg.threshold == LogLevel.INFO
        assert cfg.loggers["test"].echo is True
        assert cfg.loggers["metrics"].capacity == 50
        assert cfg.fallback.formatter == "json"

    def test_empty_yaml(self):
        cfg = DispatcherConfig.from_yaml_string("")
        assert cfg.loggers == {}

    def test_from_yaml_file(self, tmp_path):
        path = tmp_path / "logging.yaml"
        path.write_text("max_level: warn\nfallback: {type: memory}\n")
        cfg = DispatcherConfig.from_yaml(path)
        assert cfg.threshold == LogLevel.WARN
        assert cfg.fallback.type == SinkType.MEMORY

    def test_to_dict(self):
        cfg = DispatcherConfig.from_dict({
            "loggers": {"db": {"type": "memory"}},
        })
        d = cfg.to_dict()
        assert d["loggers"]["db"]["type"] == "memory"
        assert "fallback" not in d


# ═══════════════════════════════════════════════════════════════════
#  Dispatcher.from_config
# ═══════════════════════════════════════════════════════════════════

class TestDispatcherFromConfig:
    def test_builds_sinks(self, tmp_path):
        log_path = tmp_path / "system.log"
        d = Dispatcher.from_config({
            "max_level": "debug",
            "loggers": {
                "test": {"type": "file", "path": str(log_path)},
                "mem": {"type": "memory", "capacity": 5, "formatter": "console"},
            },
            "fallback": {"type": "console"},
        })
        assert d.max_level == LogLevel.DEBUG
        assert isinstance(d.get_logger("test"), FileSink)
        assert isinstance(d.get_logger("test").formatter, JsonFormatter)
        mem = d.get_logger("mem")
        assert isinstance(mem, MemorySink)
        assert mem.capacity == 5
        assert isinstance(mem.formatter, ConsoleFormatter)
        assert isinstance(d.fallback, ConsoleSink)

    def test_config_drives_routing(self, tmp_path):
        log_path = tmp_path / "system.log"
        cfg = DispatcherConfig.from_yaml_string(f"""
max_level: trace
loggers:
  test: {{type: file, path: "{log_path.as_posix()}"}}
fallback: {{type: file, path: "{log_path.as_posix()}", truncate: false}}
""")
        d = Dispatcher.from_config(cfg)
        d.install()

        facade.info("Hello, world!", target="test")
        facade.debug("Default")

        lines = [json.loads(l) for l in log_path.read_text().splitlines()]
        assert [(l["target"], l["message"]) for l in lines] == [
            ("test", "Hello, world!"),
            ("default", "Default"),
        ]

    def test_configured_level_survives_install(self):
        d = Dispatcher.from_config({"max_level": "error", "fallback": {"type": "memory"}})
        d.install()
        facade.warn("dropped")
        facade.error("kept")
        assert [r.message for r in d.fallback.records] == ["kept"]

    def test_configure_after_install_rejected(self):
        from loggers.errors import DispatcherActiveError

        d = Dispatcher()
        d.install()
        with pytest.raises(DispatcherActiveError):
            d.configure({"loggers": {"late": {"type": "memory"}}})
