import logging
import sys

import pytest

from mirage import logger as mirage_logger


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    # runs after monkeypatch has restored the environment and sys.stderr
    mirage_logger.setup_logger()


def _stderr_handlers(base: logging.Logger) -> list[logging.Handler]:
    return [h for h in base.handlers if isinstance(h, mirage_logger._StderrHandler)]


def test_setup_logger_idempotent_handlers():
    """Calling setup_logger() repeatedly should leave exactly one stderr StreamHandler."""
    base = mirage_logger.setup_logger(level=logging.DEBUG)
    _ = mirage_logger.setup_logger(level=logging.DEBUG)
    assert len(_stderr_handlers(base)) == 1
    assert base.propagate is False


def test_setup_logger_follows_swapped_stderr(monkeypatch):
    """If stderr is replaced between calls, the handler writes to the new stream instead of duplicating."""
    base = mirage_logger.setup_logger()

    class DummyStream:
        def __init__(self):
            self.lines: list[str] = []

        def write(self, s):
            self.lines.append(s)

        def flush(self):
            pass

    dummy = DummyStream()
    monkeypatch.setattr(sys, "stderr", dummy)
    base = mirage_logger.setup_logger()

    handlers = _stderr_handlers(base)
    assert len(handlers) == 1
    assert handlers[0].stream is dummy

    base.error("boom")
    assert any("ERROR: boom" in line for line in dummy.lines)


def test_handler_survives_closed_previous_stderr(monkeypatch):
    """A stderr that was swapped in and then closed must not break later setup or logging."""
    import io

    base = mirage_logger.setup_logger()
    first = io.StringIO()
    monkeypatch.setattr(sys, "stderr", first)
    base.error("first")
    first.close()

    second = io.StringIO()
    monkeypatch.setattr(sys, "stderr", second)
    base = mirage_logger.setup_logger()
    base.error("second")
    assert "ERROR: second" in second.getvalue()


def test_env_level_override(monkeypatch):
    monkeypatch.setenv("MIRAGE_LOG_LEVEL", "debug")
    assert mirage_logger.setup_logger().level == logging.DEBUG
    monkeypatch.setenv("MIRAGE_LOG_LEVEL", "nonsense")
    assert mirage_logger.setup_logger(level=logging.ERROR).level == logging.ERROR
    monkeypatch.delenv("MIRAGE_LOG_LEVEL")
    assert mirage_logger.setup_logger().level == logging.WARNING


def test_category_filter(monkeypatch):
    monkeypatch.setenv("MIRAGE_LOG_CATS", "io, cli")
    base = mirage_logger.setup_logger()
    (handler,) = _stderr_handlers(base)

    def record(name: str) -> logging.LogRecord:
        return logging.LogRecord(name, logging.ERROR, __file__, 1, "msg", None, None)

    assert handler.filter(record("mirage.io"))
    assert handler.filter(record("mirage.cli"))
    assert not handler.filter(record("mirage.fractal"))

    monkeypatch.delenv("MIRAGE_LOG_CATS")
    mirage_logger.setup_logger()
    assert handler.filter(record("mirage.fractal"))


def test_get_logger_returns_children():
    assert mirage_logger.get_logger().name == "mirage"
    assert mirage_logger.get_logger("io").name == "mirage.io"


def test_cli_log_options_reach_the_environment(monkeypatch, tmp_path):
    from mirage import cli

    # registered with monkeypatch so the values the CLI writes are undone afterwards
    monkeypatch.setenv("MIRAGE_LOG_LEVEL", "warning")
    monkeypatch.setenv("MIRAGE_LOG_CATS", "")
    out = tmp_path / "f.png"
    # invalid rotation keeps this fast: nothing is decoded or written
    assert cli.run(["--log-level", "debug", "--log-cats", "cli", "rotate", "a.png", str(out), "-d", "1"]) == 0
    assert mirage_logger.get_logger().level == logging.DEBUG
