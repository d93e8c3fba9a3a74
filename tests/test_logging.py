import logging
import logging.handlers

import pytest
from structlog.contextvars import bind_contextvars, clear_contextvars, get_contextvars

from expressroute.core import logging as core_logging
from expressroute.core.logging import bound_context, configure_logging


@pytest.fixture
def fresh_root(monkeypatch):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    monkeypatch.setattr(core_logging, "_configured", False)
    yield root
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
    clear_contextvars()


def test_bound_context_restores_previous_bindings() -> None:
    bind_contextvars(app="X")
    try:
        with bound_context(run_id="abc"):
            assert get_contextvars() == {"app": "X", "run_id": "abc"}
        assert get_contextvars() == {"app": "X"}
    finally:
        clear_contextvars()


def test_configure_logging_adds_rotating_file(fresh_root, tmp_path) -> None:
    log_file = tmp_path / "logs" / "sample.log"
    configure_logging(level="DEBUG", log_file=log_file, max_bytes=1024, retention=3, context={"app": "x"})

    files = [h for h in fresh_root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
    assert len(files) == 1
    assert files[0].maxBytes == 1024 and files[0].backupCount == 3
    assert log_file.parent.is_dir()
    assert fresh_root.level == logging.DEBUG
    assert logging.getLogger("azure.identity").level == logging.WARNING
    assert get_contextvars() == {"app": "x"}


def test_configure_logging_runs_once(fresh_root) -> None:
    configure_logging(level="INFO")
    handlers = list(fresh_root.handlers)
    configure_logging(level="DEBUG")
    assert fresh_root.handlers == handlers
    assert fresh_root.level == logging.INFO
