"""Unit tests for logging setup"""

import logging

import pytest

from sprint_lab.logging_config import KEEP_SESSIONS, NOISY_LOGGERS, setup_logging

pytestmark = pytest.mark.unit


@pytest.fixture
def restore_root():
    root = logging.getLogger()
    handlers = list(root.handlers)
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers


def test_noisy_loggers_dropped_below_warning(tmp_path, restore_root):
    session_log = setup_logging(str(tmp_path / "app.log"))

    logging.getLogger("httpx").info("request sent")
    logging.getLogger("httpx").warning("request retried")
    logging.getLogger("sprint_lab.test").debug("kept in file")
    for handler in logging.getLogger().handlers:
        handler.flush()

    content = session_log.read_text(encoding="utf-8")
    assert "request sent" not in content
    assert "request retried" in content
    assert "kept in file" in content
    assert all(logging.getLogger(name).level == logging.WARNING for name in NOISY_LOGGERS)


def test_old_sessions_pruned(tmp_path, restore_root):
    for i in range(KEEP_SESSIONS + 2):
        (tmp_path / f"app_20250101_00000{i}.log").write_text("old", encoding="utf-8")

    setup_logging(str(tmp_path / "app.log"))

    assert len(list(tmp_path.glob("app_*.log"))) == KEEP_SESSIONS
