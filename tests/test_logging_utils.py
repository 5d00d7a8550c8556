from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

import pytest

from overlay_dismissal import logging_utils


@pytest.fixture(autouse=True)
def _reset_package_logger():
    logger = logging.getLogger(logging_utils.LOGGER_NAME)
    original = list(logger.handlers)
    yield
    for handler in list(logger.handlers):
        if handler not in original:
            logger.removeHandler(handler)
            handler.close()


def test_resolve_logs_dir_prefers_env(monkeypatch, tmp_path):
    target = tmp_path / "custom"
    monkeypatch.setenv(logging_utils.LOG_DIR_ENV_VAR, str(target))
    assert logging_utils.resolve_logs_dir() == target
    assert target.is_dir()


def test_resolve_logs_dir_uses_xdg_state(monkeypatch, tmp_path):
    monkeypatch.delenv(logging_utils.LOG_DIR_ENV_VAR, raising=False)
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path))
    assert logging_utils.resolve_logs_dir() == tmp_path / "logs" / "OverlayDismissal"


def _our_handlers(logger):
    return [h for h in logger.handlers if getattr(h, "_overlay_dismissal_handler", False)]


@pytest.mark.parametrize("retention, backups", [(3, 2), (1, 0), (0, 0)])
def test_configure_logging_applies_retention(tmp_path, retention, backups):
    logger = logging_utils.configure_logging(debug=False, retention=retention, log_dir=tmp_path, max_bytes=1024)
    (handler,) = _our_handlers(logger)
    assert isinstance(handler, RotatingFileHandler)
    assert handler.backupCount == backups
    assert handler.maxBytes == 1024
    assert logger.level == logging.INFO


def test_configure_logging_adds_single_handler(tmp_path):
    logger = logging_utils.configure_logging(debug=False, retention=2, log_dir=tmp_path)
    logging_utils.configure_logging(debug=True, retention=2, log_dir=tmp_path)
    ours = _our_handlers(logger)
    assert len(ours) == 1
    assert logger.level == logging.DEBUG
    logging.getLogger("OverlayDismissal.Lifecycle").debug("hello")
    ours[0].flush()
    assert "hello" in (tmp_path / logging_utils.LOG_FILENAME).read_text(encoding="utf-8")
