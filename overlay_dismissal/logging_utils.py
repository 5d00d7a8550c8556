from __future__ import annotations

import logging
import os
import tempfile
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOGGER_NAME = "OverlayDismissal"
LOG_DIR_ENV_VAR = "OVERLAY_DISMISSAL_LOG_DIR"
LOG_FILENAME = "overlay-dismissal.log"


def resolve_logs_dir(log_dir_name: str = "OverlayDismissal") -> Path:
    """
    Resolve the directory to store coordinator logs.

    Strategy:
    - Use OVERLAY_DISMISSAL_LOG_DIR if set.
    - Fall back to XDG state/cache locations, then `cwd/logs/<log_dir_name>`.
    - Final fallback: tempdir/<log_dir_name>.
    """
    candidates = []

    env_override = os.environ.get(LOG_DIR_ENV_VAR)
    if env_override:
        candidates.append(Path(env_override).expanduser())

    state_home = Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))
    cache_home = Path(os.environ.get("XDG_CACHE_HOME", Path.home() / ".cache"))
    candidates.append(state_home / "logs" / log_dir_name)
    candidates.append(cache_home / "logs" / log_dir_name)
    candidates.append(Path.cwd() / "logs" / log_dir_name)

    for target in candidates:
        try:
            target.mkdir(parents=True, exist_ok=True)
            return target
        except OSError:
            continue

    temp_fallback = Path(tempfile.gettempdir()) / log_dir_name
    temp_fallback.mkdir(parents=True, exist_ok=True)
    return temp_fallback


def configure_logging(
    *,
    debug: bool,
    retention: int,
    log_dir: Optional[Path] = None,
    max_bytes: int = 512 * 1024,
) -> logging.Logger:
    """Attach one rotating file handler to the package logger.

    ``retention`` counts the live file plus its backups. Calling this again only
    refreshes the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if any(getattr(handler, "_overlay_dismissal_handler", False) for handler in logger.handlers):
        return logger
    target_dir = log_dir or resolve_logs_dir()
    target_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        target_dir / LOG_FILENAME,
        maxBytes=max_bytes,
        backupCount=max(1, retention) - 1,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    handler._overlay_dismissal_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    return logger
