from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Optional

from PyQt6.QtWidgets import QApplication

from overlay_dismissal.coordinator import DismissalCoordinator
from overlay_dismissal.dismissal_config import DEFAULT_CONFIG_PATH, load_config
from overlay_dismissal.logging_utils import configure_logging
from overlay_dismissal.overlay_state import AuthContext, OverlayStateStore
from overlay_dismissal.qt_event_source import QtDocumentEventSource
from overlay_dismissal.qt_host import DismissalHostWindow


def resolve_config_path(arg_path: Optional[str]) -> Path:
    if arg_path:
        return Path(arg_path).expanduser().resolve()
    env_override = os.getenv("OVERLAY_DISMISSAL_CONFIG")
    if env_override:
        return Path(env_override).expanduser().resolve()
    return DEFAULT_CONFIG_PATH


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Overlay dismissal demo host")
    parser.add_argument("--config", help="Path to dismissal.json")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-dir", help="Directory for rotating log files")
    args = parser.parse_args(argv)

    config_path = resolve_config_path(args.config)
    config = load_config(config_path)
    debug = args.debug or config.debug
    logger = configure_logging(
        debug=debug,
        retention=config.log_retention,
        log_dir=Path(args.log_dir).expanduser() if args.log_dir else None,
    )
    logger.info("Starting overlay dismissal host (pid=%s)", os.getpid())
    logger.debug("Loaded config from %s: api=%s menu_policy=%s", config_path, config.api_base_url, config.menu_policy)

    app = QApplication(sys.argv[:1])
    store = OverlayStateStore(auth=AuthContext(is_authenticated=bool(config.token), token=config.token))
    coordinator = DismissalCoordinator(store, QtDocumentEventSource(app), config)
    window = DismissalHostWindow(coordinator)
    window.show()

    exit_code = app.exec()
    coordinator.shutdown()
    logger.info("Overlay dismissal host exiting with code %s", exit_code)
    return int(exit_code)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
