"""Configuration loader for the dismissal coordinator and its Qt host."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Optional

from overlay_dismissal.dismissal_engine import MenuDismissalPolicy

DEFAULT_CONFIG_PATH = Path(__file__).with_name("dismissal.json")
DEFAULT_API_BASE_URL = "http://localhost:3001"
LOG_RETENTION_MIN = 1
LOG_RETENTION_MAX = 20

API_URL_ENV_VAR = "OVERLAY_DISMISSAL_API_URL"
DEBUG_ENV_VAR = "OVERLAY_DISMISSAL_DEBUG"
TOKEN_ENV_VAR = "OVERLAY_DISMISSAL_TOKEN"


@dataclass(frozen=True)
class DismissalConfig:
    menu_dismiss_on_click: bool = True
    menu_focus_aware: bool = False
    api_base_url: str = DEFAULT_API_BASE_URL
    fetch_timeout_seconds: float = 5.0
    log_retention: int = 5
    debug: bool = False
    token: Optional[str] = None

    @property
    def menu_policy(self) -> MenuDismissalPolicy:
        return MenuDismissalPolicy(
            dismiss_on_click=self.menu_dismiss_on_click,
            focus_aware=self.menu_focus_aware,
        )


def _coerce_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        token = value.strip().lower()
        if token in {"1", "true", "yes", "on"}:
            return True
        if token in {"0", "false", "no", "off"}:
            return False
    return default


def _coerce_timeout(value: Any, default: float) -> float:
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return default
    if numeric <= 0:
        return default
    return numeric


def _coerce_log_retention(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        numeric = int(value)
    except (TypeError, ValueError):
        return default
    if numeric <= 0:
        return LOG_RETENTION_MIN
    if numeric > LOG_RETENTION_MAX:
        return LOG_RETENTION_MAX
    return numeric


def _coerce_url(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip().rstrip("/")
    return default


def config_from_mapping(data: Mapping[str, Any]) -> DismissalConfig:
    base = DismissalConfig()
    menu = data.get("menu")
    if not isinstance(menu, Mapping):
        menu = {}
    token = data.get("token")
    return DismissalConfig(
        menu_dismiss_on_click=_coerce_bool(menu.get("dismiss_on_click"), base.menu_dismiss_on_click),
        menu_focus_aware=_coerce_bool(menu.get("focus_aware"), base.menu_focus_aware),
        api_base_url=_coerce_url(data.get("api_base_url"), base.api_base_url),
        fetch_timeout_seconds=_coerce_timeout(data.get("fetch_timeout_seconds"), base.fetch_timeout_seconds),
        log_retention=_coerce_log_retention(data.get("log_retention"), base.log_retention),
        debug=_coerce_bool(data.get("debug"), base.debug),
        token=token if isinstance(token, str) and token else None,
    )


def apply_env_overrides(config: DismissalConfig, env: Optional[Mapping[str, str]] = None) -> DismissalConfig:
    env = os.environ if env is None else env
    changes: dict[str, Any] = {}
    api_url = env.get(API_URL_ENV_VAR)
    if api_url:
        changes["api_base_url"] = _coerce_url(api_url, config.api_base_url)
    debug = env.get(DEBUG_ENV_VAR)
    if debug is not None:
        changes["debug"] = _coerce_bool(debug, config.debug)
    token = env.get(TOKEN_ENV_VAR)
    if token:
        changes["token"] = token
    return replace(config, **changes) if changes else config


def load_config(path: Optional[Path] = None, *, env: Optional[Mapping[str, str]] = None) -> DismissalConfig:
    """Read ``dismissal.json`` (missing or invalid files fall back to defaults)."""

    path = path or DEFAULT_CONFIG_PATH
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, OSError, json.JSONDecodeError):
        data = {}
    if not isinstance(data, Mapping):
        data = {}
    return apply_env_overrides(config_from_mapping(data), env)
