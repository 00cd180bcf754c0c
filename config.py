from __future__ import annotations

import logging
import os
import yaml
from pathlib import Path
from typing import Dict, Any

USER_CONFIG_PATH = Path.home() / ".tcr_tasks_config.yaml"
DEFAULT_TEST_COMMAND = "pytest -q"

logger = logging.getLogger("tcr_tasks.config")


def config_path() -> Path:
    override = os.getenv("TCR_TASKS_CONFIG")
    return Path(override).expanduser() if override else USER_CONFIG_PATH


def _load_config() -> Dict[str, Any]:
    path = config_path()
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("ignoring unreadable config %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _save_config(data: Dict[str, Any]) -> None:
    path = config_path()
    if not data:
        if path.exists():
            path.unlink()
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")


def get_test_command() -> str:
    """TCR test command: env override, then user config, then the default."""
    env_value = os.getenv("TCR_TASKS_TEST_COMMAND", "").strip()
    if env_value:
        return env_value
    value = str(_load_config().get("test_command", "") or "").strip()
    return value or DEFAULT_TEST_COMMAND


def set_test_command(value: str) -> None:
    data = _load_config()
    value = (value or "").strip()
    if value:
        data["test_command"] = value
    else:
        data.pop("test_command", None)
    _save_config(data)


def get_user_lang() -> str:
    return str(_load_config().get("lang", "") or "").strip()

