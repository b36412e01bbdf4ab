from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from reqtui.http_client import DEFAULT_TIMEOUT
from reqtui.storage import REQUESTS_DIR

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "reqtui"
CONFIG_PATH = CONFIG_DIR / "config.yaml"
LOG_PATH = CONFIG_DIR / "reqtui.log"

DEFAULT_CONFIG: Dict[str, Any] = {
    "http": {"timeout": DEFAULT_TIMEOUT},
    "storage": {"requests_dir": str(REQUESTS_DIR)},
    "log": {"file": str(LOG_PATH), "level": "INFO"},
}


@dataclass
class Settings:
    timeout: float = DEFAULT_TIMEOUT
    requests_dir: Path = REQUESTS_DIR
    log_file: Optional[Path] = LOG_PATH
    log_level: str = "INFO"


def ensure_config(path: Path = CONFIG_PATH) -> None:
    if path.exists():
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump(DEFAULT_CONFIG, sort_keys=False),
        encoding="utf-8",
    )


def load_settings(path: Path = CONFIG_PATH) -> Settings:
    data = _read_yaml(path)
    http = _section(data, "http")
    storage = _section(data, "storage")
    log = _section(data, "log")

    settings = Settings()
    timeout = http.get("timeout")
    if isinstance(timeout, (int, float)) and not isinstance(timeout, bool) and timeout > 0:
        settings.timeout = float(timeout)
    if storage.get("requests_dir"):
        settings.requests_dir = Path(str(storage["requests_dir"])).expanduser()
    if "file" in log:
        settings.log_file = Path(str(log["file"])).expanduser() if log["file"] else None
    if isinstance(log.get("level"), str):
        settings.log_level = log["level"].upper()
    return settings


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("ignoring unreadable config %s: %s", path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name)
    return section if isinstance(section, dict) else {}
