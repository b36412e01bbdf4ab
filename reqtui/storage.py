from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List

from reqtui.models import Request

logger = logging.getLogger(__name__)

REQUESTS_DIR = Path("requests")
REQUEST_SUFFIX = ".json"


class StorageError(Exception):
    """A saved request could not be written or the directory listed."""


def save_request(request: Request, directory: Path = REQUESTS_DIR) -> List[Request]:
    path = request_path(request.name, directory)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        text = json.dumps(request.to_dict(), indent=2, ensure_ascii=False)
        path.write_text(text + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        raise StorageError(f"could not save {request.name!r}: {exc}") from exc
    logger.info("saved request %r to %s", request.name, path)
    return load_requests(directory)


def load_requests(directory: Path = REQUESTS_DIR) -> List[Request]:
    if not directory.exists():
        return []

    try:
        paths = sorted(directory.glob(f"*{REQUEST_SUFFIX}"))
    except OSError as exc:
        raise StorageError(f"could not list {directory}: {exc}") from exc

    requests: List[Request] = []
    for path in paths:
        if not path.is_file():
            continue
        try:
            requests.append(_parse_request(_read_json(path), path))
        except (OSError, ValueError, RecursionError) as exc:
            logger.warning("skipping unreadable request file %s: %s", path, exc)
    return requests


def request_path(name: str, directory: Path = REQUESTS_DIR) -> Path:
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise StorageError(f"invalid request name: {name!r}")
    return directory / f"{name}{REQUEST_SUFFIX}"


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _parse_request(data: Any, path: Path) -> Request:
    request = Request.from_dict(data)
    if not request.name:
        request.name = path.stem
    return request
