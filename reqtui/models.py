from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS")


@dataclass
class Request:
    name: str = ""
    method: str = "GET"
    url: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    def copy(self) -> "Request":
        return Request(
            name=self.name,
            method=self.method,
            url=self.url,
            headers=dict(self.headers),
            body=self.body,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "method": self.method,
            "url": self.url,
            "headers": dict(self.headers),
            "body": self.body,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Request":
        """Build a request from decoded file content.

        Raises ValueError when the payload is not a request.
        """
        if not isinstance(data, dict):
            raise ValueError("request must be an object")

        method = str(data.get("method") or "GET").upper()
        if method not in HTTP_METHODS:
            raise ValueError(f"unsupported method: {method}")

        headers = data.get("headers") or {}
        if not isinstance(headers, dict):
            raise ValueError("headers must be an object")

        body = data.get("body") or ""
        if not isinstance(body, str):
            raise ValueError("body must be a string")

        return cls(
            name=str(data.get("name") or ""),
            method=method,
            url=str(data.get("url") or ""),
            headers={str(key): str(value) for key, value in headers.items()},
            body=body,
        )


@dataclass
class Response:
    status_code: int = 0
    status: str = ""
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""
    error: Optional[str] = None
    elapsed_ms: Optional[float] = None
