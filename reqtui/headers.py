from __future__ import annotations

from typing import Dict, Mapping


def parse_headers(text: str) -> Dict[str, str]:
    """Parse ``Key: Value`` lines into a header mapping.

    Blank lines and lines without a colon are dropped. A repeated key keeps
    the last value.
    """
    headers: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        key, sep, value = line.partition(":")
        if not sep:
            continue
        headers[key.strip()] = value.strip()
    return headers


def format_headers(headers: Mapping[str, str]) -> str:
    return "\n".join(f"{key}: {value}" for key, value in headers.items())
