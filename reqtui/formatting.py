from __future__ import annotations

from typing import List, Mapping

from reqtui.models import Request, Response


def format_exchange(request: Request, response: Response) -> str:
    """Text shown in the response viewer.

    Order: request line, request headers, request body, response status,
    response headers, response body. Empty header/body sections are omitted
    (the response body section is always present).
    """
    parts: List[str] = [f"Request:\n{request.method} {request.url}\n"]
    if request.headers:
        parts.append("Request Headers:\n" + _header_lines(request.headers))
    if request.body:
        parts.append(f"Request Body:\n{request.body}\n")
    status = response.status
    if response.elapsed_ms is not None:
        status += f" ({response.elapsed_ms:.0f} ms)"
    parts.append(f"Response Status: {status}\n")
    if response.headers:
        parts.append("Response Headers:\n" + _header_lines(response.headers))
    parts.append(f"Response Body:\n{response.body}")
    return "\n".join(parts)


def format_summary(request: Request) -> str:
    if not request.url:
        return "No request configured"
    return f"{request.method} {request.url}"


def _header_lines(headers: Mapping[str, str]) -> str:
    return "".join(f"{key}: {value}\n" for key, value in headers.items())
