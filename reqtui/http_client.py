from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, Optional

import httpx

from reqtui.models import Request, Response

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_CONTENT_TYPE = "application/json"


async def execute_request(
    request: Request,
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Response:
    """Perform one round trip for ``request``.

    Any completed exchange, whatever its status code, comes back as a
    Response. Construction errors, transport errors and timeouts come back
    as a Response with only ``error`` set.
    """
    headers = dict(request.headers)
    content = None
    if request.body:
        content = request.body.encode("utf-8")
        if not any(key.lower() == "content-type" for key in headers):
            headers["Content-Type"] = DEFAULT_CONTENT_TYPE

    logger.info("sending %s %s", request.method, request.url)
    started = time.perf_counter()
    try:
        # httpx timeouts cover each network operation; wait_for bounds the
        # whole exchange, including a slowly trickling body.
        response = await asyncio.wait_for(
            _round_trip(request, headers, content, timeout, transport), timeout
        )
    except (httpx.TimeoutException, asyncio.TimeoutError) as exc:
        logger.warning("request to %s timed out: %r", request.url, exc)
        return Response(error=f"request timed out after {timeout:g}s")
    except httpx.InvalidURL as exc:
        return Response(error=f"invalid URL: {exc}")
    except httpx.HTTPError as exc:
        logger.warning("request to %s failed: %s", request.url, exc)
        return Response(error=str(exc) or exc.__class__.__name__)
    except (UnicodeEncodeError, ValueError) as exc:
        return Response(error=f"invalid request: {exc}")
    elapsed_ms = (time.perf_counter() - started) * 1000

    logger.info("received %s from %s", response.status_code, request.url)
    return Response(
        status_code=response.status_code,
        status=f"{response.status_code} {response.reason_phrase}".strip(),
        headers=_join_headers(response.headers),
        body=response.text,
        elapsed_ms=elapsed_ms,
    )


def _join_headers(headers: httpx.Headers) -> Dict[str, str]:
    joined: Dict[str, str] = {}
    names: Dict[str, str] = {}
    for raw_key, raw_value in headers.raw:
        key = raw_key.decode("latin-1")
        value = raw_value.decode("latin-1")
        name = names.setdefault(key.lower(), key)
        if name in joined:
            joined[name] = f"{joined[name]}, {value}"
        else:
            joined[name] = value
    return joined


async def _round_trip(
    request: Request,
    headers: Dict[str, str],
    content: Optional[bytes],
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport],
) -> httpx.Response:
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        http_request = client.build_request(
            request.method, request.url, headers=headers, content=content
        )
        return await client.send(http_request)
