"""HTTP requester used by backend adapters, built on httpx.

The options a request accepts are enumerated as keyword arguments:
method, url, headers, client override, byte payload and timeout.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping

import httpx

from nofy.context import Context
from nofy.errors import ConfigurationError, TransportError
from nofy.ports import Response

log = logging.getLogger("nofy.request")

_MS_PER_SECOND = 1000


def _effective_timeout(ctx: Context, timeout: float | None) -> float | None:
    """Smaller of the explicit timeout and what is left of the context."""
    remaining = ctx.remaining()
    if remaining is None:
        return timeout
    if timeout is None:
        return remaining
    return min(timeout, remaining)


def validate(method: str, url: str, timeout: float | None) -> None:
    if not method:
        raise ConfigurationError("method is required")
    if not url:
        raise ConfigurationError("url is required")
    if timeout is not None and timeout <= 0:
        raise ConfigurationError("timeout must be positive")


class HttpRequester:
    """Default ``Requester``: one synchronous httpx round-trip per call.

    When no client is supplied a short-lived ``httpx.Client`` is opened and
    closed around the request.
    """

    def __init__(self, client: httpx.Client | None = None) -> None:
        self._client = client

    def do(
        self,
        ctx: Context,
        *,
        method: str,
        url: str,
        headers: Mapping[str, str] | None = None,
        payload: bytes = b"",
        client: httpx.Client | None = None,
        timeout: float | None = None,
    ) -> Response:
        validate(method, url, timeout)
        ctx.check()

        if client is None:
            client = self._client
        if client is not None:
            return self._send(client, ctx, method, url, headers, payload, timeout)
        with httpx.Client() as owned:
            return self._send(owned, ctx, method, url, headers, payload, timeout)

    def _send(
        self,
        client: httpx.Client,
        ctx: Context,
        method: str,
        url: str,
        headers: Mapping[str, str] | None,
        payload: bytes,
        timeout: float | None,
    ) -> Response:
        kwargs: dict[str, Any] = {"headers": dict(headers or {}), "content": payload}
        effective = _effective_timeout(ctx, timeout)
        if effective is not None:
            kwargs["timeout"] = effective

        try:
            request = client.build_request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, TypeError) as e:
            raise TransportError(f"error creating request: {e}") from e

        start = time.monotonic()
        try:
            response = client.send(request)
        except httpx.TimeoutException as e:
            # A timeout bounded by the context deadline is the context's error.
            reason = ctx.err()
            if reason is not None:
                raise reason from e
            raise TransportError(f"error sending request: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"error sending request: {e}") from e

        log.debug(
            "%s %s -> %d", method, url, response.status_code,
            extra={
                "status_code": response.status_code,
                "duration_ms": round((time.monotonic() - start) * _MS_PER_SECOND, 2),
            },
        )
        return Response(status_code=response.status_code, body=response.content)


_default = HttpRequester()


def do(ctx: Context, **options: Any) -> Response:
    """Module-level shortcut over a shared ``HttpRequester``."""
    return _default.do(ctx, **options)
