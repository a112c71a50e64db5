"""Ports: protocol definitions for the capabilities nofy depends on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Mapping, Protocol, runtime_checkable

if TYPE_CHECKING:
    import httpx

    from nofy.context import Context


@runtime_checkable
class Messenger(Protocol):
    """Sends one message through one provider.

    Implementations raise a ``NofyError`` subclass on failure and must be
    safe to call concurrently with other messengers.
    """

    def send(self, ctx: Context) -> None: ...


@dataclass(frozen=True)
class Response:
    """Status and raw body of a completed HTTP exchange."""

    status_code: int
    body: bytes = b""


@runtime_checkable
class Requester(Protocol):
    """Protocol for the HTTP round-trip used by backend adapters."""

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
    ) -> Response: ...
