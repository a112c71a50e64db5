"""Resend adapter: sends one email through the Resend REST API."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field

from nofy.config import Settings
from nofy.context import Context
from nofy.defaults import RESEND_URL, SEND_TIMEOUT_SECONDS
from nofy.errors import ConfigurationError, ProviderError
from nofy.ports import Requester
from nofy.request import HttpRequester

log = logging.getLogger("nofy.messengers.resend")

_HTTP_OK = 200


class ResendMessage(BaseModel):
    """Email payload. ``sender`` goes on the wire as ``from``."""

    sender: str = Field(alias="from")
    to: list[str] = Field(default_factory=list)
    subject: str = ""
    cc: list[str] | None = None
    html: str | None = None
    text: str | None = None

    model_config = {"populate_by_name": True}

    def to_json(self) -> bytes:
        return self.model_dump_json(by_alias=True, exclude_none=True).encode()


class ResendMessenger:
    """Sends one email to every recipient in the message."""

    def __init__(
        self,
        token: str,
        message: ResendMessage,
        timeout: float = SEND_TIMEOUT_SECONDS,
        url: str = RESEND_URL,
        requester: Requester | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        if not token or not token.strip():
            raise ConfigurationError("missing token")
        if message is None or not message.sender.strip():
            raise ConfigurationError("missing from")
        if not message.to:
            raise ConfigurationError("missing to")
        if not message.subject.strip():
            raise ConfigurationError("missing subject")
        if not timeout or timeout <= 0:
            raise ConfigurationError("missing timeout")
        self.token = token
        self.message = message
        self.timeout = timeout
        self.url = url
        self._requester = requester or HttpRequester()
        self._client = client

    @classmethod
    def from_config(cls, settings: Settings, message: ResendMessage, **kwargs: Any) -> ResendMessenger:
        return cls(
            settings.resend_token, message,
            timeout=settings.timeout, url=settings.resend_url, **kwargs,
        )

    def send(self, ctx: Context) -> None:
        response = self._requester.do(
            ctx,
            method="POST",
            url=self.url,
            headers={
                "Authorization": f"Bearer {self.token}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            payload=self.message.to_json(),
            client=self._client,
            timeout=self.timeout,
        )
        if response.status_code != _HTTP_OK:
            body = response.body.decode(errors="replace")
            raise ProviderError(
                f"error sending message: status-code: {response.status_code} body: {body}",
                status_code=response.status_code, body=response.body,
            )
        log.debug("Resend email delivered to %d recipients", len(self.message.to))
