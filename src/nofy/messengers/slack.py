"""Slack adapter: posts a block message through chat.postMessage.

Blocks are passed through as plain dicts; see
https://api.slack.com/reference/messaging/blocks for their shape.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from nofy.config import Settings
from nofy.context import Context
from nofy.defaults import SEND_TIMEOUT_SECONDS, SLACK_URL
from nofy.errors import ConfigurationError, ProviderError
from nofy.ports import Requester
from nofy.request import HttpRequester

log = logging.getLogger("nofy.messengers.slack")

_HTTP_OK = 200


class SlackMessage(BaseModel):
    channel: str
    blocks: list[dict[str, Any]] = Field(default_factory=list)


class SlackResponse(BaseModel):
    """The ``{ok, error}`` envelope every Slack Web API call returns."""

    ok: bool = False
    error: str = ""

    model_config = {"extra": "allow"}


class SlackMessenger:
    """Sends one block message to one Slack channel."""

    def __init__(
        self,
        token: str,
        message: SlackMessage,
        timeout: float = SEND_TIMEOUT_SECONDS,
        url: str = SLACK_URL,
        requester: Requester | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        if not token or not token.strip():
            raise ConfigurationError("missing token")
        if not timeout or timeout <= 0:
            raise ConfigurationError("missing timeout")
        if message is None or not message.channel.strip():
            raise ConfigurationError("missing channel")
        if not message.blocks:
            raise ConfigurationError("missing content")
        self.token = token
        self.message = message
        self.timeout = timeout
        self.url = url
        self._requester = requester or HttpRequester()
        self._client = client

    @classmethod
    def from_config(cls, settings: Settings, message: SlackMessage, **kwargs: Any) -> SlackMessenger:
        return cls(
            settings.slack_token, message,
            timeout=settings.timeout, url=settings.slack_url, **kwargs,
        )

    def send(self, ctx: Context) -> None:
        response = self._requester.do(
            ctx,
            method="POST",
            url=self.url,
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.token}",
            },
            payload=self.message.model_dump_json().encode(),
            client=self._client,
            timeout=self.timeout,
        )
        if response.status_code != _HTTP_OK:
            raise ProviderError(
                f"error sending message. Status Code: {response.status_code}",
                status_code=response.status_code, body=response.body,
            )
        try:
            envelope = SlackResponse.model_validate_json(response.body)
        except ValidationError as e:
            raise ProviderError(
                f"error unmarshalling response: {e}",
                status_code=response.status_code, body=response.body,
            ) from e
        if not envelope.ok:
            raise ProviderError(
                f"error sending message: {envelope.error}",
                status_code=response.status_code, body=response.body,
            )
        log.debug("Slack message delivered to %s", self.message.channel)
