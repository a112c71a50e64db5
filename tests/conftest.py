"""Shared fixtures for nofy tests."""

import json
import os
import threading
from unittest.mock import patch

import httpx
import pytest

from nofy.errors import NofyError


# ---------------------------------------------------------------------------
# Auto-use fixtures: isolate configuration between tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clean_env():
    """Strip NOFY_* variables so Settings always starts from defaults."""
    clean = {k: v for k, v in os.environ.items() if not k.startswith("NOFY_")}
    with patch.dict(os.environ, clean, clear=True):
        yield


# ---------------------------------------------------------------------------
# Messenger stubs
# ---------------------------------------------------------------------------

class StubMessenger:
    """Messenger that counts calls and fails or crashes on demand.

    Usage::

        from conftest import StubMessenger
        ok = StubMessenger()
        bad = StubMessenger(error=NofyError("boom"))
        crash = StubMessenger(fault=KeyError("nope"))
    """

    def __init__(self, error=None, fault=None, delay=0.0, name="stub"):
        self.name = name
        self.error = error
        self.fault = fault
        self.delay = delay
        self.calls = 0
        self.contexts = []
        self._lock = threading.Lock()

    def send(self, ctx):
        with self._lock:
            self.calls += 1
            self.contexts.append(ctx)
        if self.delay:
            ctx.wait(self.delay)
        if self.fault is not None:
            raise self.fault
        if self.error is not None:
            raise self.error

    def __repr__(self):
        return f"StubMessenger({self.name!r})"


@pytest.fixture
def ok_messenger():
    return StubMessenger()


@pytest.fixture
def failing_messenger():
    return StubMessenger(error=NofyError("boom"))


# ---------------------------------------------------------------------------
# HTTP: httpx clients backed by MockTransport
# ---------------------------------------------------------------------------

class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests = []

        def _record(request):
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def make_client():
    """Factory: ``make_client(status, json_body)`` or ``make_client(handler=fn)``."""
    clients = []

    def _make(status_code=200, json_body=None, content=None, handler=None):
        if handler is None:
            def handler(request):
                if content is not None:
                    return httpx.Response(status_code, content=content)
                return httpx.Response(status_code, json=json_body if json_body is not None else {})
        transport = RecordingTransport(handler)
        client = httpx.Client(transport=transport)
        client.recorder = transport
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()


def sent_json(client, index=0):
    """Decode the JSON body of the *index*-th request a mock client served."""
    return json.loads(client.recorder.requests[index].content)
