"""Runtime configuration read from the environment.

Settings are read once, when ``Settings()`` is built, and then passed
explicitly to whatever needs them.  Nothing here is module-level state.

Environment variables:
    NOFY_SLACK_TOKEN       — Slack bot token
    NOFY_SLACK_URL         — Slack endpoint (default chat.postMessage)
    NOFY_RESEND_TOKEN      — Resend API key
    NOFY_RESEND_URL        — Resend endpoint (default /emails)
    NOFY_TIMEOUT_SECONDS   — per-request timeout (default 5)
    NOFY_POOL_WORKERS      — default worker pool size (default 4)
    NOFY_LOG_LEVEL         — logging level (default INFO)
"""

from __future__ import annotations

import os

from nofy import defaults
from nofy.errors import ConfigurationError


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None


class Settings:
    """Provider credentials and runtime knobs from environment."""

    def __init__(self) -> None:
        self.slack_token = os.environ.get("NOFY_SLACK_TOKEN", "")
        self.slack_url = os.environ.get("NOFY_SLACK_URL", defaults.SLACK_URL)
        self.resend_token = os.environ.get("NOFY_RESEND_TOKEN", "")
        self.resend_url = os.environ.get("NOFY_RESEND_URL", defaults.RESEND_URL)
        self.timeout = _env_float("NOFY_TIMEOUT_SECONDS", defaults.SEND_TIMEOUT_SECONDS)
        self.pool_workers = _env_int("NOFY_POOL_WORKERS", defaults.POOL_WORKERS)
        self.log_level = os.environ.get("NOFY_LOG_LEVEL", "INFO")

    @property
    def slack_enabled(self) -> bool:
        return bool(self.slack_token.strip())

    @property
    def resend_enabled(self) -> bool:
        return bool(self.resend_token.strip())
