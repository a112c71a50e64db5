"""Single source of truth for shared constants and configuration defaults.

Anything used by more than one module, or overridable through ``Settings``,
is defined here.
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Provider endpoints
# ---------------------------------------------------------------------------

SLACK_URL = "https://slack.com/api/chat.postMessage"
RESEND_URL = "https://api.resend.com/emails"

# ---------------------------------------------------------------------------
# Timeouts
# ---------------------------------------------------------------------------

SEND_TIMEOUT_SECONDS = 5.0

# ---------------------------------------------------------------------------
# Worker pool
# ---------------------------------------------------------------------------

POOL_WORKERS = 4
POOL_POLL_INTERVAL = 0.05       # seconds between quit-signal checks

# ---------------------------------------------------------------------------
# Aggregated errors
# ---------------------------------------------------------------------------

AGGREGATE_PREFIX = "errors: "
AGGREGATE_SEPARATOR = "; "
