"""Error taxonomy for nofy.

Every error raised by the library derives from ``NofyError`` so hosts can
catch the whole family in one clause.
"""

from __future__ import annotations

from typing import Any, Sequence

from nofy.defaults import AGGREGATE_PREFIX, AGGREGATE_SEPARATOR


class NofyError(Exception):
    """Base class for every nofy error."""
    pass


class ConfigurationError(NofyError, ValueError):
    """A required option is missing or invalid. Raised before any I/O."""
    pass


class TransportError(NofyError):
    """Request construction or the network round-trip failed."""
    pass


class ProviderError(NofyError):
    """The provider answered but signalled failure."""

    def __init__(self, message: str, status_code: int | None = None, body: bytes = b"") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------

class ContextError(NofyError):
    """The send context is no longer usable."""
    pass


class ContextCancelled(ContextError):
    pass


class DeadlineExceeded(ContextError):
    pass


# ---------------------------------------------------------------------------
# Fan-out and pool
# ---------------------------------------------------------------------------

class MessengerFault(NofyError):
    """Unexpected exception inside a messenger, recovered by the dispatcher."""

    def __init__(self, messenger: Any, fault: BaseException) -> None:
        super().__init__(f"recovered from fault: {fault}")
        self.messenger = messenger
        self.fault = fault


class JobError(NofyError):
    """A worker pool job whose process function raised."""

    def __init__(self, job_id: str, cause: BaseException) -> None:
        super().__init__(f"job {job_id}: {cause}")
        self.job_id = job_id


class SendAllError(NofyError):
    """Aggregate of every failure observed during one fan-out.

    ``failures`` holds ``(messenger, exception)`` pairs in completion order.
    """

    def __init__(self, failures: Sequence[tuple[Any, BaseException]]) -> None:
        self.failures = list(failures)
        super().__init__(
            AGGREGATE_PREFIX + AGGREGATE_SEPARATOR.join(str(exc) for _, exc in self.failures)
        )

    @property
    def errors(self) -> list[BaseException]:
        return [exc for _, exc in self.failures]
