"""nofy: concurrent notification fan-out to chat and email providers."""

from nofy.context import Context, background
from nofy.dispatcher import Dispatcher
from nofy.errors import (
    ConfigurationError,
    ContextCancelled,
    ContextError,
    DeadlineExceeded,
    JobError,
    MessengerFault,
    NofyError,
    ProviderError,
    SendAllError,
    TransportError,
)
from nofy.ports import Messenger, Requester, Response
from nofy.wpool import Job, Pool

__all__ = [
    "ConfigurationError",
    "Context",
    "ContextCancelled",
    "ContextError",
    "DeadlineExceeded",
    "Dispatcher",
    "Job",
    "JobError",
    "Messenger",
    "MessengerFault",
    "NofyError",
    "Pool",
    "ProviderError",
    "Requester",
    "Response",
    "SendAllError",
    "TransportError",
    "background",
]
