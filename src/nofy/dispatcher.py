"""Concurrent fan-out of one message to every registered messenger.

``send_all`` runs each messenger on its own thread against a shared
``Context``, waits for all of them, and raises one ``SendAllError`` that
lists every failure in completion order.  An unexpected exception inside a
messenger is recovered at the fan-out boundary and reported like any other
failure, so one broken messenger never aborts its siblings.

The registry is not locked: callers serialize ``add_messenger`` and
``remove_messenger`` with ``send_all``.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from nofy.context import Context, background
from nofy.errors import MessengerFault, NofyError, SendAllError
from nofy.ports import Messenger

log = logging.getLogger("nofy.dispatcher")


def _label(messenger: Messenger) -> str:
    return type(messenger).__name__


def _guarded_send(messenger: Messenger, ctx: Context) -> BaseException | None:
    """Run one send behind a fault barrier. Returns the failure, if any."""
    try:
        messenger.send(ctx)
    except NofyError as e:
        log.warning("Messenger %s failed: %s", _label(messenger), e,
                    extra={"messenger": _label(messenger)})
        return e
    except Exception as e:
        log.exception("Messenger %s raised unexpectedly", _label(messenger),
                      extra={"messenger": _label(messenger)})
        fault = MessengerFault(messenger, e)
        fault.__cause__ = e
        return fault
    return None


class Dispatcher:
    """Registry of messengers plus the concurrent ``send_all`` fan-out."""

    def __init__(self, *messengers: Messenger) -> None:
        self._messengers: list[Messenger] = list(messengers)

    @classmethod
    def with_messengers(cls, *messengers: Messenger) -> Dispatcher:
        return cls(*messengers)

    @property
    def messengers(self) -> tuple[Messenger, ...]:
        return tuple(self._messengers)

    def __len__(self) -> int:
        return len(self._messengers)

    def add_messenger(self, messenger: Messenger) -> None:
        """Append *messenger*. Duplicates are kept and each is sent to."""
        self._messengers.append(messenger)

    def remove_messenger(self, messenger: Messenger) -> None:
        """Remove the first entry that *is* ``messenger``; no-op if absent."""
        for i, registered in enumerate(self._messengers):
            if registered is messenger:
                del self._messengers[i]
                return

    def send_all(self, ctx: Context | None = None) -> None:
        """Send through every messenger concurrently.

        Blocks until every send has finished.  Returns None when all of them
        succeeded, otherwise raises ``SendAllError``.
        """
        messengers = list(self._messengers)
        if not messengers:
            return
        if ctx is None:
            ctx = background()

        failures: list[tuple[Messenger, BaseException]] = []
        with ThreadPoolExecutor(
            max_workers=len(messengers), thread_name_prefix="nofy-send",
        ) as pool:
            futures = {pool.submit(_guarded_send, m, ctx): m for m in messengers}
            for future in as_completed(futures):
                failure = future.result()
                if failure is not None:
                    failures.append((futures[future], failure))

        if failures:
            log.info("Fan-out finished: %d/%d messengers failed", len(failures), len(messengers))
            raise SendAllError(failures)
        log.debug("Fan-out finished: %d messengers succeeded", len(messengers))
