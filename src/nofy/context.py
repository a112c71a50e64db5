"""Cancellable send context shared by every messenger in one fan-out.

A ``Context`` carries two things: an explicit cancellation flag and an
optional deadline.  Children derived with ``with_timeout`` inherit their
parent's cancellation and can only tighten the deadline.

Cancellation is cooperative: messengers call ``check()`` before doing I/O
and bound their HTTP timeout with ``remaining()``.
"""

from __future__ import annotations

import threading
import time

from nofy.errors import ContextCancelled, ContextError, DeadlineExceeded


class Context:
    """Cancellation signal plus optional monotonic deadline."""

    def __init__(self, timeout: float | None = None, parent: Context | None = None) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._children: list[Context] = []
        self._done = False
        self.parent = parent

        deadline = time.monotonic() + timeout if timeout is not None else None
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline = deadline

        if parent is not None:
            parent._attach(self)

    def _attach(self, child: Context) -> None:
        with self._lock:
            done = self._done
            if not done:
                self._children.append(child)
        if done:
            child.cancel()

    def _detach(self, child: Context) -> None:
        with self._lock:
            for i, registered in enumerate(self._children):
                if registered is child:
                    del self._children[i]
                    return

    # --- Public API ---

    def cancel(self) -> None:
        """Cancel this context and every context derived from it."""
        with self._lock:
            if self._done:
                return
            self._done = True
            children, self._children = self._children, []
        self._event.set()
        for child in children:
            child.cancel()
        if self.parent is not None:
            self.parent._detach(self)

    def with_timeout(self, seconds: float) -> Context:
        """Derive a child context that expires after *seconds*."""
        return Context(timeout=seconds, parent=self)

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None without one."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def err(self) -> ContextError | None:
        if self._done:
            return ContextCancelled("context canceled")
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return DeadlineExceeded("context deadline exceeded")
        return None

    @property
    def cancelled(self) -> bool:
        return self.err() is not None

    def check(self) -> None:
        """Raise the context error if cancelled or past the deadline."""
        reason = self.err()
        if reason is not None:
            raise reason

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the context is done or *timeout* elapses.

        Returns True when the context is done.
        """
        end = time.monotonic() + timeout if timeout is not None else None
        while not self.cancelled:
            limit = self.remaining()
            if end is not None:
                left = end - time.monotonic()
                if left <= 0:
                    return False
                limit = left if limit is None else min(limit, left)
            self._event.wait(limit)
        return True


def background() -> Context:
    """A fresh context with no deadline that is never cancelled implicitly."""
    return Context()
