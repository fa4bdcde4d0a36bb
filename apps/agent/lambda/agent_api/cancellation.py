"""Caller-driven cancellation shared by every attempt of one dispatch."""

import concurrent.futures
import contextvars
import threading
from collections.abc import Callable
from typing import TypeVar

from .constants import CANCELLATION_POLL_INTERVAL_SEC
from .errors import DispatchCancelledError

T = TypeVar("T")

# Blocking SDK calls run here so the dispatching thread can stop waiting on abort.
_executor = concurrent.futures.ThreadPoolExecutor(thread_name_prefix="provider-call")


class CancellationToken:
    """Thread-safe abort signal, set once and never reset."""

    def __init__(self, poll_interval: float = CANCELLATION_POLL_INTERVAL_SEC) -> None:
        self._event = threading.Event()
        self._poll_interval = poll_interval
        self._reason = "Dispatch cancelled by caller"

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str | None = None) -> None:
        if reason:
            self._reason = reason
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise DispatchCancelledError(self._reason)

    def run(self, fn: Callable[..., T], *args: object, **kwargs: object) -> T:
        """Run a blocking call, abandoning it as soon as the token fires.

        The call runs in a copy of the caller's context so tracing parents carry
        over. It keeps running on its worker thread after an abort; its result
        or exception is discarded.
        """
        self.raise_if_cancelled()
        context = contextvars.copy_context()
        future = _executor.submit(context.run, fn, *args, **kwargs)
        while True:
            done, _ = concurrent.futures.wait([future], timeout=self._poll_interval)
            if self._event.is_set():
                future.cancel()
                raise DispatchCancelledError(self._reason)
            if done:
                return future.result()


def run_cancellable(
    cancellation: CancellationToken | None, fn: Callable[..., T], *args: object, **kwargs: object
) -> T:
    if cancellation is None:
        return fn(*args, **kwargs)
    return cancellation.run(fn, *args, **kwargs)
