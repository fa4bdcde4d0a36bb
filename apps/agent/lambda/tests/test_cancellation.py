import contextvars
import threading
import time
import unittest

from agent_api.cancellation import CancellationToken, run_cancellable
from agent_api.errors import DispatchCancelledError

REQUEST_ID: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="unset")


class CancellationTokenTests(unittest.TestCase):
    def test_run_returns_result_when_not_cancelled(self) -> None:
        token = CancellationToken(poll_interval=0.01)

        self.assertEqual(token.run(lambda a, b: a + b, 2, b=3), 5)

    def test_run_propagates_call_errors(self) -> None:
        token = CancellationToken(poll_interval=0.01)

        def fail() -> None:
            raise ValueError("bad response")

        with self.assertRaisesRegex(ValueError, "bad response"):
            token.run(fail)

    def test_run_aborts_blocked_call_when_cancelled(self) -> None:
        token = CancellationToken(poll_interval=0.01)
        release = threading.Event()
        timer = threading.Timer(0.05, token.cancel)
        timer.start()

        started = time.monotonic()
        try:
            with self.assertRaises(DispatchCancelledError):
                token.run(release.wait, 5)
        finally:
            release.set()
            timer.cancel()

        self.assertLess(time.monotonic() - started, 2)

    def test_run_refuses_to_start_after_cancel(self) -> None:
        token = CancellationToken()
        token.cancel("user pressed stop")
        calls: list[int] = []

        with self.assertRaisesRegex(DispatchCancelledError, "user pressed stop"):
            token.run(calls.append, 1)

        self.assertEqual(calls, [])
        self.assertTrue(token.cancelled)

    def test_run_carries_caller_context_to_worker_thread(self) -> None:
        token = CancellationToken(poll_interval=0.01)
        var_token = REQUEST_ID.set("req-42")
        try:
            seen = token.run(REQUEST_ID.get)
        finally:
            REQUEST_ID.reset(var_token)

        self.assertEqual(seen, "req-42")

    def test_run_cancellable_without_token_calls_directly(self) -> None:
        self.assertEqual(run_cancellable(None, str.upper, "ok"), "OK")


if __name__ == "__main__":
    unittest.main()
