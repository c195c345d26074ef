import threading
import unittest

from symposium.services.retry import RetryPolicy


class FlakyOperation:
    def __init__(self, failures):
        self.failures = failures
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return "fail" if self.calls <= self.failures else "ok"


class TestRetryPolicy(unittest.TestCase):
    def test_retries_until_success(self):
        sleeps = []
        policy = RetryPolicy(max_attempts=3, delay_sec=1.0, sleep_fn=sleeps.append)
        op = FlakyOperation(failures=2)

        outcome = policy.run(op, should_retry=lambda r: r == "fail")

        self.assertEqual(outcome.result, "ok")
        self.assertEqual(outcome.attempts, 3)
        self.assertEqual(sleeps, [1.0, 1.0])

    def test_stops_at_max_attempts(self):
        policy = RetryPolicy(max_attempts=3, delay_sec=0.5, sleep_fn=lambda _: None)
        op = FlakyOperation(failures=10)

        outcome = policy.run(op, should_retry=lambda r: r == "fail")

        self.assertEqual(outcome.result, "fail")
        self.assertEqual(outcome.attempts, 3)
        self.assertEqual(op.calls, 3)

    def test_single_attempt_policy_never_retries(self):
        op = FlakyOperation(failures=1)
        outcome = RetryPolicy(max_attempts=1).run(op, should_retry=lambda r: r == "fail")
        self.assertEqual(outcome.attempts, 1)
        self.assertEqual(op.calls, 1)

    def test_abort_event_stops_pending_retries(self):
        abort = threading.Event()
        abort.set()
        op = FlakyOperation(failures=5)

        outcome = RetryPolicy(max_attempts=3, delay_sec=5.0).run(
            op, should_retry=lambda r: r == "fail", abort_event=abort
        )

        self.assertTrue(outcome.aborted)
        self.assertEqual(op.calls, 1)

    def test_abort_during_delay_wakes_waiter(self):
        abort = threading.Event()
        timer = threading.Timer(0.05, abort.set)
        timer.start()
        op = FlakyOperation(failures=5)

        outcome = RetryPolicy(max_attempts=3, delay_sec=5.0).run(
            op, should_retry=lambda r: r == "fail", abort_event=abort
        )
        timer.cancel()

        self.assertTrue(outcome.aborted)
        self.assertEqual(op.calls, 1)

    def test_invalid_arguments_rejected(self):
        with self.assertRaises(ValueError):
            RetryPolicy(max_attempts=0)
        with self.assertRaises(ValueError):
            RetryPolicy(delay_sec=-1)


if __name__ == "__main__":
    unittest.main()
