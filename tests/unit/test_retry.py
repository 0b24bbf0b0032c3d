"""
Unit tests for retry_operation and error classification.

Sleep is injected so no test actually waits.

Run: pytest tests/unit/test_retry.py -v
"""

import pytest
from unittest.mock import MagicMock

from exceptions import ErrorKind, PersistenceError
from utils.retry import retry_operation, classify_error, backoff_delay


class Recorder:
    """Collects requested sleep durations."""

    def __init__(self):
        self.delays = []

    def __call__(self, seconds):
        self.delays.append(seconds)


class TestClassifyError:

    def test_trusts_explicit_kind(self):
        error = PersistenceError("insert", "bad row", kind=ErrorKind.CLIENT)

        assert classify_error(error) == ErrorKind.CLIENT

    def test_transient_kind(self):
        error = PersistenceError("insert", "timeout", kind=ErrorKind.TRANSIENT)

        assert classify_error(error) == ErrorKind.TRANSIENT

    def test_4xx_status_code_is_client(self):
        error = Exception("bad request")
        error.status_code = 422

        assert classify_error(error) == ErrorKind.CLIENT

    def test_numeric_string_code_is_client(self):
        error = Exception("conflict")
        error.code = "409"

        assert classify_error(error) == ErrorKind.CLIENT

    def test_5xx_is_unknown(self):
        error = Exception("server error")
        error.status_code = 503

        assert classify_error(error) == ErrorKind.UNKNOWN

    def test_plain_exception_is_unknown(self):
        assert classify_error(RuntimeError("boom")) == ErrorKind.UNKNOWN


class TestBackoffDelay:

    def test_doubles_per_attempt_without_jitter(self):
        assert backoff_delay(0, base_delay=1.0, max_jitter=0) == 1.0
        assert backoff_delay(1, base_delay=1.0, max_jitter=0) == 2.0
        assert backoff_delay(2, base_delay=1.0, max_jitter=0) == 4.0

    def test_jitter_is_bounded(self):
        for _ in range(50):
            delay = backoff_delay(0, base_delay=1.0, max_jitter=1.0)
            assert 1.0 <= delay <= 2.0


class TestRetryOperation:

    def test_success_first_try_does_not_sleep(self):
        sleep = Recorder()
        operation = MagicMock(return_value="ok")

        assert retry_operation(operation, sleep=sleep) == "ok"
        assert operation.call_count == 1
        assert sleep.delays == []

    def test_recovers_after_transient_failures(self):
        sleep = Recorder()
        transient = PersistenceError("insert", "timeout", kind=ErrorKind.TRANSIENT)
        operation = MagicMock(side_effect=[transient, transient, "ok"])

        result = retry_operation(operation, base_delay=1.0, max_jitter=0, sleep=sleep)

        assert result == "ok"
        assert operation.call_count == 3
        assert sleep.delays == [1.0, 2.0]

    def test_gives_up_after_max_retries_plus_one_attempts(self):
        sleep = Recorder()
        operation = MagicMock(side_effect=RuntimeError("still down"))

        with pytest.raises(RuntimeError, match="still down"):
            retry_operation(operation, max_retries=3, base_delay=1.0, max_jitter=0, sleep=sleep)

        assert operation.call_count == 4
        assert sleep.delays == [1.0, 2.0, 4.0]

    def test_raises_last_error(self):
        errors = [RuntimeError("first"), RuntimeError("second")]
        operation = MagicMock(side_effect=errors)

        with pytest.raises(RuntimeError, match="second"):
            retry_operation(operation, max_retries=1, sleep=Recorder())

    def test_client_error_is_not_retried(self):
        sleep = Recorder()
        client = PersistenceError("insert", "violates check constraint", kind=ErrorKind.CLIENT)
        operation = MagicMock(side_effect=client)

        with pytest.raises(PersistenceError) as exc_info:
            retry_operation(operation, sleep=sleep)

        assert exc_info.value is client
        assert operation.call_count == 1
        assert sleep.delays == []

    def test_zero_retries_means_single_attempt(self):
        operation = MagicMock(side_effect=RuntimeError("down"))

        with pytest.raises(RuntimeError):
            retry_operation(operation, max_retries=0, sleep=Recorder())

        assert operation.call_count == 1

    def test_unknown_errors_are_retried(self):
        sleep = Recorder()
        operation = MagicMock(side_effect=[ValueError("odd"), "ok"])

        assert retry_operation(operation, base_delay=0.25, max_jitter=0, sleep=sleep) == "ok"
        assert sleep.delays == [0.25]
