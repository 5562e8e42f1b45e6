from unittest import mock

import pytest

from meshcheck.retry import AttemptResult, attempt, options, until_success


class _Flaky:
    """Fails a given number of times, then returns the call count."""

    def __init__(self, failures):
        self.failures = failures
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise AssertionError(f"failure {self.calls}")
        return self.calls


def _fast(max_attempts):
    return options().with_max_attempts(max_attempts).with_delay(0)


def test_default_options():
    opts = options()
    assert opts.max_attempts == 60
    assert opts.delay == 1.0
    assert opts.log_attempts is True


def test_with_methods_do_not_mutate():
    base = options()
    changed = base.with_max_attempts(3).with_delay(0.5).with_log_attempts(False)
    assert (changed.max_attempts, changed.delay, changed.log_attempts) == (3, 0.5, False)
    assert base == options()


def test_attempt_success():
    result = attempt(lambda: 42)
    assert isinstance(result, AttemptResult)
    assert not result.failed
    assert result.value == 42


def test_attempt_failure_captures_error():
    def boom():
        raise AssertionError("nope")

    result = attempt(boom)
    assert result.failed
    assert isinstance(result.error, AssertionError)
    assert str(result.error) == "nope"


def test_first_try_success_no_logs():
    logs = []
    func = _Flaky(0)
    assert until_success(func, _fast(5), log=logs.append) == 1
    assert func.calls == 1
    assert logs == []


def test_retries_until_success():
    logs = []
    func = _Flaky(2)
    assert until_success(func, _fast(10), log=logs.append) == 3
    assert func.calls == 3
    assert logs[0].startswith("--- Attempt 1/10 failed. Retrying in")
    assert logs[1].startswith("--- Attempt 2/10 failed.")
    assert logs[2].startswith("--- Attempt 3/10 successful; total time:")
    assert len(logs) == 3


def test_last_failure_propagates():
    logs = []
    func = _Flaky(100)
    with pytest.raises(AssertionError, match="failure 3"):
        until_success(func, _fast(3), log=logs.append)
    assert func.calls == 3
    assert logs[-1] == "Last attempt (3/3) failed."


def test_log_attempts_disabled():
    logs = []
    func = _Flaky(2)
    opts = _fast(10).with_log_attempts(False)
    assert until_success(func, opts, log=logs.append) == 3
    assert logs == []


def test_log_failed_attempts_disabled():
    logs = []
    func = _Flaky(2)
    assert until_success(func, _fast(10), log=logs.append, log_failed_attempts=False) == 3
    assert logs == []


def test_warning_almost_certainly_flaky():
    logs = []
    func = _Flaky(9)
    opts = _fast(10).with_log_attempts(False)
    assert until_success(func, opts, log=logs.append) == 10
    assert len(logs) == 1
    assert "almost certainly flaky" in logs[0]


def test_warning_may_be_flaky():
    logs = []
    func = _Flaky(8)
    opts = _fast(10).with_log_attempts(False)
    until_success(func, opts, log=logs.append)
    assert len(logs) == 1
    assert "may be flaky" in logs[0]


def test_zero_attempts_never_calls():
    func = _Flaky(0)
    assert until_success(func, _fast(0)) is None
    assert func.calls == 0


def test_default_delay_message_and_sleep():
    logs = []
    func = _Flaky(1)
    with mock.patch("meshcheck.retry.time.sleep") as sleep:
        until_success(func, options().with_max_attempts(5), log=logs.append)
    sleep.assert_called_once_with(1.0)
    assert logs[0] == "--- Attempt 1/5 failed. Retrying..."