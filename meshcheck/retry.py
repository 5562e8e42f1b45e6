"""Retrying a check until it succeeds or runs out of attempts."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

_logger = logging.getLogger(__name__)

_FLAKY_90 = (
    "WARNING: This test is is almost certainly flaky since it required more than 90% "
    "of the maximum retry count to succeed. Consider increasing the maximum retry "
    "count to prevent flakiness."
)
_FLAKY_75 = (
    "WARNING: This test may be flaky since it required more than 75% of the maximum "
    "retry count to succeed. Consider increasing the maximum retry count to prevent "
    "flakiness."
)


@dataclass(frozen=True)
class RetryOptions:
    """How often to retry, how long to wait between tries, and whether to log."""

    max_attempts: int = 60
    delay: float = 1.0
    log_attempts: bool = True

    def with_max_attempts(self, max_attempts: int) -> RetryOptions:
        return replace(self, max_attempts=max_attempts)

    def with_delay(self, delay: float) -> RetryOptions:
        return replace(self, delay=delay)

    def with_log_attempts(self, log_attempts: bool) -> RetryOptions:
        return replace(self, log_attempts=log_attempts)


DEFAULT_OPTIONS = RetryOptions()


def options() -> RetryOptions:
    """Return the default retry options."""
    return DEFAULT_OPTIONS


@dataclass
class AttemptResult:
    """Outcome of one attempt: the returned value or the raised error."""

    value: Any = None
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


def attempt(func: Callable[[], Any]) -> AttemptResult:
    """Run ``func`` once, capturing any exception it raises."""
    try:
        return AttemptResult(value=func())
    except Exception as exc:  # noqa: BLE001 - any failure of the check counts
        return AttemptResult(error=exc)


def _format_delay(delay: float) -> str:
    return f"{delay:g}s"


def until_success(
    func: Callable[[], Any],
    options: Optional[RetryOptions] = None,
    log: Optional[Callable[[str], None]] = None,
    log_failed_attempts: bool = True,
) -> Any:
    """Call ``func`` until it returns without raising.

    Earlier failures are swallowed and retried after ``options.delay`` seconds;
    the exception of the final attempt propagates. Returns the value of the
    successful call.
    """
    opts = options if options is not None else DEFAULT_OPTIONS
    emit = log if log is not None else _logger.info
    verbose = opts.log_attempts and log_failed_attempts
    start = time.monotonic()

    for i in range(opts.max_attempts):
        number = i + 1
        if i == opts.max_attempts - 1:
            try:
                value = func()
            except Exception:
                if verbose:
                    emit(f"Last attempt ({number}/{opts.max_attempts}) failed.")
                raise
        else:
            result = attempt(func)
            if result.failed:
                if verbose:
                    if opts.delay == DEFAULT_OPTIONS.delay:
                        emit(f"--- Attempt {number}/{opts.max_attempts} failed. Retrying...")
                    else:
                        emit(
                            f"--- Attempt {number}/{opts.max_attempts} failed. "
                            f"Retrying in {_format_delay(opts.delay)}..."
                        )
                time.sleep(opts.delay)
                continue
            value = result.value

        if verbose and i > 0:
            elapsed = time.monotonic() - start
            emit(
                f"--- Attempt {number}/{opts.max_attempts} successful; "
                f"total time: {elapsed:.2f}s"
            )
        if opts.max_attempts > 1:
            percentage = i * 100 // opts.max_attempts
            if percentage >= 90:
                emit(_FLAKY_90)
            elif percentage >= 75:
                emit(_FLAKY_75)
        return value
    return None