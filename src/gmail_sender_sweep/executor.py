"""Retry wrapper for single Gmail API calls."""

from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from tenacity import RetryCallState, RetryError, Retrying, retry_if_exception, stop_after_attempt

from .constants import DEFAULT_BASE_DELAY, DEFAULT_MAX_RETRIES
from .errors import RemoteError, RetriesExhausted

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, RemoteError) and exc.transient


class RequestExecutor:
    """Run one remote call, backing off and retrying on transient failures.

    The delay before each retry is the server's Retry-After hint when present,
    otherwise ``base_delay * 2 ** attempt``.  Non-transient errors propagate
    untouched; a transient failure that outlasts ``max_retries`` retries is
    raised as RetriesExhausted.
    """

    def __init__(
        self,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay: float = DEFAULT_BASE_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.max_retries = max_retries
        self.base_delay = base_delay
        self._sleep = sleep

    def _wait(self, retry_state: RetryCallState) -> float:
        exc = retry_state.outcome.exception()
        if isinstance(exc, RemoteError) and exc.retry_after is not None:
            return exc.retry_after
        return self.base_delay * 2 ** retry_state.attempt_number

    def _log_backoff(self, description: str) -> Callable[[RetryCallState], None]:
        def _log(retry_state: RetryCallState) -> None:
            logger.warning(
                "%s throttled (%s); retrying in %.1fs (attempt %d/%d)",
                description,
                retry_state.outcome.exception(),
                retry_state.next_action.sleep,
                retry_state.attempt_number,
                self.max_retries,
            )

        return _log

    def execute(self, operation: Callable[[], T], description: str = "request") -> T:
        retrying = Retrying(
            retry=retry_if_exception(_is_transient),
            stop=stop_after_attempt(self.max_retries + 1),
            wait=self._wait,
            sleep=self._sleep,
            before_sleep=self._log_backoff(description),
        )
        try:
            return retrying(operation)
        except RetryError as exc:
            last_error = exc.last_attempt.exception()
            raise RetriesExhausted(description, self.max_retries, last_error) from last_error
