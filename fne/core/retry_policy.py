"""Retry Policy - pure state machine deciding between retry and raise for one request.

Invariants:
    - States: ATTEMPTING -> SUCCESS | RETRYABLE_FAILURE -> ATTEMPTING | TERMINAL_FAILURE
    - 2xx is SUCCESS; 401 and every other 4xx are TERMINAL; 5xx, any other status
      and transport failures are RETRYABLE
    - A RETRYABLE outcome with attempts left waits 2^(attempt-1) * 1000 ms (no jitter)
    - A RETRYABLE outcome on the last attempt becomes TERMINAL (exhausted)
    - Functions are PURE: no sleeping, no IO; the shell applies the decision

Design Decisions:
    - Returns a RetryDecision descriptor, the pipeline performs the wait and the raise
"""

from dataclasses import dataclass
from enum import Enum

from fne.core.constants import BACKOFF_BASE_MS


class AttemptState(str, Enum):
    ATTEMPTING = "attempting"
    SUCCESS = "success"
    RETRYABLE_FAILURE = "retryable_failure"
    TERMINAL_FAILURE = "terminal_failure"


@dataclass(frozen=True)
class RetryDecision:
    """What the pipeline does next after classifying an attempt."""
    state: AttemptState
    delay_ms: int = 0
    exhausted: bool = False

    @property
    def should_retry(self) -> bool:
        return self.state == AttemptState.ATTEMPTING


def backoff_delay_ms(attempt: int, base_ms: int = BACKOFF_BASE_MS) -> int:
    """Wait after failed attempt N (1-based): 1000, 2000, 4000, ..."""
    return (2 ** (attempt - 1)) * base_ms


def classify_status(status_code: int) -> AttemptState:
    """Map an HTTP status to the outcome of one attempt."""
    if 200 <= status_code < 300:
        return AttemptState.SUCCESS
    if 400 <= status_code < 500:
        return AttemptState.TERMINAL_FAILURE
    return AttemptState.RETRYABLE_FAILURE


def next_decision(
    outcome: AttemptState, attempt: int, max_attempts: int,
) -> RetryDecision:
    """Transition from a classified outcome of attempt N (1-based)."""
    if outcome in (AttemptState.SUCCESS, AttemptState.TERMINAL_FAILURE):
        return RetryDecision(outcome)
    if outcome != AttemptState.RETRYABLE_FAILURE:
        raise ValueError(f"Cannot decide from state {outcome.value!r}")
    if attempt < max_attempts:
        return RetryDecision(AttemptState.ATTEMPTING, backoff_delay_ms(attempt))
    return RetryDecision(AttemptState.TERMINAL_FAILURE, exhausted=True)
