"""Bounded polling for submit-then-poll provider jobs.

State machine:
    SUBMITTED → POLLING → SUCCEEDED
                        → FAILED     (provider reported failure/cancel)
                        → TIMED_OUT  (poll ceiling reached)

The poll ceiling and interval are structural (tenacity stop/wait), and the
wait between polls is ``asyncio.sleep`` so other requests keep being served.
Cancelling the awaiting task cancels the job wait immediately.
"""

from __future__ import annotations

import enum
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog
from tenacity import AsyncRetrying, RetryError, retry_if_result, stop_after_attempt, wait_fixed

from fitcoach.domain.exceptions import JobFailedError, JobTimeoutError

logger = structlog.get_logger(__name__)


class JobState(str, enum.Enum):
    SUBMITTED = "submitted"
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def terminal(self) -> bool:
        return self in (JobState.SUCCEEDED, JobState.FAILED, JobState.TIMED_OUT)


@dataclass(frozen=True)
class JobSnapshot:
    """Provider-neutral view of one status response."""

    job_id: str
    state: JobState
    output: Any = None
    error: str | None = None


def _still_running(snapshot: JobSnapshot) -> bool:
    return not snapshot.state.terminal


class PollingJob:
    """Runs one asynchronous provider job to a terminal state.

    ``submit`` creates the job; ``fetch`` reads its status by id.  Both map
    the provider's wire format to ``JobSnapshot``.  ``run`` returns the
    output of a succeeded job or raises ``JobFailedError`` /
    ``JobTimeoutError``.
    """

    def __init__(
        self,
        provider_id: str,
        submit: Callable[[], Awaitable[JobSnapshot]],
        fetch: Callable[[str], Awaitable[JobSnapshot]],
        *,
        interval_s: float = 1.0,
        max_polls: int = 60,
    ) -> None:
        if max_polls < 1:
            raise ValueError("max_polls must be at least 1")
        self._provider_id = provider_id
        self._submit = submit
        self._fetch = fetch
        self._interval = interval_s
        self._max_polls = max_polls

        self.state = JobState.SUBMITTED
        self.polls = 0

    async def run(self) -> Any:
        snapshot = await self._submit()
        log = logger.bind(provider=self._provider_id, job_id=snapshot.job_id)
        log.debug("provider_job_submitted", state=snapshot.state.value)

        if not snapshot.state.terminal:
            self.state = JobState.POLLING
            snapshot = await self._poll_until_terminal(snapshot.job_id, log)

        self.state = snapshot.state
        if snapshot.state == JobState.SUCCEEDED:
            log.debug("provider_job_succeeded", polls=self.polls)
            return snapshot.output

        log.warning("provider_job_failed", polls=self.polls, error=snapshot.error)
        raise JobFailedError(self._provider_id, snapshot.error or "Job failed")

    async def _poll_until_terminal(self, job_id: str, log: Any) -> JobSnapshot:
        async def _poll_once() -> JobSnapshot:
            self.polls += 1
            return await self._fetch(job_id)

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_polls),
            wait=wait_fixed(self._interval),
            retry=retry_if_result(_still_running),
        )
        try:
            return await retrying(_poll_once)
        except RetryError:
            self.state = JobState.TIMED_OUT
            log.warning("provider_job_timed_out", polls=self.polls, max_polls=self._max_polls)
            raise JobTimeoutError(self._provider_id, self.polls) from None
