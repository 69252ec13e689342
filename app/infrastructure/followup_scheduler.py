"""Schedulers that run follow-up jobs at their due time.

Cloud Tasks persists the job and its due time, so pending follow-ups
survive restarts and redeploys. The in-process scheduler keeps jobs in
asyncio tasks and loses them when the process exits; it exists for local
development and tests.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable

from app.core.exceptions import SchedulingError
from app.domain.models.lead import FollowupJob
from app.infrastructure.cloud_tasks import CloudTasksClient

logger = logging.getLogger(__name__)

FollowupRunner = Callable[[FollowupJob], Awaitable[Any]]


class FollowupScheduler(ABC):
    """Submit follow-up jobs to run at job.due_at."""

    @abstractmethod
    async def schedule(self, job: FollowupJob) -> str:
        """Schedule a job.

        Returns:
            Scheduler-specific job identifier

        Raises:
            SchedulingError: If the job could not be submitted
        """
        pass


class CloudTasksFollowupScheduler(FollowupScheduler):
    """Durable scheduler backed by a Cloud Tasks queue."""

    def __init__(self, task_url: str, client: CloudTasksClient | None = None) -> None:
        """Initialize scheduler.

        Args:
            task_url: Absolute URL of the follow-up worker route
            client: Cloud Tasks client (created lazily if None)
        """
        self.task_url = task_url
        self._client = client

    async def schedule(self, job: FollowupJob) -> str:
        try:
            if self._client is None:
                self._client = CloudTasksClient()
            task_name = await self._client.create_task_async(
                payload=job.model_dump(mode="json"),
                url=self.task_url,
                schedule_time=job.due_at,
            )
        except Exception as e:
            raise SchedulingError(f"Cloud Tasks enqueue failed: {e}") from e

        logger.info(
            f"Scheduled follow-up task {task_name}",
            extra={"fingerprint": job.fingerprint, "due_at": job.due_at.isoformat()},
        )
        return task_name


class InProcessFollowupScheduler(FollowupScheduler):
    """Non-durable scheduler that sleeps in an asyncio task until the job is due."""

    def __init__(self, runner: FollowupRunner) -> None:
        self._runner = runner
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def schedule(self, job: FollowupJob) -> str:
        task = asyncio.create_task(self._run_when_due(job), name=f"followup-{job.fingerprint[:12]}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.warning(
            "Scheduled in-process follow-up; it will be lost if the process restarts",
            extra={"fingerprint": job.fingerprint, "due_at": job.due_at.isoformat()},
        )
        return task.get_name()

    async def _run_when_due(self, job: FollowupJob) -> None:
        delay = (job.due_at - datetime.now(timezone.utc)).total_seconds()
        if delay > 0:
            await asyncio.sleep(delay)
        try:
            await self._runner(job)
        except Exception as e:
            logger.error(f"In-process follow-up failed: {e}", exc_info=True)

    async def shutdown(self) -> None:
        """Cancel jobs that have not fired yet."""
        if self._tasks:
            logger.warning(f"Dropping {len(self._tasks)} pending in-process follow-ups")
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
