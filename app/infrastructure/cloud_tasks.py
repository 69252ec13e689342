"""Cloud Tasks client wrapper for async and delayed job processing."""

import asyncio
import json
from datetime import datetime
from typing import Any

from google.cloud import tasks_v2
from google.protobuf import timestamp_pb2

from app.settings import settings


def worker_url(path: str) -> str | None:
    """Build the absolute URL of a worker route, or None if workers are not configured.

    Args:
        path: Worker route path, e.g. "/followup"
    """
    base = settings.cloud_tasks_worker_url
    if not base:
        return None
    return f"{base.rstrip('/')}/{path.lstrip('/')}"


class CloudTasksClient:
    """Cloud Tasks client wrapper for queuing HTTP jobs."""

    def __init__(self) -> None:
        """Initialize Cloud Tasks client."""
        self.client = tasks_v2.CloudTasksClient()
        self.queue_path = self.client.queue_path(
            settings.gcp_project_id,
            settings.cloud_tasks_location,
            settings.cloud_tasks_queue_name,
        )

    def create_task(
        self,
        payload: dict[str, Any],
        url: str,
        schedule_time: datetime | None = None,
    ) -> str:
        """Create a Cloud Task.

        Args:
            payload: Task payload (will be JSON serialized)
            url: Target URL for the task
            schedule_time: Timezone-aware time the task becomes due; now if None

        Returns:
            Task name/path
        """
        task: dict[str, Any] = {
            "http_request": {
                "http_method": tasks_v2.HttpMethod.POST,
                "url": url,
                "headers": {"Content-Type": "application/json"},
                "body": json.dumps(payload).encode(),
            }
        }

        if schedule_time is not None:
            timestamp = timestamp_pb2.Timestamp()
            timestamp.FromDatetime(schedule_time)
            task["schedule_time"] = timestamp

        response = self.client.create_task(
            request={
                "parent": self.queue_path,
                "task": task,
            }
        )

        return response.name

    async def create_task_async(
        self,
        payload: dict[str, Any],
        url: str,
        schedule_time: datetime | None = None,
    ) -> str:
        """Create a Cloud Task without blocking the event loop."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            self.create_task,
            payload,
            url,
            schedule_time,
        )
