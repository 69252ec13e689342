"""Data models for landing page lead submissions and follow-ups."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class Submission(BaseModel):
    """A validated landing page submission."""

    first: str
    last: str
    phone: str  # Raw, as typed by the submitter


class FollowupJob(BaseModel):
    """A deferred re-check-and-notify job for one fresh submission."""

    fingerprint: str
    first_name: str
    last_name: str
    contact_id: str
    due_at: datetime


class SubmissionOutcome(str, Enum):
    """Result of running a submission through the pipeline."""

    RECORDED = "recorded"  # Partial record written, follow-up scheduled
    SKIPPED_PARTIAL = "skipped_partial"
    SKIPPED_COMPLETED = "skipped_completed"
    SKIPPED_BOTH = "skipped_both"
    FAILED = "failed"


class FollowupOutcome(str, Enum):
    """Result of running a follow-up job."""

    NOTIFIED = "notified"
    SUPPRESSED = "suppressed"  # Lead converted during the wait
    ALREADY_SENT = "already_sent"
    FAILED = "failed"
