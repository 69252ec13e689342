"""Submission service: deduplicate landing page leads and schedule follow-ups."""

import logging
from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode

from app.core.exceptions import IntegrationError
from app.core.fingerprint import fingerprint_phone
from app.domain.models.lead import FollowupJob, Submission, SubmissionOutcome
from app.infrastructure.contact_directory import ContactDirectory
from app.infrastructure.followup_scheduler import FollowupScheduler
from app.infrastructure.record_store import RecordStore
from app.settings import settings

logger = logging.getLogger(__name__)


def build_form_url(base_url: str, first: str, last: str, fingerprint: str) -> str:
    """Append first, last and id query parameters to a downstream form URL."""
    query = urlencode({"first": first, "last": last, "id": fingerprint})
    return f"{base_url}?{query}"


class SubmissionService:
    """Run a submission through dedupe, record creation and follow-up scheduling.

    Only a fingerprint absent from both the Partial and Completed tables
    leads to a write. Every failure is logged and ends processing for this
    submission; nothing is retried and nothing is raised to the caller,
    which has already acknowledged the webhook.
    """

    def __init__(
        self,
        contacts: ContactDirectory,
        records: RecordStore,
        scheduler: FollowupScheduler,
        partial_table: str | None = None,
        completed_table: str | None = None,
        followup_delay: timedelta | None = None,
    ) -> None:
        self.contacts = contacts
        self.records = records
        self.scheduler = scheduler
        self.partial_table = partial_table or settings.airtable_partial_table
        self.completed_table = completed_table or settings.airtable_r2e_table
        self.followup_delay = (
            followup_delay if followup_delay is not None else timedelta(minutes=settings.followup_delay_minutes)
        )

    async def process_submission(self, submission: Submission) -> SubmissionOutcome:
        """Process one landing page submission.

        Args:
            submission: Validated submission

        Returns:
            Outcome of the dedupe decision
        """
        fingerprint = fingerprint_phone(submission.phone)
        log_extra = {"fingerprint": fingerprint}

        logger.info(
            f"Processing submission for {submission.first} {submission.last}",
            extra=log_extra,
        )

        try:
            contact_id = await self.contacts.resolve_or_create(
                submission.phone, submission.first, submission.last
            )
        except IntegrationError as e:
            logger.error(f"Error with contact directory: {e}", extra=log_extra)
            return SubmissionOutcome.FAILED

        try:
            exists_partial = await self.records.exists(self.partial_table, fingerprint)
            exists_completed = await self.records.exists(self.completed_table, fingerprint)
        except IntegrationError as e:
            logger.error(f"Error checking record tables: {e}", extra=log_extra)
            return SubmissionOutcome.FAILED

        if exists_partial and exists_completed:
            logger.info("Skipping: already in both Partial and Completed tables", extra=log_extra)
            return SubmissionOutcome.SKIPPED_BOTH
        if exists_partial:
            logger.info("Skipping: already in Partial table", extra=log_extra)
            return SubmissionOutcome.SKIPPED_PARTIAL
        if exists_completed:
            logger.info("Skipping: already in Completed table", extra=log_extra)
            return SubmissionOutcome.SKIPPED_COMPLETED

        return await self._record_and_schedule(submission, fingerprint, contact_id)

    async def _record_and_schedule(
        self,
        submission: Submission,
        fingerprint: str,
        contact_id: str,
    ) -> SubmissionOutcome:
        log_extra = {"fingerprint": fingerprint, "contact_id": contact_id}

        try:
            contact_id_number = int(contact_id)
        except (TypeError, ValueError):
            logger.error(f"Contact ID is not numeric: {contact_id!r}", extra=log_extra)
            return SubmissionOutcome.FAILED

        try:
            await self.records.create(
                self.partial_table,
                {
                    "first": submission.first,
                    "last": submission.last,
                    "phone": submission.phone,
                    "hash": fingerprint,
                    "Contact ID": contact_id_number,
                },
            )
        except IntegrationError as e:
            logger.error(f"Error creating Partial record: {e}", extra=log_extra)
            return SubmissionOutcome.FAILED

        job = FollowupJob(
            fingerprint=fingerprint,
            first_name=submission.first,
            last_name=submission.last,
            contact_id=contact_id,
            due_at=datetime.now(timezone.utc) + self.followup_delay,
        )
        try:
            await self.scheduler.schedule(job)
        except IntegrationError as e:
            logger.error(f"Error scheduling follow-up: {e}", extra=log_extra)
            return SubmissionOutcome.FAILED

        logger.info(f"Partial record created; follow-up due at {job.due_at.isoformat()}", extra=log_extra)
        return SubmissionOutcome.RECORDED
