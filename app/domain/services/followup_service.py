"""Follow-up service: remind leads who have not finished registering."""

import logging

from app.core.exceptions import IntegrationError
from app.domain.models.lead import FollowupJob, FollowupOutcome
from app.domain.services.submission_service import build_form_url
from app.infrastructure.contact_directory import ContactDirectory
from app.infrastructure.kv_store import TtlStore
from app.infrastructure.link_shortener import LinkShortener
from app.infrastructure.record_store import RecordStore
from app.settings import settings

logger = logging.getLogger(__name__)

SENT_MARKER_PREFIX = "followup:sent:"


def sent_marker_key(job: FollowupJob) -> str:
    """Key of the marker that makes one scheduled job send at most once."""
    return f"{SENT_MARKER_PREFIX}{job.fingerprint}:{job.due_at.isoformat()}"


def compose_followup_message(first_name: str, link: str, brand: str | None = None) -> str:
    """Build the reminder SMS body."""
    return f"Hello {first_name}! Finish signing up for {brand or settings.followup_brand_name} here: {link}"


class FollowUpService:
    """Execute follow-up jobs once they are due."""

    def __init__(
        self,
        contacts: ContactDirectory,
        records: RecordStore,
        shortener: LinkShortener,
        store: TtlStore,
        completed_table: str | None = None,
        form_url: str | None = None,
    ) -> None:
        self.contacts = contacts
        self.records = records
        self.shortener = shortener
        self.store = store
        self.completed_table = completed_table or settings.airtable_r2e_table
        self.form_url = form_url or settings.registration_form_url

    async def run_followup(self, job: FollowupJob) -> FollowupOutcome:
        """Re-check conversion and send the reminder if still needed.

        The lead may have completed the downstream form while the job
        waited, so the Completed table is checked again here. A sent marker
        keyed by fingerprint and due time is claimed before anything else,
        so a redelivered or concurrent copy of the job is a no-op while a
        later job for the same phone still runs. The claim is released when
        nothing was sent.

        Args:
            job: Due follow-up job

        Returns:
            What the job did
        """
        log_extra = {"fingerprint": job.fingerprint, "contact_id": job.contact_id}
        marker_key = sent_marker_key(job)

        claimed = await self.store.set_if_absent(
            marker_key, job.contact_id, settings.followup_sent_marker_ttl_seconds
        )
        if not claimed:
            logger.info("Follow-up already sent, skipping", extra=log_extra)
            return FollowupOutcome.ALREADY_SENT

        try:
            outcome = await self._notify_unless_converted(job, log_extra)
        except Exception:
            await self.store.delete(marker_key)
            raise
        if outcome != FollowupOutcome.NOTIFIED:
            await self.store.delete(marker_key)
        return outcome

    async def _notify_unless_converted(self, job: FollowupJob, log_extra: dict) -> FollowupOutcome:
        try:
            converted = await self.records.exists(self.completed_table, job.fingerprint)
        except IntegrationError as e:
            logger.error(f"Error re-checking Completed table: {e}", extra=log_extra)
            return FollowupOutcome.FAILED

        if converted:
            logger.info("Skipping reminder: lead is in the Completed table", extra=log_extra)
            return FollowupOutcome.SUPPRESSED

        target_url = build_form_url(self.form_url, job.first_name, job.last_name, job.fingerprint)
        try:
            short_link = await self.shortener.shorten(target_url)
            message = compose_followup_message(job.first_name, short_link)
            await self.contacts.send_message(job.contact_id, message)
        except IntegrationError as e:
            logger.error(f"Error sending follow-up: {e}", extra=log_extra)
            return FollowupOutcome.FAILED

        logger.info(
            f"Successfully sent reminder to {job.first_name} {job.last_name}",
            extra=log_extra,
        )
        return FollowupOutcome.NOTIFIED
