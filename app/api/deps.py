"""FastAPI dependencies wiring services to their integrations."""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, status

from app.domain.models.lead import FollowupJob
from app.domain.services.followup_service import FollowUpService
from app.domain.services.submission_service import SubmissionService
from app.domain.services.verification_service import VerificationService
from app.infrastructure.cloud_tasks import worker_url
from app.infrastructure.contact_directory import ContactDirectory, TextMagicContactDirectory
from app.infrastructure.followup_scheduler import (
    CloudTasksFollowupScheduler,
    FollowupScheduler,
    InProcessFollowupScheduler,
)
from app.infrastructure.kv_store import TtlStore, get_ttl_store
from app.infrastructure.link_shortener import LinkShortener, ShortIoLinkShortener
from app.infrastructure.record_store import AirtableRecordStore, RecordStore
from app.infrastructure.twilio_client import TwilioVerifyClient

logger = logging.getLogger(__name__)

_followup_scheduler: FollowupScheduler | None = None


def get_contact_directory() -> ContactDirectory:
    return TextMagicContactDirectory()


def get_record_store() -> RecordStore:
    return AirtableRecordStore()


def get_link_shortener() -> LinkShortener:
    return ShortIoLinkShortener()


def build_followup_service() -> FollowUpService:
    """Create a follow-up service from the configured integrations."""
    return FollowUpService(
        contacts=get_contact_directory(),
        records=get_record_store(),
        shortener=get_link_shortener(),
        store=get_ttl_store(),
    )


async def _run_followup_in_process(job: FollowupJob) -> None:
    await build_followup_service().run_followup(job)


def get_followup_scheduler() -> FollowupScheduler:
    """Return the process-wide follow-up scheduler.

    Cloud Tasks is used when a worker URL is configured; otherwise follow-ups
    run in-process and do not survive a restart.
    """
    global _followup_scheduler
    if _followup_scheduler is None:
        task_url = worker_url("/followup")
        if task_url:
            _followup_scheduler = CloudTasksFollowupScheduler(task_url)
        else:
            logger.warning("cloud_tasks_worker_url not configured, follow-ups will run in-process")
            _followup_scheduler = InProcessFollowupScheduler(_run_followup_in_process)
    return _followup_scheduler


async def shutdown_followup_scheduler() -> None:
    """Cancel pending in-process follow-ups on application shutdown."""
    global _followup_scheduler
    if isinstance(_followup_scheduler, InProcessFollowupScheduler):
        await _followup_scheduler.shutdown()
    _followup_scheduler = None


def get_submission_service(
    contacts: Annotated[ContactDirectory, Depends(get_contact_directory)],
    records: Annotated[RecordStore, Depends(get_record_store)],
    scheduler: Annotated[FollowupScheduler, Depends(get_followup_scheduler)],
) -> SubmissionService:
    return SubmissionService(contacts=contacts, records=records, scheduler=scheduler)


def get_followup_service(
    contacts: Annotated[ContactDirectory, Depends(get_contact_directory)],
    records: Annotated[RecordStore, Depends(get_record_store)],
    shortener: Annotated[LinkShortener, Depends(get_link_shortener)],
    store: Annotated[TtlStore, Depends(get_ttl_store)],
) -> FollowUpService:
    return FollowUpService(contacts=contacts, records=records, shortener=shortener, store=store)


def get_verification_service(
    store: Annotated[TtlStore, Depends(get_ttl_store)],
) -> VerificationService:
    """Build the OTP service.

    Raises:
        HTTPException: 503 if Twilio Verify is not configured
    """
    try:
        provider = TwilioVerifyClient()
    except ValueError as e:
        logger.error(f"Phone verification unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Phone verification is not configured",
        )
    return VerificationService(provider=provider, store=store)
