"""Tests for the follow-up re-check and reminder."""

from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse

import pytest

from app.core.exceptions import ContactDirectoryError, LinkShortenerError, RecordStoreError
from app.core.fingerprint import fingerprint_phone
from app.domain.models.lead import FollowupJob, FollowupOutcome
from app.domain.services.followup_service import (
    FollowUpService,
    compose_followup_message,
    sent_marker_key,
)

PHONE = "802-555-0100"


@pytest.fixture
def job():
    return FollowupJob(
        fingerprint=fingerprint_phone(PHONE),
        first_name="Ada",
        last_name="Lovelace",
        contact_id="123456",
        due_at=datetime.now(timezone.utc),
    )


@pytest.fixture
def service(contacts, records, shortener, ttl_store):
    return FollowUpService(contacts=contacts, records=records, shortener=shortener, store=ttl_store)


def test_compose_followup_message():
    """Test reminder text."""
    message = compose_followup_message("Ada", "https://dos.short.gy/abc123")

    assert message == "Hello Ada! Finish signing up for DemocracyOS here: https://dos.short.gy/abc123"


@pytest.mark.asyncio
async def test_unconverted_lead_gets_one_reminder(service, job, contacts, shortener):
    """Test a lead missing from the Completed table is messaged with a short link."""
    outcome = await service.run_followup(job)

    assert outcome == FollowupOutcome.NOTIFIED
    assert len(shortener.long_urls) == 1

    target = urlparse(shortener.long_urls[0])
    assert f"{target.scheme}://{target.netloc}{target.path}" == "https://forms.democracyos.com/t/bj1RaePxL2us"
    assert parse_qs(target.query) == {
        "first": ["Ada"],
        "last": ["Lovelace"],
        "id": [fingerprint_phone(PHONE)],
    }

    assert contacts.messages == [
        ("123456", "Hello Ada! Finish signing up for DemocracyOS here: https://dos.short.gy/abc123")
    ]


@pytest.mark.asyncio
async def test_converted_lead_is_not_messaged(service, job, records, contacts, shortener, ttl_store):
    """Test a lead who completed registration during the wait is left alone."""
    records.seed("R2E", PHONE)

    outcome = await service.run_followup(job)

    assert outcome == FollowupOutcome.SUPPRESSED
    assert shortener.long_urls == []
    assert contacts.messages == []
    assert await ttl_store.get(sent_marker_key(job)) is None


@pytest.mark.asyncio
async def test_only_completed_table_is_rechecked(service, job, records):
    """Test the Partial record written at submission time does not suppress."""
    records.seed("Partial", PHONE)

    outcome = await service.run_followup(job)

    assert outcome == FollowupOutcome.NOTIFIED
    assert records.lookups == [("R2E", job.fingerprint)]


@pytest.mark.asyncio
async def test_redelivered_job_sends_nothing(service, job, contacts, ttl_store):
    """Test a second run of the same job is a no-op."""
    first = await service.run_followup(job)
    second = await service.run_followup(job)

    assert first == FollowupOutcome.NOTIFIED
    assert second == FollowupOutcome.ALREADY_SENT
    assert len(contacts.messages) == 1
    assert await ttl_store.get(sent_marker_key(job)) == "123456"


@pytest.mark.asyncio
async def test_recheck_failure_sends_nothing(service, job, records, contacts):
    """Test an Airtable failure at fire time cancels the reminder."""
    records.exists_error = RecordStoreError("boom")

    outcome = await service.run_followup(job)

    assert outcome == FollowupOutcome.FAILED
    assert contacts.messages == []


@pytest.mark.asyncio
async def test_shortener_failure_sends_nothing(service, job, shortener, contacts, ttl_store):
    """Test no message goes out without a short link."""
    shortener.error = LinkShortenerError("boom")

    outcome = await service.run_followup(job)

    assert outcome == FollowupOutcome.FAILED
    assert contacts.messages == []
    assert await ttl_store.get(sent_marker_key(job)) is None


@pytest.mark.asyncio
async def test_send_failure_leaves_no_marker(service, job, contacts, ttl_store):
    """Test the sent marker is only written after a successful send."""
    contacts.send_error = ContactDirectoryError("boom")

    outcome = await service.run_followup(job)

    assert outcome == FollowupOutcome.FAILED
    assert await ttl_store.get(sent_marker_key(job)) is None


@pytest.mark.asyncio
async def test_later_job_for_same_phone_still_notifies(service, job, contacts):
    """Test the sent marker only covers one scheduled job, not the phone."""
    later_job = job.model_copy(update={"due_at": job.due_at + timedelta(days=2)})

    first = await service.run_followup(job)
    second = await service.run_followup(later_job)

    assert first == FollowupOutcome.NOTIFIED
    assert second == FollowupOutcome.NOTIFIED
    assert len(contacts.messages) == 2
