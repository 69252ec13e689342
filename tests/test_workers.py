"""Tests for Cloud Tasks worker endpoints."""

from datetime import datetime, timezone

from app.core.exceptions import RecordStoreError
from app.core.fingerprint import fingerprint_phone


def _job_payload(phone: str = "802-555-0100") -> dict:
    return {
        "fingerprint": fingerprint_phone(phone),
        "first_name": "Ada",
        "last_name": "Lovelace",
        "contact_id": "123456",
        "due_at": datetime.now(timezone.utc).isoformat(),
    }


def test_process_submission_worker(client, records, scheduler):
    """Test the queued submission worker runs the pipeline."""
    response = client.post(
        "/workers/process-submission",
        json={"first": "Ada", "last": "Lovelace", "phone": "802-555-0100"},
    )

    assert response.status_code == 200
    assert response.json() == {"status": "recorded"}
    assert len(records.records("Partial")) == 1
    assert len(scheduler.jobs) == 1


def test_followup_worker_sends_reminder(client, contacts):
    """Test a due follow-up task sends the reminder."""
    response = client.post("/workers/followup", json=_job_payload())

    assert response.status_code == 200
    assert response.json() == {"status": "notified"}
    assert len(contacts.messages) == 1


def test_followup_worker_redelivery_is_noop(client, contacts):
    """Test the same task delivered twice sends one message."""
    payload = _job_payload()
    client.post("/workers/followup", json=payload)
    response = client.post("/workers/followup", json=payload)

    assert response.json() == {"status": "already_sent"}
    assert len(contacts.messages) == 1


def test_followup_worker_suppressed_for_converted_lead(client, records, contacts):
    """Test a converted lead is not messaged."""
    records.seed("R2E", "802-555-0100")

    response = client.post("/workers/followup", json=_job_payload())

    assert response.json() == {"status": "suppressed"}
    assert contacts.messages == []


def test_followup_worker_handled_failure_is_not_retried(client, records):
    """Test handled failures answer 200 so the queue does not redeliver."""
    records.exists_error = RecordStoreError("Airtable unavailable")

    response = client.post("/workers/followup", json=_job_payload())

    assert response.status_code == 200
    assert response.json() == {"status": "failed"}


def test_process_submission_worker_rejects_incomplete_payload(client, contacts, records):
    """Test the queued worker applies the same required-field rule as the webhook."""
    response = client.post(
        "/workers/process-submission",
        json={"first": "Ada", "last": "", "phone": "802-555-0100"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields"}
    assert contacts.resolved == []
    assert records.lookups == []
