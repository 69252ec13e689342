"""Pytest configuration and fixtures."""

from typing import Any

import pytest

from app.core.fingerprint import fingerprint_phone
from app.domain.models.lead import FollowupJob
from app.infrastructure.contact_directory import ContactDirectory
from app.infrastructure.followup_scheduler import FollowupScheduler
from app.infrastructure.kv_store import InMemoryTtlStore
from app.infrastructure.link_shortener import LinkShortener
from app.infrastructure.record_store import RecordStore


class FakeContactDirectory(ContactDirectory):
    """Contact directory that records calls instead of hitting TextMagic."""

    def __init__(self, contact_id: str = "123456") -> None:
        self.contact_id = contact_id
        self.resolved: list[tuple[str, str, str]] = []
        self.messages: list[tuple[str, str]] = []
        self.resolve_error: Exception | None = None
        self.send_error: Exception | None = None

    async def resolve_or_create(self, phone: str, first_name: str, last_name: str) -> str:
        self.resolved.append((phone, first_name, last_name))
        if self.resolve_error:
            raise self.resolve_error
        return self.contact_id

    async def send_message(self, contact_id: str, text: str) -> None:
        if self.send_error:
            raise self.send_error
        self.messages.append((contact_id, text))


class FakeRecordStore(RecordStore):
    """In-memory tables keyed by name, matched on the "hash" field."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.lookups: list[tuple[str, str]] = []
        self.exists_error: Exception | None = None
        self.create_error: Exception | None = None

    def seed(self, table: str, phone: str) -> None:
        self.tables.setdefault(table, []).append({"hash": fingerprint_phone(phone)})

    def records(self, table: str) -> list[dict[str, Any]]:
        return self.tables.get(table, [])

    async def exists(self, table: str, fingerprint: str) -> bool:
        self.lookups.append((table, fingerprint))
        if self.exists_error:
            raise self.exists_error
        return any(record.get("hash") == fingerprint for record in self.records(table))

    async def create(self, table: str, fields: dict[str, Any]) -> None:
        if self.create_error:
            raise self.create_error
        self.tables.setdefault(table, []).append(dict(fields))


class FakeLinkShortener(LinkShortener):
    """Returns a fixed short link and remembers what it shortened."""

    def __init__(self, short_url: str = "https://dos.short.gy/abc123") -> None:
        self.short_url = short_url
        self.long_urls: list[str] = []
        self.error: Exception | None = None

    async def shorten(self, long_url: str) -> str:
        if self.error:
            raise self.error
        self.long_urls.append(long_url)
        return self.short_url


class RecordingScheduler(FollowupScheduler):
    """Keeps scheduled jobs in a list."""

    def __init__(self) -> None:
        self.jobs: list[FollowupJob] = []
        self.error: Exception | None = None

    async def schedule(self, job: FollowupJob) -> str:
        if self.error:
            raise self.error
        self.jobs.append(job)
        return f"job-{len(self.jobs)}"


@pytest.fixture
def contacts():
    return FakeContactDirectory()


@pytest.fixture
def records():
    return FakeRecordStore()


@pytest.fixture
def shortener():
    return FakeLinkShortener()


@pytest.fixture
def scheduler():
    return RecordingScheduler()


@pytest.fixture
def ttl_store():
    return InMemoryTtlStore()


@pytest.fixture
def client(contacts, records, shortener, scheduler, ttl_store):
    """Create a test FastAPI client wired to the fake integrations."""
    from fastapi.testclient import TestClient

    from app.api import deps
    from app.infrastructure.kv_store import get_ttl_store
    from app.main import app

    app.dependency_overrides[deps.get_contact_directory] = lambda: contacts
    app.dependency_overrides[deps.get_record_store] = lambda: records
    app.dependency_overrides[deps.get_link_shortener] = lambda: shortener
    app.dependency_overrides[deps.get_followup_scheduler] = lambda: scheduler
    app.dependency_overrides[get_ttl_store] = lambda: ttl_store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
