"""Airtable record store implementation."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from app.core.exceptions import RecordStoreError
from app.infrastructure.record_store.base import RecordStore
from app.settings import settings

logger = logging.getLogger(__name__)


class AirtableRecordStore(RecordStore):
    """Airtable Web API client scoped to one base."""

    def __init__(
        self,
        api_key: str | None = None,
        base_id: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Airtable client.

        Args:
            api_key: Airtable API key / personal access token (defaults to settings)
            base_id: Airtable base ID (defaults to settings)
            base_url: API base URL (defaults to settings)
            transport: Optional httpx transport, used by tests
        """
        self.api_key = api_key or settings.airtable_api_key
        self.base_id = base_id or settings.airtable_base_id
        self.base_url = base_url or settings.airtable_base_url
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        """Create HTTP client with bearer auth."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=settings.http_timeout_seconds,
            transport=self._transport,
        )

    def _table_path(self, table: str) -> str:
        return f"/{self.base_id}/{quote(table, safe='')}"

    async def exists(self, table: str, fingerprint: str) -> bool:
        """Filter the table on its hash field."""
        try:
            async with self._get_client() as client:
                response = await client.get(
                    self._table_path(table),
                    params={"filterByFormula": f'{{hash}}="{fingerprint}"'},
                )
            if response.status_code != 200:
                raise RecordStoreError(f"Error from Airtable API: {response.text}")
            records = response.json().get("records") or []
        except httpx.HTTPError as e:
            raise RecordStoreError(f"Airtable lookup failed: {e}") from e
        except (AttributeError, ValueError) as e:
            raise RecordStoreError(f"Unexpected Airtable response: {e}") from e

        exists = len(records) > 0
        logger.info(
            f"Airtable record check in table {table}: exists={exists}",
            extra={"fingerprint": fingerprint, "table": table},
        )
        return exists

    async def create(self, table: str, fields: dict[str, Any]) -> None:
        """Create one record via the batch endpoint."""
        try:
            async with self._get_client() as client:
                response = await client.post(
                    self._table_path(table),
                    json={"records": [{"fields": fields}]},
                )
        except httpx.HTTPError as e:
            raise RecordStoreError(f"Airtable create failed: {e}") from e

        if response.status_code != 200:
            raise RecordStoreError(f"Error from Airtable API: {response.text}")

        logger.info(f"Successfully created record in Airtable table: {table}")
