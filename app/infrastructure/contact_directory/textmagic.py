"""TextMagic contact directory implementation."""

import logging
from typing import Any

import httpx

from app.core.exceptions import ContactDirectoryError
from app.core.phone import format_phone_for_directory
from app.infrastructure.contact_directory.base import ContactDirectory
from app.settings import settings

logger = logging.getLogger(__name__)

DUPLICATE_PHONE_MARKER = "already exists in your contacts"


class TextMagicContactDirectory(ContactDirectory):
    """TextMagic REST API v2 client for contacts and messages."""

    def __init__(
        self,
        username: str | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        list_id: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize TextMagic client.

        Args:
            username: TextMagic account username (defaults to settings)
            api_key: TextMagic API key (defaults to settings)
            base_url: API base URL (defaults to settings)
            list_id: List new contacts are added to (defaults to settings)
            transport: Optional httpx transport, used by tests
        """
        self.username = username or settings.textmagic_username
        self.api_key = api_key or settings.textmagic_api_key
        self.base_url = base_url or settings.textmagic_base_url
        self.list_id = list_id or settings.textmagic_contact_list_id
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        """Create HTTP client with basic auth."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            auth=(self.username, self.api_key),
            headers={"Content-Type": "application/json"},
            timeout=settings.http_timeout_seconds,
            transport=self._transport,
        )

    async def resolve_or_create(self, phone: str, first_name: str, last_name: str) -> str:
        """Search for the contact by formatted phone, creating it when missing.

        A create that races with another create for the same phone comes back
        as a 400 duplicate-phone error; the contact is then searched again.
        """
        formatted = format_phone_for_directory(phone)
        logger.debug(f"Resolving TextMagic contact for {formatted}")

        try:
            async with self._get_client() as client:
                resources = await self._search(client, formatted)
                if resources:
                    contact_id = str(resources[0]["id"])
                    logger.info(f"Found existing TextMagic contact with ID: {contact_id}")
                    return contact_id

                response = await client.post(
                    "/contacts",
                    json={
                        "phone": formatted,
                        "firstName": first_name,
                        "lastName": last_name,
                        "lists": self.list_id,
                    },
                )

                if response.status_code == 400 and self._is_duplicate_phone(response):
                    resources = await self._search(client, formatted)
                    if not resources:
                        raise ContactDirectoryError(f"Contact with phone {formatted} not found")
                    contact_id = str(resources[0]["id"])
                    logger.info(f"Found existing TextMagic contact with ID: {contact_id}")
                    return contact_id

                if response.status_code != 201:
                    raise ContactDirectoryError(f"Error from TextMagic API: {response.text}")

                contact_id = str(response.json()["id"])
        except httpx.HTTPError as e:
            raise ContactDirectoryError(f"TextMagic contact request failed: {e}") from e
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ContactDirectoryError(f"Unexpected TextMagic response: {e}") from e

        logger.info(f"Created new TextMagic contact with ID: {contact_id}")
        return contact_id

    async def send_message(self, contact_id: str, text: str) -> None:
        """Send a message to a single contact."""
        try:
            async with self._get_client() as client:
                response = await client.post(
                    "/messages",
                    json={"contacts": contact_id, "text": text},
                )
        except httpx.HTTPError as e:
            raise ContactDirectoryError(f"TextMagic send failed: {e}") from e

        if response.status_code not in (200, 201):
            raise ContactDirectoryError(f"Error from TextMagic API: {response.text}")

        logger.info(f"Successfully sent message to contact ID: {contact_id}")

    async def _search(self, client: httpx.AsyncClient, phone: str) -> list[dict[str, Any]]:
        """Return matching contact resources for a formatted phone."""
        response = await client.get("/contacts/search", params={"query": phone})
        if response.status_code != 200:
            raise ContactDirectoryError(f"Error from TextMagic API: {response.text}")
        return response.json().get("resources") or []

    @staticmethod
    def _is_duplicate_phone(response: httpx.Response) -> bool:
        """Check whether a 400 response is the duplicate-phone validation error."""
        try:
            body = response.json()
        except ValueError:
            return False
        if not isinstance(body, dict):
            return False
        errors = body.get("errors") or {}
        fields = errors.get("fields") or {}
        return any(DUPLICATE_PHONE_MARKER in message for message in fields.get("phone") or [])
