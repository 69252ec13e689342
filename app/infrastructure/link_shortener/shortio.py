"""Short.io link shortener implementation."""

import logging

import httpx

from app.core.exceptions import LinkShortenerError
from app.infrastructure.link_shortener.base import LinkShortener
from app.settings import settings

logger = logging.getLogger(__name__)


class ShortIoLinkShortener(LinkShortener):
    """Short.io links API client."""

    def __init__(
        self,
        api_key: str | None = None,
        domain: str | None = None,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Short.io client.

        Args:
            api_key: Short.io secret API key (defaults to settings)
            domain: Short link domain (defaults to settings)
            base_url: API base URL (defaults to settings)
            transport: Optional httpx transport, used by tests
        """
        self.api_key = api_key or settings.shortio_api_key
        self.domain = domain or settings.shortio_domain
        self.base_url = base_url or settings.shortio_base_url
        self._transport = transport

    async def shorten(self, long_url: str) -> str:
        """Create a short link on the configured domain."""
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers={
                    "Authorization": self.api_key,
                    "Content-Type": "application/json",
                },
                timeout=settings.http_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    "/links",
                    json={"originalURL": long_url, "domain": self.domain},
                )
            if response.status_code not in (200, 201):
                raise LinkShortenerError(f"Error from Short.io API: {response.text}")
            short_url = response.json().get("shortURL")
        except httpx.HTTPError as e:
            raise LinkShortenerError(f"Short.io request failed: {e}") from e
        except (AttributeError, ValueError) as e:
            raise LinkShortenerError(f"Unexpected Short.io response: {e}") from e

        if not short_url:
            raise LinkShortenerError("Short.io response has no shortURL")

        logger.info(f"Created short link: {long_url} -> {short_url}")
        return short_url
