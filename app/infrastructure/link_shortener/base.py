"""Base link shortener interface."""

from abc import ABC, abstractmethod


class LinkShortener(ABC):
    """Mint short redirect URLs."""

    @abstractmethod
    async def shorten(self, long_url: str) -> str:
        """Create a short link redirecting to long_url.

        Raises:
            LinkShortenerError: If the link cannot be created
        """
        pass
