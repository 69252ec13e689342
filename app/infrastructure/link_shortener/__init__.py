"""Link shortener infrastructure."""

from app.infrastructure.link_shortener.base import LinkShortener
from app.infrastructure.link_shortener.shortio import ShortIoLinkShortener

__all__ = [
    "LinkShortener",
    "ShortIoLinkShortener",
]
