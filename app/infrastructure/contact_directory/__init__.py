"""Contact directory infrastructure."""

from app.infrastructure.contact_directory.base import ContactDirectory
from app.infrastructure.contact_directory.textmagic import TextMagicContactDirectory

__all__ = [
    "ContactDirectory",
    "TextMagicContactDirectory",
]
