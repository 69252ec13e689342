"""Base contact directory interface."""

from abc import ABC, abstractmethod


class ContactDirectory(ABC):
    """Resolve contacts by phone and send them text messages."""

    @abstractmethod
    async def resolve_or_create(self, phone: str, first_name: str, last_name: str) -> str:
        """Find the contact for a phone number, creating it if absent.

        Implementations must not create a second contact for a phone that
        already has one.

        Args:
            phone: Phone number as submitted
            first_name: Contact first name
            last_name: Contact last name

        Returns:
            Provider-assigned contact ID

        Raises:
            ContactDirectoryError: If the lookup or creation fails
        """
        pass

    @abstractmethod
    async def send_message(self, contact_id: str, text: str) -> None:
        """Send a text message to a contact.

        Args:
            contact_id: Provider-assigned contact ID
            text: Message body

        Raises:
            ContactDirectoryError: If the send fails
        """
        pass
