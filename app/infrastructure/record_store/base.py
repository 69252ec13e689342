"""Base record store interface."""

from abc import ABC, abstractmethod
from typing import Any


class RecordStore(ABC):
    """Tables of records keyed by phone fingerprint."""

    @abstractmethod
    async def exists(self, table: str, fingerprint: str) -> bool:
        """Check whether a record with this fingerprint exists in a table.

        Args:
            table: Table name or ID
            fingerprint: Phone fingerprint stored in the record's hash field

        Returns:
            True if at least one matching record exists

        Raises:
            RecordStoreError: If the lookup fails
        """
        pass

    @abstractmethod
    async def create(self, table: str, fields: dict[str, Any]) -> None:
        """Create a single record.

        Args:
            table: Table name or ID
            fields: Record fields

        Raises:
            RecordStoreError: If the write fails
        """
        pass
