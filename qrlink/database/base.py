"""Abstract base class for link record stores."""

from abc import ABC, abstractmethod
from typing import List

from ..models import LinkRecord


class LinkStoreBase(ABC):
    """Abstract base class for durable link record storage.

    Implementations assign record ids, raise ``NotFound`` for unknown ids and
    wrap backend failures in ``StoreUnavailable``.
    """

    @abstractmethod
    async def create(self, destination_url: str) -> LinkRecord:
        """Persist a new link record.

        Args:
            destination_url: Non-blank destination URL

        Returns:
            The created record with its assigned id and creation time
        """
        pass

    @abstractmethod
    async def list_links(self) -> List[LinkRecord]:
        """List all records, newest created first.

        Records with equal creation times are ordered later-inserted first.
        """
        pass

    @abstractmethod
    async def get_by_id(self, record_id: str) -> LinkRecord:
        """Get a record by id.

        Raises:
            NotFound: If no record has this id
        """
        pass

    @abstractmethod
    async def update(self, record_id: str, destination_url: str) -> LinkRecord:
        """Replace a record's destination URL.

        Returns:
            The updated record

        Raises:
            NotFound: If no record has this id
        """
        pass

    @abstractmethod
    async def delete(self, record_id: str) -> None:
        """Delete a record.

        Raises:
            NotFound: If no record has this id
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release store connections."""
        pass
