"""In-process link record store."""

import itertools
import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from ..common.validators import clean_destination
from ..errors import NotFound
from ..models import LinkRecord
from .base import LinkStoreBase


class InMemoryLinkStore(LinkStoreBase):
    """Dict-backed store for development and tests. Not durable."""

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize in-memory store.

        Args:
            clock: Optional time source for created_at (defaults to UTC now)
            logger: Optional logger instance
        """
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = logger or logging.getLogger(__name__)
        self._records: Dict[str, Tuple[int, LinkRecord]] = {}
        self._seq = itertools.count()

    async def create(self, destination_url: str) -> LinkRecord:
        record = LinkRecord(
            id=str(uuid.uuid4()),
            destination_url=clean_destination(destination_url),
            created_at=self.clock(),
        )
        self._records[record.id] = (next(self._seq), record)
        self.logger.debug(f"Stored link record {record.id}")
        return replace(record)

    async def list_links(self) -> List[LinkRecord]:
        rows = sorted(
            self._records.values(),
            key=lambda row: (row[1].created_at, row[0]),
            reverse=True,
        )
        return [replace(record) for _, record in rows]

    async def get_by_id(self, record_id: str) -> LinkRecord:
        row = self._records.get(record_id)
        if row is None:
            raise NotFound(record_id)
        return replace(row[1])

    async def update(self, record_id: str, destination_url: str) -> LinkRecord:
        destination_url = clean_destination(destination_url)
        row = self._records.get(record_id)
        if row is None:
            raise NotFound(record_id)

        seq, record = row
        updated = replace(record, destination_url=destination_url)
        self._records[record_id] = (seq, updated)
        return replace(updated)

    async def delete(self, record_id: str) -> None:
        if self._records.pop(record_id, None) is None:
            raise NotFound(record_id)

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        pass

    def __len__(self) -> int:
        return len(self._records)
