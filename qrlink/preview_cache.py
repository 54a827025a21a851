"""Session-local cache of rendered preview images."""

from typing import Dict, Optional

from .models import CodeImage


class PreviewCache:
    """Maps record id to the preview image last rendered for it.

    A preview is only valid for the exact payload it encodes. Payloads carry
    both the origin a viewer reached the service on and the destination, so a
    lookup with a different payload is a miss and drops the entry.
    """

    def __init__(self):
        self._entries: Dict[str, CodeImage] = {}

    def get(self, record_id: str, payload: str) -> Optional[CodeImage]:
        image = self._entries.get(record_id)
        if image is None:
            return None

        if image.text != payload:
            del self._entries[record_id]
            return None
        return image

    def put(self, record_id: str, image: CodeImage) -> None:
        """Store the preview for a record, replacing any previous one."""
        self._entries[record_id] = image

    def invalidate(self, record_id: str) -> bool:
        """Remove a record's preview. Returns False if none was cached."""
        return self._entries.pop(record_id, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, record_id: str) -> bool:
        return record_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
