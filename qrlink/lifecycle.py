"""Link lifecycle: create, list, edit and delete link records.

Keeps the record store, code rendering and the session preview cache
consistent with each other.
"""

import logging
from typing import Dict, List, Optional

from .common.validators import clean_destination
from .database.base import LinkStoreBase
from .database.cache import RedisCache
from .encoder import CodeEncoderBase
from .errors import EncodeFailure, StoreUnavailable
from .models import CodeImage, CodeOptions, CreationResult, LinkRecord
from .payload import PayloadCodec
from .preview_cache import PreviewCache

GENERATOR_OPTIONS = CodeOptions(pixel_size=300, margin=2)
PREVIEW_OPTIONS = CodeOptions(pixel_size=200, margin=1)


class LinkLifecycleManager:
    """Coordinates record persistence with code rendering."""

    def __init__(
        self,
        store: LinkStoreBase,
        encoder: CodeEncoderBase,
        codec: Optional[PayloadCodec] = None,
        preview_cache: Optional[PreviewCache] = None,
        destination_cache: Optional[RedisCache] = None,
        code_options: CodeOptions = GENERATOR_OPTIONS,
        preview_options: CodeOptions = PREVIEW_OPTIONS,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize lifecycle manager.

        Args:
            store: Record store
            encoder: Code image encoder
            codec: Payload codec (defaults to a localhost codec)
            preview_cache: Session preview cache (a fresh one if omitted)
            destination_cache: Optional Redis cache used by id-based resolution
            code_options: Rendering options for newly generated codes
            preview_options: Rendering options for dashboard previews
            logger: Optional logger
        """
        self.store = store
        self.encoder = encoder
        self.codec = codec or PayloadCodec()
        self.preview_cache = preview_cache if preview_cache is not None else PreviewCache()
        self.destination_cache = destination_cache
        self.code_options = code_options
        self.preview_options = preview_options
        self.logger = logger or logging.getLogger(__name__)

    async def create(
        self,
        destination_url: str,
        codec: Optional[PayloadCodec] = None,
    ) -> CreationResult:
        """Render a code for a destination and persist its record.

        The code is rendered first. A store failure after a successful render
        is logged and reported on the result instead of raised.

        Args:
            destination_url: Destination the code should lead to
            codec: Optional codec override (e.g. bound to the request origin)

        Raises:
            InvalidDestination: If destination_url is blank (no store call made)
            EncodeFailure: If rendering fails (nothing is persisted)
        """
        destination_url = clean_destination(destination_url)
        codec = codec or self.codec

        encoded_payload = codec.encode_inline(destination_url)
        self.logger.debug(f"Generated payload {encoded_payload} for {destination_url}")

        code_image = await self.encoder.render(encoded_payload, self.code_options)
        result = CreationResult(encoded_payload=encoded_payload, code_image=code_image)

        try:
            result.record = await self.store.create(destination_url)
        except StoreUnavailable as e:
            self.logger.error(f"Failed to save link record for {destination_url}: {e}")
            result.persist_error = str(e)
            return result

        self.logger.info(f"Created link record {result.record.id} -> {destination_url}")
        return result

    async def list(self) -> List[LinkRecord]:
        """All records, newest created first."""
        return await self.store.list_links()

    async def get(self, record_id: str) -> LinkRecord:
        return await self.store.get_by_id(record_id)

    async def edit(self, record_id: str, new_destination_url: str) -> LinkRecord:
        """Replace a record's destination and invalidate its cached views.

        The preview is not re-rendered here; the next preview access renders
        it from the new destination.

        Raises:
            InvalidDestination: If the new destination is blank (no store call made)
            NotFound: If the record does not exist
        """
        new_destination_url = clean_destination(new_destination_url)

        record = await self.store.update(record_id, new_destination_url)
        await self._invalidate(record_id)

        self.logger.info(f"Updated link record {record_id} -> {new_destination_url}")
        return record

    async def delete(self, record_id: str) -> None:
        """Delete a record and its cached views.

        Raises:
            NotFound: If the record does not exist
        """
        await self.store.delete(record_id)
        await self._invalidate(record_id)

        self.logger.info(f"Deleted link record {record_id}")

    async def get_or_render_preview(
        self,
        record: LinkRecord,
        codec: Optional[PayloadCodec] = None,
    ) -> CodeImage:
        """Cached preview for a record, rendering and caching it on a miss.

        The cached image is reused only if it encodes the same payload this
        codec produces for the record's current destination.
        """
        payload = (codec or self.codec).encode_inline(record.destination_url)

        image = self.preview_cache.get(record.id, payload)
        if image is not None:
            self.logger.debug(f"Preview cache hit for {record.id}")
            return image

        image = await self.encoder.render(payload, self.preview_options)
        self.preview_cache.put(record.id, image)
        return image

    async def render_download(
        self,
        record: LinkRecord,
        codec: Optional[PayloadCodec] = None,
    ) -> CodeImage:
        """Full-size code for a record, rendered with the generator options.

        Never cached; downloads must not reuse the smaller preview.
        """
        payload = (codec or self.codec).encode_inline(record.destination_url)
        return await self.encoder.render(payload, self.code_options)

    async def previews_for(
        self,
        records: List[LinkRecord],
        codec: Optional[PayloadCodec] = None,
    ) -> Dict[str, CodeImage]:
        """Previews for many records; records whose render fails are skipped."""
        previews = {}
        for record in records:
            try:
                previews[record.id] = await self.get_or_render_preview(record, codec)
            except EncodeFailure as e:
                self.logger.error(f"Error generating preview for {record.id}: {e}")
        return previews

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with store, cache and overall status
        """
        store_healthy = await self.store.health_check()

        cache_healthy = True
        if self.destination_cache and self.destination_cache.enabled:
            cache_healthy = await self.destination_cache.ping()

        return {
            "database": store_healthy,
            "cache": cache_healthy,
            "overall": store_healthy and cache_healthy,
        }

    async def close(self) -> None:
        """Close store and cache connections."""
        await self.store.close()
        if self.destination_cache:
            await self.destination_cache.close()

    async def _invalidate(self, record_id: str) -> None:
        self.preview_cache.invalidate(record_id)
        if self.destination_cache:
            await self.destination_cache.invalidate(record_id)
