"""Assemble store, cache, lifecycle manager and resolver from configuration."""

import logging
from dataclasses import dataclass
from typing import Optional

from .database.base import LinkStoreBase
from .database.cache import RedisCache
from .database.memory import InMemoryLinkStore
from .database.postgres import PostgresLinkStore
from .encoder import QRCodeEncoder
from .lifecycle import LinkLifecycleManager
from .payload import PayloadCodec
from .resolver import RedirectResolver


@dataclass
class Services:
    store: LinkStoreBase
    cache: Optional[RedisCache]
    codec: PayloadCodec
    manager: LinkLifecycleManager
    resolver: RedirectResolver

    async def close(self) -> None:
        await self.manager.close()


def build_store(config, logger: logging.Logger) -> LinkStoreBase:
    if config.store_backend == "memory":
        logger.warning("Using in-memory record store; records are lost on restart")
        return InMemoryLinkStore(logger=logger)

    logger.info("Using PostgreSQL record store")
    return PostgresLinkStore(
        dsn=config.database_url,
        create_tables=config.database_create_tables,
        logger=logger,
    )


async def build_services(
    config,
    logger: logging.Logger,
    store: Optional[LinkStoreBase] = None,
) -> Services:
    """Build the service graph; connects the Redis cache when configured."""
    store = store or build_store(config, logger)

    cache = None
    if config.redis_url:
        logger.info("Connecting to Redis cache")
        cache = RedisCache(
            redis_url=config.redis_url,
            ttl_seconds=config.cache_ttl_seconds,
            logger=logger,
        )
        await cache.connect()
    else:
        logger.info("Redis caching disabled")

    codec = PayloadCodec(
        base_url=config.base_url,
        redirect_path=config.redirect_path,
        id_param=config.id_param,
        url_param=config.url_param,
        logger=logger,
    )
    manager = LinkLifecycleManager(
        store=store,
        encoder=QRCodeEncoder(logger=logger),
        codec=codec,
        destination_cache=cache,
        code_options=config.code_options,
        preview_options=config.preview_options,
        logger=logger,
    )
    resolver = RedirectResolver(store=store, codec=codec, cache=cache, logger=logger)

    return Services(store=store, cache=cache, codec=codec, manager=manager, resolver=resolver)
