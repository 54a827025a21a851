"""Redirect resolution for scanned payloads.

``RedirectResolver`` turns a payload into a normalized destination, using the
record store for id references. ``RedirectSession`` drives one visit through
``PARSING -> RESOLVED -> COUNTING_DOWN -> NAVIGATED`` (or ``ERROR``), with a
visible countdown, an independent navigation timer and a manual override.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from .common.url_builder import normalize_destination
from .common.validators import is_blank
from .database.base import LinkStoreBase
from .database.cache import RedisCache
from .errors import MissingPayload, NotFound, StoreUnavailable
from .models import PayloadStrategy, RedirectPayload
from .payload import PayloadCodec

REASON_MISSING_IDENTIFIER = "no identifying information present"
REASON_RECORD_NOT_FOUND = "record not found or removed"

DEFAULT_COUNTDOWN_SECONDS = 3
DEFAULT_TICK_INTERVAL = 1.0
DEFAULT_NAVIGATE_DELAY = 0.1


class ResolverState(str, Enum):
    PARSING = "parsing"
    RESOLVED = "resolved"
    COUNTING_DOWN = "counting_down"
    NAVIGATED = "navigated"
    ERROR = "error"


@dataclass(frozen=True)
class Resolution:
    """A resolved payload: how it resolved and where it leads."""

    strategy: PayloadStrategy
    destination: str


def error_reason(exc: Exception) -> str:
    """User-facing reason for a resolution failure."""
    if isinstance(exc, MissingPayload):
        return REASON_MISSING_IDENTIFIER
    return REASON_RECORD_NOT_FOUND


class RedirectResolver:
    """Resolve payloads to destinations."""

    def __init__(
        self,
        store: LinkStoreBase,
        codec: Optional[PayloadCodec] = None,
        cache: Optional[RedisCache] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.codec = codec or PayloadCodec()
        self.cache = cache
        self.logger = logger or logging.getLogger(__name__)

    async def resolve(self, payload: str) -> Resolution:
        """Resolve an encoded payload (URL or query string).

        Raises:
            MissingPayload: No recognized key, or a blank id
            NotFound: Referenced record does not exist
            StoreUnavailable: Record lookup failed
        """
        return await self.resolve_payload(self.codec.decode(payload))

    async def resolve_params(self, params) -> Resolution:
        """Resolve already-parsed query parameters (e.g. ``request.query_params``)."""
        return await self.resolve_payload(self.codec.decode_params(params))

    async def resolve_payload(self, payload: RedirectPayload) -> Resolution:
        if payload.strategy is PayloadStrategy.BY_ID:
            if is_blank(payload.value):
                raise MissingPayload("Blank record id")
            destination = await self._lookup(payload.value)
        else:
            if is_blank(payload.value):
                raise MissingPayload("Blank destination URL")
            destination = payload.value

        return Resolution(payload.strategy, normalize_destination(destination))

    async def _lookup(self, record_id: str) -> str:
        if self.cache:
            cached = await self.cache.get_destination(record_id)
            if cached:
                self.logger.debug(f"Cache hit for {record_id}")
                return cached

        record = await self.store.get_by_id(record_id)

        if self.cache:
            await self.cache.set_destination(record_id, record.destination_url)
        return record.destination_url


class RedirectSession:
    """One visit to the redirect endpoint.

    Two timers run after resolution: the visible countdown
    (``countdown_seconds`` ticks, ``tick_interval`` apart) and the navigation
    timer (``navigate_delay``). Whichever finishes first navigates; the
    countdown keeps its display role only. With ``single_timer`` the
    countdown alone drives navigation.

    Navigation happens at most once, through ``navigate(url)``, which is
    expected to replace the current location rather than push a history entry.
    ``teardown()`` cancels everything; nothing navigates afterwards.
    """

    def __init__(
        self,
        resolver: RedirectResolver,
        navigate: Callable[[str], Any],
        on_tick: Optional[Callable[[int], Any]] = None,
        countdown_seconds: int = DEFAULT_COUNTDOWN_SECONDS,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        navigate_delay: float = DEFAULT_NAVIGATE_DELAY,
        single_timer: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        self.resolver = resolver
        self.navigate = navigate
        self.on_tick = on_tick
        self.countdown_seconds = countdown_seconds
        self.tick_interval = tick_interval
        self.navigate_delay = navigate_delay
        self.single_timer = single_timer
        self.logger = logger or logging.getLogger(__name__)

        self.state = ResolverState.PARSING
        self.destination: Optional[str] = None
        self.strategy: Optional[PayloadStrategy] = None
        self.error: Optional[str] = None
        self.remaining = countdown_seconds
        self.navigated_by: Optional[str] = None

        self._timers: list = []
        self._torn_down = False
        self._done = asyncio.Event()
        self._navigate_error: Optional[Exception] = None

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    async def start(self, payload: str) -> ResolverState:
        """Parse and resolve the payload, then start the timers."""
        if self._torn_down or self.state is not ResolverState.PARSING:
            return self.state

        try:
            resolution = await self.resolver.resolve(payload)
        except (MissingPayload, NotFound, StoreUnavailable) as e:
            return self._fail(e)

        if self._torn_down:
            return self.state

        self.destination = resolution.destination
        self.strategy = resolution.strategy
        self.state = ResolverState.RESOLVED
        self.logger.debug(f"Resolved {resolution.strategy.value} payload to {self.destination}")

        self._start_timers()
        return self.state

    def navigate_now(self) -> bool:
        """Manual override. Returns False if navigation already happened or cannot."""
        return self._navigate("manual")

    def teardown(self) -> None:
        """Cancel all pending timers; no navigation happens after this."""
        if self._torn_down:
            return
        self._torn_down = True
        self._cancel_timers()
        self._done.set()

    async def wait(self) -> ResolverState:
        """Wait until the session navigates, fails or is torn down.

        Raises:
            Exception: Whatever the navigate callback raised from a timer
        """
        await self._done.wait()
        if self._navigate_error is not None:
            raise self._navigate_error
        return self.state

    def _fail(self, exc: Exception) -> ResolverState:
        self.state = ResolverState.ERROR
        self.error = error_reason(exc)
        self.logger.warning(f"Redirect failed: {self.error} ({exc})")
        self._done.set()
        return self.state

    def _start_timers(self) -> None:
        self.state = ResolverState.COUNTING_DOWN
        self._timers.append(asyncio.create_task(self._run_countdown()))
        if not self.single_timer:
            self._timers.append(asyncio.create_task(self._run_navigate_timer()))

    async def _run_countdown(self) -> None:
        while self.remaining > 0:
            await asyncio.sleep(self.tick_interval)
            self.remaining -= 1
            if self.on_tick:
                self.on_tick(self.remaining)
        self._navigate("countdown")

    async def _run_navigate_timer(self) -> None:
        await asyncio.sleep(self.navigate_delay)
        self._navigate("timer")

    def _navigate(self, trigger: str) -> bool:
        if self._torn_down or self.state not in (ResolverState.RESOLVED, ResolverState.COUNTING_DOWN):
            return False

        self.state = ResolverState.NAVIGATED
        self.navigated_by = trigger
        self._cancel_timers()
        self.logger.info(f"Navigating to {self.destination} ({trigger})")
        try:
            self.navigate(self.destination)
        except Exception as e:
            self.logger.error(f"Navigation to {self.destination} failed: {e}")
            if trigger == "manual":
                raise
            # Timer tasks have no caller; wait() re-raises it.
            self._navigate_error = e
        finally:
            self._done.set()
        return True

    def _cancel_timers(self) -> None:
        current = asyncio.current_task() if self._has_running_loop() else None
        for task in self._timers:
            if task is not current and not task.done():
                task.cancel()
        self._timers.clear()

    @staticmethod
    def _has_running_loop() -> bool:
        try:
            asyncio.get_running_loop()
            return True
        except RuntimeError:
            return False
