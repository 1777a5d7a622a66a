"""Catalog snapshot cache with bounded staleness and request coalescing."""

import asyncio
import logging
import time
from collections.abc import Callable

from pickup_order_service.errors import CatalogUnavailableError
from pickup_order_service.models.catalog_models import CatalogSnapshot
from pickup_order_service.observability.decorators import traced
from pickup_order_service.observability.metrics import (
    record_catalog_refresh,
    record_catalog_refresh_failure,
)
from pickup_order_service.services.catalog_client import SquareCatalogClient
from pickup_order_service.services.catalog_snapshot import build_catalog_snapshot

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


class CatalogCache:
    """Owns the current catalog snapshot and its refresh lifecycle.

    Lifecycle: empty -> populated -> refreshing -> populated. Snapshots are
    replaced wholesale, so readers only ever see a complete snapshot. While a
    refresh is in flight every caller awaits the same pending task, which
    guarantees at most one upstream fetch sequence at a time.
    """

    def __init__(
        self,
        catalog_client: SquareCatalogClient,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize an empty cache.

        Args:
            catalog_client: Collaborator that fetches all catalog pages
            ttl_seconds: Maximum snapshot age served without refreshing
            clock: Monotonic clock, injectable for tests
        """
        self.catalog_client = catalog_client
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._snapshot: CatalogSnapshot | None = None
        self._refresh_task: asyncio.Task[CatalogSnapshot] | None = None
        # A snapshot is stale once invalidate() moves past the generation it was fetched under
        self._generation = 0
        self._snapshot_generation = 0

    @property
    def current(self) -> CatalogSnapshot | None:
        """The last complete snapshot, possibly stale, or None before the first fill."""
        return self._snapshot

    @property
    def is_stale(self) -> bool:
        if self._snapshot is None or self._snapshot_generation != self._generation:
            return True
        return self.clock() - self._snapshot.built_at >= self.ttl_seconds

    @property
    def refresh_in_flight(self) -> bool:
        return self._refresh_task is not None

    def invalidate(self) -> None:
        """Force the next get() to refresh; the current snapshot stays readable.

        A refresh already in flight may have fetched before this call, so its
        result is served to its waiters but still counts as stale.
        """
        self._generation += 1

    async def get(self) -> CatalogSnapshot:
        """Return a snapshot no older than the TTL, refreshing if needed.

        Raises:
            CatalogUnavailableError: If the refresh this call waited on failed
        """
        if not self.is_stale and self._snapshot is not None:
            return self._snapshot

        if self._refresh_task is None:
            self._refresh_task = asyncio.create_task(self._refresh(self._generation))
        else:
            logger.debug("Joining in-flight catalog refresh")

        # Shield so one cancelled caller does not abort the refresh for the others
        return await asyncio.shield(self._refresh_task)

    @traced("catalog_refresh")
    async def _refresh(self, generation: int) -> CatalogSnapshot:
        started = self.clock()
        try:
            objects = await self.catalog_client.fetch_all_objects()
            if objects is None:
                raise CatalogUnavailableError("Catalog fetch failed")
            snapshot = build_catalog_snapshot(objects, built_at=self.clock())
        except CatalogUnavailableError:
            record_catalog_refresh_failure("fetch_failed")
            logger.error("Catalog refresh failed, keeping previous snapshot")
            raise
        except Exception as e:
            record_catalog_refresh_failure(type(e).__name__)
            logger.exception(f"Catalog refresh failed unexpectedly: {e}")
            raise CatalogUnavailableError(f"Catalog refresh failed: {e}") from e
        else:
            self._snapshot = snapshot
            self._snapshot_generation = generation
            record_catalog_refresh(self.clock() - started, len(snapshot.variations))
            logger.info(f"Catalog snapshot refreshed with {len(snapshot.variations)} variations")
            return snapshot
        finally:
            self._refresh_task = None

    async def keep_warm(self, interval_seconds: float) -> None:
        """Call get() on a fixed interval so real callers rarely wait on a fetch.

        Runs until cancelled. Failures are logged and retried next interval.
        """
        logger.info(f"Catalog warm-up loop started with {interval_seconds}s interval")
        while True:
            try:
                await self.get()
            except CatalogUnavailableError as e:
                logger.warning(f"Catalog warm-up failed: {e}")
            await asyncio.sleep(interval_seconds)
