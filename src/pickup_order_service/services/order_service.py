"""Order service orchestrating catalog access, resolution and submission."""

import logging
from dataclasses import dataclass

from pickup_order_service.adapters.base_adapter import OrderBackendAdapter
from pickup_order_service.errors import CatalogUnavailableError
from pickup_order_service.models.catalog_models import CatalogSnapshot
from pickup_order_service.models.order_models import (
    CreateOrderResponse,
    MenuResponse,
    OrderRequest,
    OrderResponse,
    RequestedLine,
    ResolvedLine,
)
from pickup_order_service.observability.decorators import traced
from pickup_order_service.observability.metrics import record_order_rejected
from pickup_order_service.services.catalog_cache import CatalogCache
from pickup_order_service.services.confirmation import DEFAULT_CUSTOMER_NAME, compose_confirmation
from pickup_order_service.services.order_builder import OrderBuilder

logger = logging.getLogger(__name__)


@dataclass
class ResolvedOrder:
    """Resolved lines for one order plus the confirmation rendered from them."""

    lines: list[ResolvedLine]
    spoken_confirmation: str

    def to_response(self) -> OrderResponse:
        return OrderResponse(
            line_items=[line.to_line_item() for line in self.lines],
            spoken_confirmation=self.spoken_confirmation,
        )


class OrderService:
    """Service for turning loosely structured order requests into orders.

    This service fetches one catalog snapshot per order, resolves every line
    against it, renders the spoken confirmation and, when asked, submits the
    order to the backend.
    """

    def __init__(
        self,
        catalog_cache: CatalogCache,
        order_builder: OrderBuilder,
        order_adapter: OrderBackendAdapter,
        serve_stale_catalog: bool = False,
    ) -> None:
        """Initialize the OrderService.

        Args:
            catalog_cache: Source of catalog snapshots
            order_builder: Resolves requested lines
            order_adapter: Backend that accepts resolved orders
            serve_stale_catalog: Use a stale snapshot if a refresh fails
        """
        self.catalog_cache = catalog_cache
        self.order_builder = order_builder
        self.order_adapter = order_adapter
        self.serve_stale_catalog = serve_stale_catalog

    async def get_snapshot(self) -> CatalogSnapshot:
        """Get the catalog snapshot for one request.

        Raises:
            CatalogUnavailableError: If no usable snapshot exists
        """
        try:
            return await self.catalog_cache.get()
        except CatalogUnavailableError:
            stale = self.catalog_cache.current
            if self.serve_stale_catalog and stale is not None:
                logger.warning("Catalog refresh failed, resolving against stale snapshot")
                return stale
            record_order_rejected("catalog_unavailable")
            raise

    async def list_menu(self) -> MenuResponse:
        snapshot = await self.get_snapshot()
        return MenuResponse(items=snapshot.menu_entries())

    @traced("resolve_order")
    async def resolve_order(self, request: OrderRequest) -> ResolvedOrder:
        """Resolve an order request against a single catalog snapshot.

        Args:
            request: Validated order request

        Returns:
            ResolvedOrder with catalog-valid lines and a confirmation sentence

        Raises:
            CatalogUnavailableError: If the catalog could not be loaded
            EmptyOrderError: If no line matched the catalog
            UnresolvedItemsError: In strict mode, if any line did not match
        """
        snapshot = await self.get_snapshot()
        requested = [RequestedLine.from_request(line) for line in request.lines]

        lines = self.order_builder.build_order(requested, snapshot)
        confirmation = compose_confirmation(
            lines,
            customer_name=request.customer_name,
            pickup_time=request.scheduled_pickup_time,
        )

        logger.info(f"Resolved {len(lines)} of {len(requested)} requested lines")
        return ResolvedOrder(lines=lines, spoken_confirmation=confirmation)

    async def create_order(self, request: OrderRequest) -> CreateOrderResponse | None:
        """Resolve an order and submit it to the backend.

        A rejected submission invalidates the catalog cache so the next
        request resolves against a fresh snapshot.

        Returns:
            CreateOrderResponse, or None if the backend rejected the order

        Raises:
            Same as resolve_order
        """
        resolved = await self.resolve_order(request)

        payload = self.order_adapter.format_order(
            resolved.lines,
            customer_name=request.customer_name or DEFAULT_CUSTOMER_NAME,
            customer_phone=request.customer_phone,
            order_note=request.notes,
            pickup_at=request.scheduled_pickup_time,
        )
        order_id = await self.order_adapter.submit_order(payload)
        if order_id is None:
            logger.error(f"{self.order_adapter.backend_name} rejected the resolved order")
            # A deleted or repriced variation also shows up as a rejection
            self.catalog_cache.invalidate()
            return None

        response = resolved.to_response()
        return CreateOrderResponse(
            order_id=order_id,
            line_items=response.line_items,
            spoken_confirmation=response.spoken_confirmation,
        )
