"""FastAPI application for the order resolution API."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from typing import Any, NoReturn

from fastapi import Body, Depends, FastAPI, Header, HTTPException, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pickup_order_service.auth.api_dependencies import get_api_key_from_request
from pickup_order_service.auth.api_key_validator import APIKeyValidator
from pickup_order_service.config import ServiceConfig
from pickup_order_service.errors import (
    CatalogUnavailableError,
    EmptyOrderError,
    OrderServiceError,
    UnresolvedItemsError,
)
from pickup_order_service.models.order_models import (
    CreateOrderResponse,
    MenuResponse,
    OrderRequest,
    OrderResponse,
)
from pickup_order_service.services.order_service import OrderService

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str
    environment: str
    catalog_loaded: bool
    configured: bool


def create_app(order_service: OrderService, config: ServiceConfig) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        order_service: Service resolving and submitting orders
        config: Service configuration

    Returns:
        Configured FastAPI application
    """

    @contextlib.asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        warm_task: asyncio.Task[None] | None = None
        if config.catalog_warm_interval_seconds > 0 and config.is_configured:
            warm_task = asyncio.create_task(
                order_service.catalog_cache.keep_warm(config.catalog_warm_interval_seconds)
            )
        try:
            yield
        finally:
            if warm_task is not None:
                warm_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await warm_task

    app = FastAPI(
        title="Pickup Order Service API",
        description="Resolves spoken pickup orders against the Square catalog",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.order_service = order_service
    app.state.config = config
    app.state.api_key_validator = (
        APIKeyValidator(api_keys=config.inbound_api_keys) if config.inbound_api_keys else None
    )

    if config.api_key_required and app.state.api_key_validator is None:
        logger.warning("Inbound API key required but none configured, all requests will be rejected")

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint.

        Returns:
            Service status, whether a catalog snapshot is loaded and whether
            Square credentials are configured
        """
        return HealthResponse(
            status="healthy",
            environment=config.environment,
            catalog_loaded=app.state.order_service.catalog_cache.current is not None,
            configured=config.is_configured,
        )

    def validate_api_key(
        x_api_key: str | None = Header(None),
        x_inbound_api_key: str | None = Header(None),
        xapi: str | None = Header(None),
        key: str | None = Query(None),
    ) -> str | None:
        """Dependency to validate the inbound API key."""
        return get_api_key_from_request(
            x_api_key=x_api_key,
            x_inbound_api_key=x_inbound_api_key,
            xapi=xapi,
            key=key,
            validator=app.state.api_key_validator,
            required=config.api_key_required,
        )

    def require_square_configured() -> None:
        if not config.is_configured:
            raise HTTPException(status_code=500, detail="Square credentials not configured")

    @app.get(
        "/api/items",
        response_model=MenuResponse,
        tags=["Catalog"],
        dependencies=[Depends(validate_api_key), Depends(require_square_configured)],
    )
    async def list_items() -> MenuResponse:
        """List every sellable variation of the current catalog, sorted by label."""
        try:
            menu: MenuResponse = await app.state.order_service.list_menu()
        except CatalogUnavailableError as e:
            _raise_http_error(e)
        return menu

    @app.post(
        "/api/orders/resolve",
        response_model=OrderResponse,
        response_model_exclude_none=True,
        tags=["Orders"],
        dependencies=[Depends(validate_api_key), Depends(require_square_configured)],
    )
    async def resolve_order(payload: Any = Body(None)) -> OrderResponse:
        """Resolve requested lines into catalog-valid line items.

        Returns:
            Line items plus the spoken confirmation

        Raises:
            HTTPException: 400 when nothing matched, 422 for unresolved items in
                strict mode, 503 when the catalog is unavailable
        """
        order_request = OrderRequest.model_validate(payload)
        try:
            resolved = await app.state.order_service.resolve_order(order_request)
        except OrderServiceError as e:
            _raise_http_error(e)
        response: OrderResponse = resolved.to_response()
        return response

    @app.post(
        "/api/create-order",
        response_model=CreateOrderResponse,
        response_model_exclude_none=True,
        tags=["Orders"],
        dependencies=[Depends(validate_api_key), Depends(require_square_configured)],
    )
    async def create_order(payload: Any = Body(None)) -> CreateOrderResponse:
        """Resolve an order and place it with Square for pickup.

        Raises:
            HTTPException: Same as resolve, plus 502 when Square rejects the order
        """
        order_request = OrderRequest.model_validate(payload)
        logger.info(f"Create order requested with {len(order_request.lines)} lines")

        try:
            created = await app.state.order_service.create_order(order_request)
        except OrderServiceError as e:
            _raise_http_error(e)

        if created is None:
            raise HTTPException(status_code=502, detail="Order backend rejected the order")

        response: CreateOrderResponse = created
        return response

    return app


def _raise_http_error(error: OrderServiceError) -> NoReturn:
    """Translate a service error into its HTTP response."""
    if isinstance(error, EmptyOrderError):
        raise HTTPException(status_code=400, detail=str(error)) from error
    if isinstance(error, UnresolvedItemsError):
        raise HTTPException(
            status_code=422,
            detail={"message": str(error), "unresolved": error.names},
        ) from error
    if isinstance(error, CatalogUnavailableError):
        raise HTTPException(status_code=503, detail=str(error)) from error
    raise HTTPException(status_code=500, detail=str(error)) from error
