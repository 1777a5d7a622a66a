"""Base adapter for order backends.

Resolved orders are handed to a backend through this interface. Adapters use
simple return values (None) for expected failures rather than raising
exceptions, and the service layer decides how to surface them.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from pickup_order_service.models.order_models import ResolvedLine


class OrderBackendAdapter(ABC):
    """Abstract base class for order backend adapters."""

    def __init__(self, backend_name: str) -> None:
        """Initialize the adapter.

        Args:
            backend_name: Name of the order backend (e.g., 'square')
        """
        self.backend_name = backend_name

    @abstractmethod
    def format_order(
        self,
        lines: Sequence[ResolvedLine],
        customer_name: str,
        customer_phone: str | None = None,
        order_note: str | None = None,
        pickup_at: str | None = None,
    ) -> dict:
        """Transform resolved lines into the backend's order payload.

        Args:
            lines: Resolved, catalog-valid lines
            customer_name: Pickup recipient display name
            customer_phone: Pickup recipient phone number
            order_note: Order-level note
            pickup_at: Scheduled pickup time, ASAP when None

        Returns:
            dict: Backend-specific order payload
        """

    @abstractmethod
    async def submit_order(self, payload: dict) -> str | None:
        """Submit a formatted order.

        Args:
            payload: Order payload from format_order

        Returns:
            str: Backend order id, or None if submission failed
        """
