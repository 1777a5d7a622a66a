"""Exception hierarchy for order resolution.

Per-line and per-modifier problems are recovered locally (dropped lines,
demoted notes). Only the conditions below reach the service boundary.
"""


class OrderServiceError(Exception):
    """Base class for errors surfaced by the order resolution service."""


class CatalogUnavailableError(OrderServiceError):
    """The catalog refresh sequence failed and no snapshot could be produced."""


class OrderResolutionError(OrderServiceError):
    """An order could not be turned into catalog-valid line items."""


class EmptyOrderError(OrderResolutionError):
    """None of the requested lines matched the catalog."""

    def __init__(self, message: str = "No valid line items matched the catalog") -> None:
        super().__init__(message)


class UnresolvedItemsError(OrderResolutionError):
    """Strict mode: at least one requested line matched nothing.

    Attributes:
        names: Raw names (or variation ids) of the lines that failed to match
    """

    def __init__(self, names: list[str]) -> None:
        self.names = names
        super().__init__(f"Unresolved items: {', '.join(names)}")
