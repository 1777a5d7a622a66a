"""Custom metrics for the order resolution service."""

from opentelemetry import metrics

meter = metrics.get_meter("pickup-order-svc")

catalog_refresh_counter = meter.create_counter(
    name="catalog_refresh_total",
    description="Total number of completed catalog refreshes",
    unit="1",
)

catalog_refresh_failure_counter = meter.create_counter(
    name="catalog_refresh_failure_total",
    description="Total number of failed catalog refreshes by error type",
    unit="1",
)

catalog_refresh_duration_histogram = meter.create_histogram(
    name="catalog_refresh_duration_seconds",
    description="Duration of the paginated catalog fetch and snapshot build",
    unit="s",
)

order_lines_counter = meter.create_counter(
    name="order_lines_total",
    description="Requested order lines by outcome (resolved or dropped)",
    unit="1",
)

order_rejected_counter = meter.create_counter(
    name="order_rejected_total",
    description="Orders rejected by reason",
    unit="1",
)

modifier_demoted_counter = meter.create_counter(
    name="modifier_demoted_total",
    description="Modifier phrases that matched no catalog modifier and became notes",
    unit="1",
)


def record_catalog_refresh(duration_seconds: float, variation_count: int) -> None:
    """Record a completed catalog refresh.

    Args:
        duration_seconds: Time spent fetching and building the snapshot
        variation_count: Sellable variations in the new snapshot
    """
    catalog_refresh_counter.add(1)
    catalog_refresh_duration_histogram.record(
        duration_seconds, {"empty": variation_count == 0}
    )


def record_catalog_refresh_failure(error_type: str) -> None:
    """Record a failed catalog refresh.

    Args:
        error_type: Type of error that occurred
    """
    catalog_refresh_failure_counter.add(1, {"error_type": error_type})


def record_order_lines(resolved: int, dropped: int) -> None:
    """Record per-line outcomes for one order build."""
    if resolved:
        order_lines_counter.add(resolved, {"outcome": "resolved"})
    if dropped:
        order_lines_counter.add(dropped, {"outcome": "dropped"})


def record_order_rejected(reason: str) -> None:
    """Record an order rejected as a whole.

    Args:
        reason: e.g. "empty_order", "unresolved_items", "catalog_unavailable"
    """
    order_rejected_counter.add(1, {"reason": reason})


def record_modifiers_demoted(count: int) -> None:
    if count:
        modifier_demoted_counter.add(count)
