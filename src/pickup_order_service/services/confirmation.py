"""Renders resolved order lines into a spoken confirmation sentence.

Pure functions: nothing here touches the catalog or the network, everything
needed is already carried by the resolved lines.
"""

from collections.abc import Sequence

from pickup_order_service.models.order_models import ResolvedLine

NUMBER_WORDS = ("zero", "one", "two", "three", "four", "five", "six", "seven", "eight", "nine", "ten")

DEFAULT_CUSTOMER_NAME = "Guest"


def spell_quantity(quantity: int) -> str:
    """Spell 0-10 as words, anything else as a numeral."""
    if 0 <= quantity < len(NUMBER_WORDS):
        return NUMBER_WORDS[quantity]
    return str(quantity)


def join_natural(parts: Sequence[str]) -> str:
    """Join as "a", "a and b", or "a, b, and c"."""
    parts = [p for p in parts if p]
    if not parts:
        return ""
    if len(parts) == 1:
        return parts[0]
    if len(parts) == 2:
        return f"{parts[0]} and {parts[1]}"
    return f"{', '.join(parts[:-1])}, and {parts[-1]}"


def render_variation(item_name: str, variation_name: str) -> str:
    """Put the variation qualifier in front of the item: "Soda - Large" -> "large soda"."""
    return " ".join(f"{variation_name} {item_name}".lower().split())


def render_line(
    quantity: int,
    item_name: str,
    variation_name: str,
    included_names: Sequence[str] = (),
    excluded_names: Sequence[str] = (),
    demoted_phrases: Sequence[str] = (),
) -> str:
    fragment = f"{spell_quantity(quantity)} {render_variation(item_name, variation_name)}"

    if included_names:
        fragment += f" with {join_natural([n.lower() for n in included_names])}"

    if excluded_names:
        joined = join_natural([n.lower() for n in excluded_names])
        fragment += f", no {joined}" if included_names else f" with no {joined}"

    if demoted_phrases:
        fragment += f", {join_natural([p.lower() for p in demoted_phrases])}"

    return fragment


def render_resolved_line(line: ResolvedLine) -> str:
    """Render one line as read back to the customer, e.g. "two regular burger with cheese"."""
    return render_line(
        line.quantity,
        line.item_name,
        line.variation_name,
        line.included_names,
        line.excluded_names,
        line.demoted_phrases,
    )


def compose_confirmation(
    lines: Sequence[ResolvedLine],
    customer_name: str | None = None,
    pickup_time: str | None = None,
) -> str:
    """Compose the confirmation read back to the customer.

    Args:
        lines: Resolved lines in order
        customer_name: Name to greet, "Guest" when missing
        pickup_time: Scheduled pickup time to mention, if any

    Returns:
        e.g. "Thanks Sam! I have one large soda. We'll have it ready for pickup shortly."
    """
    name = (customer_name or "").strip() or DEFAULT_CUSTOMER_NAME
    fragments = join_natural([render_resolved_line(line) for line in lines])

    if pickup_time:
        closing = f"It will be ready for pickup at {pickup_time}."
    else:
        closing = "We'll have it ready for pickup shortly."

    if not fragments:
        return f"Thanks {name}! I don't have any items for you yet."

    return f"Thanks {name}! I have {fragments}. {closing}"
