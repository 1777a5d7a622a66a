"""Synonym table used to expand informal item names."""

import logging
from collections.abc import Iterable

from pickup_order_service.models.synonym_models import SynonymRule
from pickup_order_service.normalization import normalize
from pickup_order_service.repositories.synonym_repository import SynonymRepository

logger = logging.getLogger(__name__)

DEFAULT_SYNONYM_RULES: tuple[SynonymRule, ...] = (
    SynonymRule(pattern="cheeseburger", canonical_item_name="Burger", implied_modifiers=("add cheese",)),
    SynonymRule(pattern="hamburger", canonical_item_name="Burger"),
    SynonymRule(pattern="pop", canonical_item_name="Soda"),
    SynonymRule(pattern="coke", canonical_item_name="Soda", hint_keyword="coke"),
    SynonymRule(pattern="sprite", canonical_item_name="Soda", hint_keyword="sprite"),
)


class SynonymTable:
    """Exact, case-insensitive lookup of synonym rules by whole name.

    Loaded once; adding a synonym is a data change, not a code change.
    """

    def __init__(self, rules: Iterable[SynonymRule] = ()) -> None:
        self._rules: dict[str, SynonymRule] = {}
        for rule in rules:
            if rule.pattern in self._rules:
                logger.warning(f"Duplicate synonym pattern '{rule.pattern}', keeping the first rule")
                continue
            self._rules[rule.pattern] = rule

    def __len__(self) -> int:
        return len(self._rules)

    def lookup(self, name: str) -> SynonymRule | None:
        """Return the rule whose pattern equals the normalized ``name``."""
        return self._rules.get(normalize(name))

    @classmethod
    def default(cls) -> "SynonymTable":
        return cls(DEFAULT_SYNONYM_RULES)

    @classmethod
    def from_repository(cls, repository: SynonymRepository) -> "SynonymTable":
        """Load rules from DynamoDB, falling back to the built-in rules.

        An unreachable or empty table yields the defaults so resolution keeps
        working without the table.
        """
        rules = repository.list_rules()
        if not rules:
            logger.warning(f"No synonym rules loaded from {repository.table_name}, using defaults")
            return cls.default()

        logger.info(f"Loaded {len(rules)} synonym rules from {repository.table_name}")
        return cls(rules)
