"""Synonym rule model.

Synonym rules are configuration data: they map an informal phrase to a
canonical catalog item name plus any modifier phrases the phrase implies.
Stored in DynamoDB with ``pattern`` as the partition key.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pickup_order_service.normalization import normalize


class SynonymRule(BaseModel):
    """Alias from an informal item phrase to a canonical item."""

    model_config = ConfigDict(frozen=True)

    pattern: str = Field(..., description="Whole-name match, case-insensitive")
    canonical_item_name: str = Field(..., description="Catalog item name to substitute")
    implied_modifiers: tuple[str, ...] = Field(
        default=(), description="Modifier phrases implied by the alias"
    )
    hint_keyword: str | None = Field(None, description="Keyword to prefer among variations")

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Store patterns normalized so lookups are a plain dict hit."""
        normalized = normalize(v)
        if not normalized:
            raise ValueError("pattern must not be blank")
        return normalized

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "pattern": self.pattern,
            "canonical_item_name": self.canonical_item_name,
            "implied_modifiers": list(self.implied_modifiers),
        }

        if self.hint_keyword is not None:
            item["hint_keyword"] = self.hint_keyword

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "SynonymRule":
        """Create SynonymRule from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            SynonymRule: Parsed model instance
        """
        return cls(
            pattern=item["pattern"],
            canonical_item_name=item["canonical_item_name"],
            implied_modifiers=tuple(item.get("implied_modifiers", [])),
            hint_keyword=item.get("hint_keyword"),
        )
