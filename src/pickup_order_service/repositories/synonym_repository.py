"""DynamoDB repository for synonym rules.

Following the rest of the service, expected failures return None instead of
raising, and the caller decides on a fallback.
"""

import logging
from typing import Any

from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table
from pydantic import ValidationError

from pickup_order_service.models.synonym_models import SynonymRule

logger = logging.getLogger(__name__)


class SynonymRepository:
    """Reads synonym rules stored in DynamoDB with ``pattern`` as partition key."""

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def list_rules(self) -> list[SynonymRule] | None:
        """Scan every synonym rule in the table.

        Malformed items are skipped with a warning.

        Returns:
            list: SynonymRule objects in scan order, or None on DynamoDB failure
        """
        rules: list[SynonymRule] = []
        scan_kwargs: dict[str, Any] = {}

        try:
            while True:
                response = self.table.scan(**scan_kwargs)

                for item in response.get("Items", []):
                    try:
                        rules.append(SynonymRule.from_dynamodb_item(item))
                    except (KeyError, ValidationError) as e:
                        logger.warning(f"Skipping malformed synonym rule {item!r}: {e}")

                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key

        except ClientError as e:
            logger.error(f"Failed to list synonym rules from {self.table_name}: {e}")  # pragma: no cover
            return None

        return rules
