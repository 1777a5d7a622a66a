"""Builds the order service and its collaborators from configuration.

Shared by the uvicorn entry point and the Lambda dependency cache.
"""

import logging
import os
from typing import Any

import boto3

from pickup_order_service.adapters.square_adapter import SquareOrderAdapter
from pickup_order_service.config import ServiceConfig
from pickup_order_service.repositories.synonym_repository import SynonymRepository
from pickup_order_service.services.catalog_cache import CatalogCache
from pickup_order_service.services.catalog_client import SquareCatalogClient
from pickup_order_service.services.modifier_resolver import ModifierResolver
from pickup_order_service.services.name_resolver import NameResolver
from pickup_order_service.services.order_builder import OrderBuilder
from pickup_order_service.services.order_service import OrderService
from pickup_order_service.services.synonyms import SynonymTable

logger = logging.getLogger(__name__)


def get_dynamodb_resource(config: ServiceConfig) -> Any:
    """Create DynamoDB resource with appropriate configuration.

    Args:
        config: Service configuration holding region and endpoint override

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    if config.dynamodb_endpoint:
        logger.info(f"Using local DynamoDB at {config.dynamodb_endpoint}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=config.dynamodb_endpoint,
            region_name=config.aws_region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        )

    logger.info(f"Using AWS DynamoDB in region {config.aws_region}")
    return boto3.resource("dynamodb", region_name=config.aws_region)


def load_synonym_table(config: ServiceConfig) -> SynonymTable:
    """Load synonym rules from DynamoDB when a table is configured.

    Returns:
        SynonymTable from the table, or the built-in rules
    """
    if not config.synonyms_table:
        logger.info("No SYNONYMS_TABLE configured, using built-in synonym rules")
        return SynonymTable.default()

    repository = SynonymRepository(
        dynamodb_resource=get_dynamodb_resource(config), table_name=config.synonyms_table
    )
    return SynonymTable.from_repository(repository)


def create_order_service(config: ServiceConfig, synonyms: SynonymTable) -> OrderService:
    """Assemble the catalog cache, resolvers and Square adapter.

    Args:
        config: Service configuration
        synonyms: Synonym rules used by name resolution

    Returns:
        Configured OrderService instance
    """
    catalog_client = SquareCatalogClient(
        base_url=config.square_base_url,
        access_token=config.square_access_token,
        api_version=config.square_api_version,
        timeout_seconds=config.catalog_fetch_timeout_seconds,
    )
    catalog_cache = CatalogCache(catalog_client=catalog_client, ttl_seconds=config.catalog_ttl_seconds)

    order_builder = OrderBuilder(
        name_resolver=NameResolver(synonyms=synonyms),
        modifier_resolver=ModifierResolver(),
        strict=config.strict_order_resolution,
    )

    order_adapter = SquareOrderAdapter(
        base_url=config.square_base_url,
        access_token=config.square_access_token,
        location_id=config.square_location_id,
        api_version=config.square_api_version,
        timeout_seconds=config.catalog_fetch_timeout_seconds,
    )

    return OrderService(
        catalog_cache=catalog_cache,
        order_builder=order_builder,
        order_adapter=order_adapter,
        serve_stale_catalog=config.serve_stale_catalog,
    )
