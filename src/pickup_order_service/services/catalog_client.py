"""Client for reading the Square catalog."""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

CATALOG_TYPES = "ITEM,ITEM_VARIATION,MODIFIER_LIST,MODIFIER"


class SquareCatalogClient:
    """HTTP client for paging through the Square catalog list endpoint.

    The client only collects raw catalog objects; turning them into a
    snapshot is the job of ``build_catalog_snapshot``.
    """

    def __init__(
        self,
        base_url: str,
        access_token: str,
        api_version: str = "2024-09-19",
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize the catalog client.

        Args:
            base_url: Square API base URL (sandbox or production)
            access_token: Square access token used as a bearer credential
            api_version: Value for the Square-Version header
            timeout_seconds: Timeout applied to every page request
        """
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.api_version = api_version
        self.timeout_seconds = timeout_seconds

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Square-Version": self.api_version,
            "Content-Type": "application/json",
        }

    async def list_catalog_page(
        self, client: httpx.AsyncClient, cursor: str | None = None
    ) -> tuple[list[dict[str, Any]], str | None]:
        """Fetch one page of the catalog list.

        Args:
            client: Open HTTP client shared by the whole fetch sequence
            cursor: Continuation cursor from the previous page

        Returns:
            The page's objects and the next cursor, None on the last page

        Raises:
            httpx.HTTPStatusError: On a non-success status
            httpx.RequestError: On transport failures and timeouts
            ValueError: If the body is not JSON
        """
        params = {"types": CATALOG_TYPES}
        if cursor:
            params["cursor"] = cursor

        response = await client.get(
            f"{self.base_url}/v2/catalog/list", params=params, headers=self.headers
        )
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError("Catalog list response is not a JSON object")

        page_objects = data.get("objects") or []
        next_cursor = data.get("cursor")
        return (
            [obj for obj in page_objects if isinstance(obj, dict)],
            next_cursor if isinstance(next_cursor, str) and next_cursor else None,
        )

    async def fetch_all_objects(self) -> list[dict[str, Any]] | None:
        """Fetch every catalog object, following continuation cursors.

        Returns:
            All objects concatenated across pages, or None if any page fails
        """
        objects: list[dict[str, Any]] = []
        seen_cursors: set[str] = set()
        cursor: str | None = None
        pages = 0

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                while True:
                    page_objects, cursor = await self.list_catalog_page(client, cursor)
                    pages += 1
                    objects.extend(page_objects)

                    if not cursor:
                        break
                    if cursor in seen_cursors:
                        logger.error(f"Catalog pagination returned a repeated cursor after {pages} pages")
                        return None
                    seen_cursors.add(cursor)

        except (httpx.HTTPStatusError, httpx.RequestError, ValueError) as e:
            logger.error(f"Failed to fetch catalog page {pages + 1}: {e}")
            return None

        logger.info(f"Fetched {len(objects)} catalog objects in {pages} pages")
        return objects
