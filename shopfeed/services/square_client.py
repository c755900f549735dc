"""
Square API client for fetching catalog and inventory data
Uses Square's REST API directly with httpx
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

import httpx
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential
from tenacity.wait import wait_base

from shopfeed.core.config import Settings, settings as default_settings
from shopfeed.core.exceptions import ConfigurationError, SquareAPIError
from shopfeed.core.logging import log
from shopfeed.schemas.catalog import CatalogSnapshot

BASE_URLS = {
    "production": "https://connect.squareup.com/v2",
    "sandbox": "https://connect.squareupsandbox.com/v2",
}

DEFAULT_CATALOG_TYPES = ("ITEM", "IMAGE", "CATEGORY")

# Square limits inventory batch requests to 100 object ids
INVENTORY_BATCH_SIZE = 100

RETRY_STATUS_CODES = {429, 500, 502, 503, 504}


def is_transient_error(exc: BaseException) -> bool:
    """Network failures, rate limiting and server errors are worth retrying"""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, SquareAPIError):
        return exc.response_status in RETRY_STATUS_CODES
    return False


def extract_variation_ids(objects: Iterable[Dict[str, Any]]) -> List[str]:
    """Variation ids of every item in a raw catalog object list"""
    ids: List[str] = []
    for obj in objects:
        if obj.get("type") != "ITEM":
            continue
        item_data = obj.get("item_data") or obj.get("itemData") or {}
        for variation in item_data.get("variations") or []:
            if variation.get("id"):
                ids.append(variation["id"])
    return ids


class SquareClient:
    """
    Async client for the Square catalog and inventory endpoints
    Handles cursor pagination and request batching
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        environment: Optional[str] = None,
        settings: Settings = default_settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        retry_wait: Optional[wait_base] = None,
        max_attempts: int = 3,
    ):
        access_token = access_token or settings.square_access_token
        if not access_token:
            raise ConfigurationError("SQUARE_ACCESS_TOKEN environment variable is required")

        self.environment = environment or settings.square_environment
        if self.environment not in BASE_URLS:
            raise ConfigurationError(f"Unknown Square environment: {self.environment}")

        self.retry_wait = retry_wait or wait_exponential(multiplier=1, min=2, max=10)
        self.max_attempts = max_attempts

        self.client = httpx.AsyncClient(
            base_url=BASE_URLS[self.environment],
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
                "Square-Version": settings.square_api_version,
            },
            timeout=settings.square_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "SquareClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self.client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.retry_wait,
            retry=retry_if_exception(is_transient_error),
            reraise=True,
        ):
            with attempt:
                response = await self.client.request(method, path, **kwargs)
                if response.is_error:
                    log.warning(f"Square API {method} {path} failed with {response.status_code}")
                    raise SquareAPIError(response.status_code, response.text)
                return response.json()

    async def list_catalog(self, types: Sequence[str] = DEFAULT_CATALOG_TYPES) -> List[Dict[str, Any]]:
        """Fetch all catalog objects of the given types, following the cursor"""
        objects: List[Dict[str, Any]] = []
        cursor: Optional[str] = None

        while True:
            params = {"types": ",".join(types)}
            if cursor:
                params["cursor"] = cursor

            payload = await self._request("GET", "/catalog/list", params=params)
            objects.extend(payload.get("objects") or [])

            cursor = payload.get("cursor")
            if not cursor:
                break

        return objects

    async def batch_retrieve_inventory_counts(self, catalog_object_ids: Sequence[str]) -> List[Dict[str, Any]]:
        """Fetch inventory counts in batches, following the cursor within each batch"""
        counts: List[Dict[str, Any]] = []

        for start in range(0, len(catalog_object_ids), INVENTORY_BATCH_SIZE):
            batch = list(catalog_object_ids[start : start + INVENTORY_BATCH_SIZE])
            cursor: Optional[str] = None

            while True:
                body: Dict[str, Any] = {"catalog_object_ids": batch}
                if cursor:
                    body["cursor"] = cursor

                payload = await self._request("POST", "/inventory/counts/batch-retrieve", json=body)
                counts.extend(payload.get("counts") or [])

                cursor = payload.get("cursor")
                if not cursor:
                    break

        return counts

    async def fetch_snapshot(self) -> CatalogSnapshot:
        """Fetch the catalog and the inventory of every variation"""
        log.info(f"Fetching catalog from Square ({self.environment})")
        objects = await self.list_catalog()
        log.info(f"Fetched {len(objects)} catalog objects")

        variation_ids = extract_variation_ids(objects)
        log.info(f"Fetching inventory for {len(variation_ids)} variations")
        counts = await self.batch_retrieve_inventory_counts(variation_ids)
        log.info(f"Fetched {len(counts)} inventory counts")

        return CatalogSnapshot.model_validate(
            {
                "fetched_at": datetime.now(timezone.utc),
                "catalog_objects": objects,
                "inventory_counts": counts,
            }
        )
