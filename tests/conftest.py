"""
Test configuration and fixtures
"""

from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import orjson
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shopfeed.core.config import Settings
from shopfeed.core.logging import setup_logging
from shopfeed.main import app
from shopfeed.schemas.catalog import CatalogSnapshot
from shopfeed.services.feed_service import FeedService, get_feed_service


def build_variation(
    variation_id: str,
    item_id: str,
    name: Optional[str] = None,
    amount: Optional[int] = None,
    currency: str = "AUD",
) -> Dict[str, Any]:
    data: Dict[str, Any] = {"itemId": item_id}
    if name is not None:
        data["name"] = name
    if amount is not None:
        data["priceMoney"] = {"amount": amount, "currency": currency}
    return {"type": "ITEM_VARIATION", "id": variation_id, "itemVariationData": data}


def build_item(
    item_id: str,
    name: str,
    variations: List[Dict[str, Any]],
    description: Optional[str] = None,
    image_ids: Optional[List[str]] = None,
    category_ids: Optional[List[str]] = None,
    reporting_category_id: Optional[str] = None,
    product_type: str = "REGULAR",
    ecom_uri: Optional[str] = None,
    is_deleted: bool = False,
    is_archived: bool = False,
    **extra: Any,
) -> Dict[str, Any]:
    item_data: Dict[str, Any] = {
        "name": name,
        "productType": product_type,
        "variations": variations,
        "isArchived": is_archived,
        "imageIds": image_ids or [],
        "categories": [{"id": category_id} for category_id in category_ids or []],
        **extra,
    }
    if description is not None:
        item_data["description"] = description
    if reporting_category_id is not None:
        item_data["reportingCategory"] = {"id": reporting_category_id}
    if ecom_uri is not None:
        item_data["ecomUri"] = ecom_uri
    return {"type": "ITEM", "id": item_id, "isDeleted": is_deleted, "itemData": item_data}


def build_image(image_id: str, url: str) -> Dict[str, Any]:
    return {"type": "IMAGE", "id": image_id, "imageData": {"url": url}}


def build_category(category_id: str, name: str, parent_id: Optional[str] = None) -> Dict[str, Any]:
    data: Dict[str, Any] = {"name": name}
    if parent_id is not None:
        data["parentCategory"] = {"id": parent_id}
    return {"type": "CATEGORY", "id": category_id, "categoryData": data}


def build_count(object_id: str, quantity: Any, location_id: str = "LOC-1") -> Dict[str, Any]:
    return {
        "catalogObjectId": object_id,
        "catalogObjectType": "ITEM_VARIATION",
        "state": "IN_STOCK",
        "locationId": location_id,
        "quantity": quantity,
    }


def build_snapshot(
    catalog_objects: Optional[List[Dict[str, Any]]] = None,
    inventory_counts: Optional[List[Dict[str, Any]]] = None,
) -> CatalogSnapshot:
    return CatalogSnapshot.model_validate(
        {
            "fetchedAt": "2026-10-01T02:00:00Z",
            "catalogObjects": catalog_objects or [],
            "inventoryCounts": inventory_counts or [],
        }
    )


@pytest.fixture(autouse=True)
def configure_logging():
    """Point the log sink at the stream captured for the current test"""
    setup_logging("WARNING")
    yield


@pytest.fixture
def catalog():
    """Builders for camelCase catalog export records"""
    return SimpleNamespace(
        item=build_item,
        variation=build_variation,
        image=build_image,
        category=build_category,
        count=build_count,
        snapshot=build_snapshot,
    )


@pytest.fixture
def test_settings():
    """Settings isolated from the environment and .env files"""
    return Settings(_env_file=None, default_brand="MDGC", square_access_token="test-token")


@pytest.fixture
def sample_snapshot_data() -> Dict[str, Any]:
    """A small club shop catalog in the SDK export format"""
    return {
        "fetchedAt": "2026-10-01T02:00:00Z",
        "catalogObjects": [
            build_category("CAT-BRANDS", "BRANDS"),
            build_category("CAT-RPM", "RPM", parent_id="CAT-BRANDS"),
            build_category("CAT-PUTTERS", "Putters"),
            build_image("IMG-RURU", "https://images.example.com/ruru.jpg"),
            build_image("IMG-MAV", "https://images.example.com/maverick.jpg"),
            build_item(
                "ITEM-RURU",
                "RURU",
                [
                    build_variation("VAR-RURU-1", "ITEM-RURU", "RURU - ATOMIC/PINK/171", 2500),
                    build_variation("VAR-RURU-2", "ITEM-RURU", "RURU - COSMIC/BLUE/170", 2200),
                ],
                description="A stable\tputter\nfor approach shots",
                image_ids=["IMG-RURU"],
                category_ids=["CAT-PUTTERS", "CAT-RPM"],
                reporting_category_id="CAT-PUTTERS",
                ecom_uri="https://shop.example.com/product/ruru/25",
            ),
            build_item(
                "ITEM-MAV",
                "MAVERICK",
                [build_variation("VAR-MAV-1", "ITEM-MAV", "Regular", 2900)],
                image_ids=["IMG-MAV"],
                ecom_uri="https://shop.example.com/product/maverick/31",
            ),
            build_item(
                "ITEM-EVENT",
                "Club Championship Entry",
                [build_variation("VAR-EVENT-1", "ITEM-EVENT", "Entry", 3000)],
                product_type="EVENT",
                image_ids=["IMG-MAV"],
                ecom_uri="https://shop.example.com/product/champs/40",
            ),
            build_item(
                "ITEM-SOLDOUT",
                "Envy",
                [build_variation("VAR-SOLDOUT-1", "ITEM-SOLDOUT", "Envy", 2400)],
                image_ids=["IMG-MAV"],
                ecom_uri="https://shop.example.com/product/envy/12",
            ),
            {"type": "TAX", "id": "TAX-GST", "taxData": {"name": "GST"}},
        ],
        "inventoryCounts": [
            build_count("VAR-RURU-1", "2", "LOC-1"),
            build_count("VAR-RURU-2", "1", "LOC-1"),
            build_count("VAR-RURU-2", "2", "LOC-2"),
            build_count("VAR-MAV-1", "4"),
            build_count("VAR-EVENT-1", "10"),
            build_count("VAR-SOLDOUT-1", "0"),
        ],
    }


@pytest.fixture
def snapshot_file(tmp_path, sample_snapshot_data):
    """Sample snapshot written to disk"""
    path = tmp_path / "square-inventory.json"
    path.write_bytes(orjson.dumps(sample_snapshot_data))
    return path


@pytest.fixture
def feed_service(snapshot_file, test_settings):
    return FeedService(snapshot_path=snapshot_file, settings=test_settings)


@pytest_asyncio.fixture
async def client(feed_service):
    """Create test client with the feed service pointed at the sample snapshot"""
    app.dependency_overrides[get_feed_service] = lambda: feed_service

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
