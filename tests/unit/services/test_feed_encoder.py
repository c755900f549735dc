"""
Tests for Google feed encoding
"""

import math

import pytest

from shopfeed.core.config import Settings
from shopfeed.schemas.feed import FEED_COLUMNS, AggregatedItem, FeedConfig
from shopfeed.services.feed_encoder import (
    encode_tsv,
    format_price,
    generate_tsv_feed,
    is_publishable,
    to_google_product,
)

HEADER = "id\ttitle\tdescription\tlink\timage_link\tavailability\tprice\tcondition\tbrand\tmpn\tproduct_type"

config = FeedConfig(default_brand="MDGC")


@pytest.fixture
def sample_item():
    return AggregatedItem(
        item_id="item-1",
        name="Ruru",
        description="A putter disc",
        product_url="https://shop.example.com/product/ruru/25",
        image_url="https://images.example.com/ruru.jpg",
        category="Putters",
        min_price=2200,
        currency="AUD",
        total_quantity=5,
    )


def test_converts_aggregated_item_to_google_format(sample_item):
    product = to_google_product(sample_item, config)

    assert product.model_dump() == {
        "id": "item-1",
        "title": "Ruru",
        "description": "A putter disc",
        "link": "https://shop.example.com/product/ruru/25",
        "image_link": "https://images.example.com/ruru.jpg",
        "availability": "in_stock",
        "price": "22.00 AUD",
        "condition": "new",
        "brand": "MDGC",
        "mpn": None,
        "product_type": "Putters",
    }


def test_out_of_stock_availability(sample_item):
    sample_item.total_quantity = 0

    assert to_google_product(sample_item, config).availability == "out_of_stock"


def test_description_falls_back_to_name(sample_item):
    sample_item.description = ""

    assert to_google_product(sample_item, config).description == "Ruru"


def test_derived_brand_beats_default(sample_item):
    sample_item.brand = "RPM"

    assert to_google_product(sample_item, config).brand == "RPM"


def test_brand_absent_without_default(sample_item):
    assert to_google_product(sample_item, FeedConfig()).brand is None


@pytest.mark.parametrize(
    "amount,currency,expected",
    [(2200, "AUD", "22.00 AUD"), (1999, "AUD", "19.99 AUD"), (5, "NZD", "0.05 NZD"), (123456, "AUD", "1234.56 AUD")],
)
def test_format_price(amount, currency, expected):
    assert format_price(amount, currency) == expected


def test_publishable_requires_link_image_price_and_stock(sample_item):
    assert is_publishable(sample_item)
    assert not is_publishable(sample_item.model_copy(update={"product_url": None}))
    assert not is_publishable(sample_item.model_copy(update={"product_url": ""}))
    assert not is_publishable(sample_item.model_copy(update={"image_url": None}))
    assert not is_publishable(sample_item.model_copy(update={"total_quantity": 0}))
    assert not is_publishable(sample_item.model_copy(update={"min_price": math.inf}))


def test_encode_replaces_tabs_and_newlines(sample_item):
    sample_item.description = "Line 1\nLine 2\twith tab\r\n"

    feed = encode_tsv([to_google_product(sample_item, config)])
    row = feed.split("\n")[1].split("\t")

    assert row[FEED_COLUMNS.index("description")] == "Line 1 Line 2 with tab  "
    assert len(row) == len(FEED_COLUMNS)


def test_encode_row_layout(sample_item):
    feed = encode_tsv([to_google_product(sample_item, config)])

    assert feed == (
        HEADER
        + "\n"
        + "item-1\tRuru\tA putter disc\thttps://shop.example.com/product/ruru/25\t"
        + "https://images.example.com/ruru.jpg\tin_stock\t22.00 AUD\tnew\tMDGC\t\tPutters"
    )


def test_encode_without_products_is_header_only():
    assert encode_tsv([]) == HEADER


def test_empty_catalog_produces_header_only(catalog):
    assert generate_tsv_feed(catalog.snapshot(), config) == HEADER


def test_encoding_filters_drop_rows_but_keep_header(catalog):
    snapshot = catalog.snapshot(
        [
            catalog.image("IMG-1", "https://images.example.com/1.jpg"),
            catalog.item(
                "NO-LINK", "No Link", [catalog.variation("VAR-1", "NO-LINK", amount=2000)], image_ids=["IMG-1"]
            ),
            catalog.item(
                "NO-IMAGE",
                "No Image",
                [catalog.variation("VAR-2", "NO-IMAGE", amount=2000)],
                ecom_uri="https://shop.example.com/product/no-image/2",
            ),
            catalog.item(
                "NO-STOCK",
                "No Stock",
                [catalog.variation("VAR-3", "NO-STOCK", amount=2000)],
                image_ids=["IMG-1"],
                ecom_uri="https://shop.example.com/product/no-stock/3",
            ),
        ],
        [catalog.count("VAR-1", "1"), catalog.count("VAR-2", "1"), catalog.count("VAR-3", "0")],
    )

    assert generate_tsv_feed(snapshot, config) == HEADER


def test_full_feed_from_sample_snapshot(catalog, sample_snapshot_data):
    snapshot = catalog.snapshot(sample_snapshot_data["catalogObjects"], sample_snapshot_data["inventoryCounts"])

    feed = generate_tsv_feed(snapshot, config, settings=Settings(_env_file=None))
    lines = feed.split("\n")

    assert not feed.endswith("\n")
    assert lines[0] == HEADER
    assert lines[1:] == [
        "ITEM-RURU\tRuru\tA stable putter for approach shots\thttps://shop.example.com/product/ruru/25\t"
        "https://images.example.com/ruru.jpg\tin_stock\t22.00 AUD\tnew\tRPM\t\tPutters",
        "ITEM-MAV\tMaverick\tMaverick\thttps://shop.example.com/product/maverick/31\t"
        "https://images.example.com/maverick.jpg\tin_stock\t29.00 AUD\tnew\tMDGC\t\t",
    ]


def test_default_config_uses_settings_brand(catalog, sample_snapshot_data):
    snapshot = catalog.snapshot(sample_snapshot_data["catalogObjects"], sample_snapshot_data["inventoryCounts"])

    feed = generate_tsv_feed(snapshot, settings=Settings(_env_file=None, default_brand="Club Shop"))

    assert feed.split("\n")[2].split("\t")[FEED_COLUMNS.index("brand")] == "Club Shop"


def test_fractional_stock_is_published(catalog):
    snapshot = catalog.snapshot(
        [
            catalog.image("IMG-1", "https://images.example.com/rope.jpg"),
            catalog.item(
                "ITEM-1",
                "Rope",
                [
                    catalog.variation("VAR-1", "ITEM-1", "Red", 1500),
                    catalog.variation("VAR-2", "ITEM-1", "Blue", 1500),
                ],
                image_ids=["IMG-1"],
                ecom_uri="https://shop.example.com/product/rope/7",
            ),
        ],
        [catalog.count("VAR-1", "0.5"), catalog.count("VAR-2", "0.5")],
    )

    rows = generate_tsv_feed(snapshot, config).split("\n")

    assert len(rows) == 2
    assert rows[1].split("\t")[5] == "in_stock"


def test_malformed_record_does_not_hide_valid_items(catalog):
    good = catalog.item(
        "ITEM-GOOD",
        "Ruru",
        [catalog.variation("VAR-1", "ITEM-GOOD", "Pink", 2200)],
        image_ids=["IMG-1"],
        ecom_uri="https://shop.example.com/product/ruru/25",
    )
    broken = catalog.item("ITEM-BROKEN", "Envy", [catalog.variation("VAR-2", "ITEM-BROKEN", "Blue", 2400)])
    broken["isDeleted"] = {"unexpected": "shape"}
    snapshot = catalog.snapshot(
        [catalog.image("IMG-1", "https://images.example.com/ruru.jpg"), good, broken],
        [catalog.count("VAR-1", "2"), catalog.count("VAR-2", "2")],
    )

    rows = generate_tsv_feed(snapshot, config).split("\n")

    assert [row.split("\t")[0] for row in rows[1:]] == ["ITEM-GOOD"]
