"""
Item Aggregator
Merges catalog item variations into one record per sellable item
"""

import math
from typing import Dict, List, Optional

from shopfeed.core.config import Settings, settings as default_settings
from shopfeed.core.logging import log
from shopfeed.schemas.catalog import CatalogItem, CatalogSnapshot
from shopfeed.schemas.feed import AggregatedItem
from shopfeed.services.catalog_normalizer import CatalogIndex, build_catalog_index
from shopfeed.utils.normalization import build_variation_name, extract_base_name


def is_eligible_item(item: CatalogItem, settings: Settings = default_settings) -> bool:
    """
    Only live, regular merchandise with at least one variation is aggregated.
    Events, memberships and services use other product types.
    """
    item_data = item.item_data
    if item_data is None:
        return False
    if item.is_deleted or item_data.is_archived:
        return False
    if item_data.product_type != settings.eligible_product_type:
        return False
    if not item_data.variations:
        return False
    if settings.require_sales_channel and not item_data.channels:
        return False
    if settings.exclude_unavailable_visibility and item_data.ecom_visibility == "UNAVAILABLE":
        return False
    return True


def resolve_brand(item: CatalogItem, index: CatalogIndex) -> Optional[str]:
    """First of the item's categories that sits directly under the brands category"""
    for category in item.item_data.categories:
        if category.id and category.id in index.brand_category_ids:
            return index.category_name(category.id)
    return None


def aggregate_items(
    snapshot: CatalogSnapshot,
    index: Optional[CatalogIndex] = None,
    settings: Settings = default_settings,
) -> List[AggregatedItem]:
    """
    Fold every variation into its parent item:
    - quantities are summed across all variations
    - the minimum positive price wins, with its currency
    - product and image URLs are first-wins
    Items that never see a positive price are dropped.
    """
    if index is None:
        index = build_catalog_index(snapshot, settings.brands_category_name)

    item_map: Dict[str, AggregatedItem] = {}

    for item in index.items:
        if not is_eligible_item(item, settings):
            continue

        item_data = item.item_data

        image_url = index.image_url(item_data.image_ids[0]) if item_data.image_ids else None
        category = index.category_name(item_data.reporting_category.id) if item_data.reporting_category else None
        brand = resolve_brand(item, index)
        product_url = item_data.ecom_uri

        for variation in item_data.variations:
            if not variation.id or variation.item_variation_data is None:
                continue

            variation_data = variation.item_variation_data
            quantity = index.quantity(variation.id)
            price_money = variation_data.price_money
            price = price_money.amount if price_money and price_money.amount else 0
            currency = (price_money.currency if price_money else None) or settings.default_currency

            existing = item_map.get(item.id)

            if existing:
                existing.total_quantity += quantity
                if 0 < price < existing.min_price:
                    existing.min_price = price
                    existing.currency = currency
                if not existing.product_url and product_url:
                    existing.product_url = product_url
                if not existing.image_url and image_url:
                    existing.image_url = image_url
            else:
                full_name = build_variation_name(item_data.name, variation_data.name)
                item_map[item.id] = AggregatedItem(
                    item_id=item.id,
                    name=extract_base_name(full_name),
                    description=item_data.description or "",
                    product_url=product_url,
                    image_url=image_url,
                    category=category,
                    brand=brand,
                    min_price=price if price > 0 else math.inf,
                    currency=currency,
                    total_quantity=quantity,
                )

    aggregated = [item for item in item_map.values() if math.isfinite(item.min_price)]
    log.debug(f"Aggregated {len(aggregated)} priced items from {len(item_map)} eligible items")
    return aggregated
