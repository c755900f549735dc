"""
Google Merchant Center product feed generation
Transforms aggregated catalog items into the tab-separated feed format
"""

from typing import Iterable, List, Optional

from shopfeed.core.config import Settings, settings as default_settings
from shopfeed.core.logging import log
from shopfeed.schemas.catalog import CatalogSnapshot
from shopfeed.schemas.feed import FEED_COLUMNS, AggregatedItem, FeedConfig, GoogleProduct
from shopfeed.services.item_aggregator import aggregate_items
from shopfeed.utils.normalization import clean_field


def format_price(amount: float, currency: str) -> str:
    """Format an amount in cents, e.g. 2200 AUD -> "22.00 AUD" """
    return f"{amount / 100:.2f} {currency}"


def is_publishable(item: AggregatedItem) -> bool:
    """Google needs a link, an image and a price; out-of-stock items are not advertised"""
    if not item.product_url:
        return False
    if not item.image_url:
        return False
    if not item.has_price:
        return False
    return item.total_quantity > 0


def to_google_product(item: AggregatedItem, config: FeedConfig) -> GoogleProduct:
    """Convert an aggregated item to Google's format"""
    return GoogleProduct(
        id=item.item_id,
        title=item.name,
        description=item.description or item.name,
        link=item.product_url or "",
        image_link=item.image_url or "",
        availability="in_stock" if item.total_quantity > 0 else "out_of_stock",
        price=format_price(item.min_price, item.currency),
        condition="new",
        brand=item.brand or config.default_brand,
        mpn=None,
        product_type=item.category,
    )


def encode_row(product: GoogleProduct) -> str:
    values = product.model_dump()
    return "\t".join(clean_field(_as_text(values[column])) for column in FEED_COLUMNS)


def encode_tsv(products: Iterable[GoogleProduct]) -> str:
    """Header line plus one line per product, no trailing newline"""
    lines: List[str] = ["\t".join(FEED_COLUMNS)]
    lines.extend(encode_row(product) for product in products)
    return "\n".join(lines)


def build_feed_products(items: Iterable[AggregatedItem], config: FeedConfig) -> List[GoogleProduct]:
    return [to_google_product(item, config) for item in items if is_publishable(item)]


def generate_tsv_feed(
    snapshot: CatalogSnapshot,
    config: Optional[FeedConfig] = None,
    settings: Settings = default_settings,
) -> str:
    """Generate TSV feed content from a catalog snapshot"""
    if config is None:
        config = FeedConfig(default_brand=settings.default_brand)

    items = aggregate_items(snapshot, settings=settings)
    products = build_feed_products(items, config)

    log.info(f"Generated feed with {len(products)} of {len(items)} aggregated items")
    return encode_tsv(products)


def _as_text(value) -> Optional[str]:
    return None if value is None else str(value)
