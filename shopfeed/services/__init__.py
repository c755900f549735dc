"""
Service layer for the feed pipeline
"""

from .catalog_normalizer import CatalogIndex, build_catalog_index
from .feed_encoder import generate_tsv_feed, to_google_product
from .feed_service import FeedService
from .item_aggregator import aggregate_items
from .square_client import SquareClient

__all__ = [
    "CatalogIndex",
    "build_catalog_index",
    "aggregate_items",
    "to_google_product",
    "generate_tsv_feed",
    "FeedService",
    "SquareClient",
]
