"""
Pydantic models for catalog input and feed output
"""

from .catalog import (
    CatalogCategory,
    CatalogImage,
    CatalogItem,
    CatalogItemVariation,
    CatalogSnapshot,
    InventoryCount,
)
from .common import HealthCheckResponse, ReadinessResponse
from .feed import FEED_COLUMNS, AggregatedItem, FeedConfig, FeedSummary, GoogleProduct

__all__ = [
    "CatalogCategory",
    "CatalogImage",
    "CatalogItem",
    "CatalogItemVariation",
    "CatalogSnapshot",
    "InventoryCount",
    "HealthCheckResponse",
    "ReadinessResponse",
    "FEED_COLUMNS",
    "AggregatedItem",
    "FeedConfig",
    "FeedSummary",
    "GoogleProduct",
]
