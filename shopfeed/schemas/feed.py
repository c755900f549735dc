"""
Product feed schemas
"""
import math
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class FeedConfig(BaseModel):
    """Options applied when encoding the feed"""

    default_brand: Optional[str] = Field(None, description="Brand used when no brand category matches")


class AggregatedItem(BaseModel):
    """All variations of one catalog item merged into a single record"""

    item_id: str
    name: str
    description: str = ""
    product_url: Optional[str] = None
    image_url: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    min_price: float = Field(math.inf, description="Lowest positive price in cents, inf when unset")
    currency: str
    total_quantity: Decimal = Field(Decimal(0), description="Stock summed across all variations")

    @property
    def has_price(self) -> bool:
        return math.isfinite(self.min_price) and self.min_price > 0


class GoogleProduct(BaseModel):
    """One row of the Google Merchant Center feed"""

    id: str
    title: str
    description: str
    link: str
    image_link: str
    availability: Literal["in_stock", "out_of_stock", "preorder"]
    price: str
    condition: Literal["new", "refurbished", "used"] = "new"
    brand: Optional[str] = None
    mpn: Optional[str] = None
    product_type: Optional[str] = None


# Column order of the published feed
FEED_COLUMNS: List[str] = [
    "id",
    "title",
    "description",
    "link",
    "image_link",
    "availability",
    "price",
    "condition",
    "brand",
    "mpn",
    "product_type",
]


class FeedSummary(BaseModel):
    """Counts describing one pipeline run"""

    fetched_at: Optional[datetime] = None
    catalog_objects: Dict[str, int] = Field(default_factory=dict)
    variations: int = 0
    variations_in_stock: int = 0
    aggregated_items: int = 0
    published_items: int = 0
