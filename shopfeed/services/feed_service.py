"""
Feed service
Loads the persisted snapshot and runs the feed pipeline
"""

from collections import Counter
from pathlib import Path
from typing import Optional, Tuple

from shopfeed.core.config import Settings, settings as default_settings
from shopfeed.schemas.catalog import CatalogItem, CatalogSnapshot
from shopfeed.schemas.feed import FeedConfig, FeedSummary
from shopfeed.services.catalog_normalizer import build_catalog_index
from shopfeed.services.feed_encoder import build_feed_products, generate_tsv_feed
from shopfeed.services.item_aggregator import aggregate_items
from shopfeed.services.snapshot_store import load_snapshot


class FeedService:
    """Service layer for feed generation"""

    def __init__(self, snapshot_path: Optional[Path] = None, settings: Settings = default_settings):
        self.settings = settings
        self.snapshot_path = Path(snapshot_path or settings.snapshot_path)
        self._cached: Optional[Tuple[Tuple[int, int], CatalogSnapshot]] = None

    def get_snapshot(self) -> CatalogSnapshot:
        """Load the snapshot, reloading only when the file has changed"""
        try:
            stat = self.snapshot_path.stat()
            version = (stat.st_mtime_ns, stat.st_size)
        except FileNotFoundError:
            self._cached = None
            version = None

        if version is not None and self._cached and self._cached[0] == version:
            return self._cached[1]

        snapshot = load_snapshot(self.snapshot_path)
        if version is not None:
            self._cached = (version, snapshot)
        return snapshot

    def feed_config(self, default_brand: Optional[str] = None) -> FeedConfig:
        return FeedConfig(default_brand=default_brand or self.settings.default_brand)

    def generate_feed(self, default_brand: Optional[str] = None) -> str:
        """TSV feed for the current snapshot"""
        return generate_tsv_feed(self.get_snapshot(), self.feed_config(default_brand), settings=self.settings)

    def summary(self) -> FeedSummary:
        """Counts for each stage of the pipeline"""
        snapshot = self.get_snapshot()
        index = build_catalog_index(snapshot, self.settings.brands_category_name)
        items = aggregate_items(snapshot, index=index, settings=self.settings)
        products = build_feed_products(items, self.feed_config())

        variation_ids = [
            variation.id
            for obj in snapshot.catalog_objects
            if isinstance(obj, CatalogItem) and obj.item_data
            for variation in obj.item_data.variations
            if variation.id
        ]

        return FeedSummary(
            fetched_at=snapshot.fetched_at,
            catalog_objects=dict(Counter(obj.type for obj in snapshot.catalog_objects)),
            variations=len(variation_ids),
            variations_in_stock=sum(1 for variation_id in variation_ids if index.quantity(variation_id) > 0),
            aggregated_items=len(items),
            published_items=len(products),
        )


_feed_service: Optional[FeedService] = None


def get_feed_service() -> FeedService:
    """Shared service instance for the API"""
    global _feed_service
    if _feed_service is None:
        _feed_service = FeedService()
    return _feed_service
