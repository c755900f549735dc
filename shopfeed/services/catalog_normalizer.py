"""
Catalog Normalizer
Builds per-run lookup indices from a catalog snapshot
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, FrozenSet, List, Optional

from shopfeed.core.config import settings
from shopfeed.core.logging import log
from shopfeed.schemas.catalog import CatalogCategory, CatalogImage, CatalogItem, CatalogSnapshot
from shopfeed.utils.normalization import parse_quantity


@dataclass(frozen=True)
class CatalogIndex:
    """Lookups derived from one snapshot, discarded after the run"""

    items: List[CatalogItem] = field(default_factory=list)
    images_by_id: Dict[str, str] = field(default_factory=dict)
    categories_by_id: Dict[str, str] = field(default_factory=dict)
    category_parent_by_id: Dict[str, Optional[str]] = field(default_factory=dict)
    brand_category_ids: FrozenSet[str] = frozenset()
    inventory_by_variation_id: Dict[str, Decimal] = field(default_factory=dict)

    def image_url(self, image_id: Optional[str]) -> Optional[str]:
        return self.images_by_id.get(image_id) if image_id else None

    def category_name(self, category_id: Optional[str]) -> Optional[str]:
        return self.categories_by_id.get(category_id) if category_id else None

    def quantity(self, variation_id: str) -> Decimal:
        return self.inventory_by_variation_id.get(variation_id, Decimal(0))


def find_brand_category_ids(
    categories_by_id: Dict[str, str],
    category_parent_by_id: Dict[str, Optional[str]],
    brands_category_name: str,
) -> FrozenSet[str]:
    """
    Categories whose direct parent is the first category named `brands_category_name`.
    Only the direct parent is checked, so cyclic parent chains are harmless.
    """
    brands_category_id = next(
        (category_id for category_id, name in categories_by_id.items() if name == brands_category_name),
        None,
    )
    if brands_category_id is None:
        return frozenset()

    return frozenset(
        category_id
        for category_id, parent_id in category_parent_by_id.items()
        if parent_id == brands_category_id
    )


def build_inventory_index(snapshot: CatalogSnapshot) -> Dict[str, Decimal]:
    """Sum quantities per catalog object across all locations"""
    inventory: Dict[str, Decimal] = {}
    for count in snapshot.inventory_counts:
        if not count.catalog_object_id:
            continue
        existing = inventory.get(count.catalog_object_id, Decimal(0))
        inventory[count.catalog_object_id] = existing + parse_quantity(count.quantity)
    return inventory


def build_catalog_index(snapshot: CatalogSnapshot, brands_category_name: Optional[str] = None) -> CatalogIndex:
    """Partition catalog objects in one pass and build all lookups"""
    items: List[CatalogItem] = []
    images_by_id: Dict[str, str] = {}
    categories_by_id: Dict[str, str] = {}
    category_parent_by_id: Dict[str, Optional[str]] = {}

    for obj in snapshot.catalog_objects:
        if not obj.id:
            continue
        if isinstance(obj, CatalogItem):
            items.append(obj)
        elif isinstance(obj, CatalogImage):
            if obj.image_data and obj.image_data.url:
                images_by_id[obj.id] = obj.image_data.url
        elif isinstance(obj, CatalogCategory):
            if obj.category_data and obj.category_data.name:
                categories_by_id[obj.id] = obj.category_data.name
                category_parent_by_id[obj.id] = obj.parent_id

    brand_category_ids = find_brand_category_ids(
        categories_by_id,
        category_parent_by_id,
        brands_category_name or settings.brands_category_name,
    )

    index = CatalogIndex(
        items=items,
        images_by_id=images_by_id,
        categories_by_id=categories_by_id,
        category_parent_by_id=category_parent_by_id,
        brand_category_ids=brand_category_ids,
        inventory_by_variation_id=build_inventory_index(snapshot),
    )

    log.debug(
        f"Indexed {len(items)} items, {len(images_by_id)} images, {len(categories_by_id)} categories "
        f"({len(brand_category_ids)} brands), {len(index.inventory_by_variation_id)} stocked objects"
    )
    return index
