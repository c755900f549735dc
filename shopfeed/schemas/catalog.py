"""
Square catalog snapshot schemas

Field names are snake_case with camelCase aliases, so both the REST payloads
(snake_case) and the SDK-style export (camelCase) validate.
"""
from datetime import datetime
from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from shopfeed.core.logging import log


class SquareModel(BaseModel):
    """Base for all Square wire models"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class Money(SquareModel):
    """Amount in the smallest currency unit (cents)"""

    amount: Optional[int] = None
    currency: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, value: Any) -> Optional[int]:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, float) and not value.is_integer():
            return None
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            return None


class CategoryRef(SquareModel):
    """Reference to a category by id"""

    id: Optional[str] = None


class ItemVariationData(SquareModel):
    item_id: Optional[str] = None
    name: Optional[str] = None
    sku: Optional[str] = None
    price_money: Optional[Money] = None


class CatalogItemVariation(SquareModel):
    """A purchasable SKU of an item"""

    type: Literal["ITEM_VARIATION"] = "ITEM_VARIATION"
    id: Optional[str] = None
    item_variation_data: Optional[ItemVariationData] = None

    @property
    def parent_item_id(self) -> Optional[str]:
        return self.item_variation_data.item_id if self.item_variation_data else None


class ItemData(SquareModel):
    name: Optional[str] = None
    description: Optional[str] = None
    image_ids: List[str] = Field(default_factory=list)
    categories: List[CategoryRef] = Field(default_factory=list)
    reporting_category: Optional[CategoryRef] = None
    product_type: Optional[str] = None
    ecom_uri: Optional[str] = None
    variations: List[CatalogItemVariation] = Field(default_factory=list)
    is_archived: bool = False
    channels: List[str] = Field(default_factory=list)
    ecom_visibility: Optional[str] = None

    @field_validator("image_ids", "categories", "variations", "channels", mode="before")
    @classmethod
    def none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("is_archived", mode="before")
    @classmethod
    def none_as_false(cls, value: Any) -> Any:
        return False if value is None else value


class CatalogItem(SquareModel):
    """A sellable product with its variations embedded"""

    type: Literal["ITEM"] = "ITEM"
    id: Optional[str] = None
    is_deleted: bool = False
    item_data: Optional[ItemData] = None

    @field_validator("is_deleted", mode="before")
    @classmethod
    def none_as_false(cls, value: Any) -> Any:
        return False if value is None else value


class ImageData(SquareModel):
    url: Optional[str] = None
    caption: Optional[str] = None


class CatalogImage(SquareModel):
    type: Literal["IMAGE"] = "IMAGE"
    id: Optional[str] = None
    image_data: Optional[ImageData] = None


class CategoryData(SquareModel):
    name: Optional[str] = None
    parent_category: Optional[CategoryRef] = None


class CatalogCategory(SquareModel):
    type: Literal["CATEGORY"] = "CATEGORY"
    id: Optional[str] = None
    category_data: Optional[CategoryData] = None

    @property
    def parent_id(self) -> Optional[str]:
        if self.category_data is None or self.category_data.parent_category is None:
            return None
        return self.category_data.parent_category.id


CatalogObject = Annotated[Union[CatalogItem, CatalogImage, CatalogCategory], Field(discriminator="type")]

CATALOG_OBJECT_TYPES = frozenset({"ITEM", "IMAGE", "CATEGORY"})

catalog_object_adapter = TypeAdapter(CatalogObject)


class InventoryCount(SquareModel):
    """Stock of one catalog object at one location"""

    catalog_object_id: Optional[str] = None
    catalog_object_type: Optional[str] = None
    state: Optional[str] = None
    location_id: Optional[str] = None
    quantity: Optional[str] = None
    calculated_at: Optional[str] = None

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_as_text(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class CatalogSnapshot(SquareModel):
    """Catalog objects and inventory counts captured at one point in time"""

    fetched_at: Optional[datetime] = None
    catalog_objects: List[CatalogObject] = Field(default_factory=list)
    inventory_counts: List[InventoryCount] = Field(default_factory=list)

    @field_validator("catalog_objects", mode="before")
    @classmethod
    def drop_unusable_objects(cls, value: Any) -> Any:
        """Unknown types and malformed records are skipped one at a time"""
        if not isinstance(value, list):
            return value
        known = []
        for obj in value:
            object_id = obj.get("id") if isinstance(obj, dict) else None
            if isinstance(obj, dict) and obj.get("type") not in CATALOG_OBJECT_TYPES:
                log.debug(f"Skipping catalog object of type {obj.get('type')!r} (id={object_id})")
                continue
            try:
                known.append(catalog_object_adapter.validate_python(obj))
            except ValidationError as exc:
                log.debug(f"Skipping malformed catalog object (id={object_id}): {exc.error_count()} errors")
        return known

    @field_validator("inventory_counts", mode="before")
    @classmethod
    def drop_malformed_counts(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, list):
            return value
        counts = []
        for count in value:
            try:
                counts.append(InventoryCount.model_validate(count))
            except ValidationError as exc:
                log.debug(f"Skipping malformed inventory count: {exc.error_count()} errors")
        return counts
