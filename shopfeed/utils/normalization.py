"""
Text normalization utilities for catalog data
"""
from decimal import Decimal, InvalidOperation
from typing import Optional

from shopfeed.core.logging import log

NAME_SEPARATOR = " - "


def extract_base_name(name: str) -> str:
    """
    Extract the base item name, removing variation suffixes:
    - Keep only the text before the first " - "
    - Convert all-caps names to sentence case

    "RURU - RURU - ATOMIC/PINK/171" -> "Ruru"
    "Innova Destroyer - 170g Blue" -> "Innova Destroyer"
    """
    if not name:
        return ""

    base_name = name.split(NAME_SEPARATOR)[0].strip()

    if len(base_name) > 1 and base_name == base_name.upper():
        base_name = base_name[0] + base_name[1:].lower()

    return base_name


def build_variation_name(item_name: Optional[str], variation_name: Optional[str]) -> str:
    """Join item and variation names when the variation has a distinct name"""
    item_name = item_name or ""
    if variation_name and variation_name != item_name:
        return f"{item_name}{NAME_SEPARATOR}{variation_name}"
    return item_name


def parse_quantity(value: Optional[str]) -> Decimal:
    """
    Parse a decimal quantity string
    Returns 0 for missing or malformed values
    """
    if value is None:
        return Decimal(0)

    try:
        quantity = Decimal(str(value).strip())
    except InvalidOperation:
        log.debug(f"Unparseable quantity {value!r}, treating as 0")
        return Decimal(0)

    if not quantity.is_finite():
        return Decimal(0)

    return quantity


def clean_field(value: Optional[str]) -> str:
    """Replace tab, newline and carriage return with a single space each"""
    if not value:
        return ""
    return value.replace("\t", " ").replace("\n", " ").replace("\r", " ")
