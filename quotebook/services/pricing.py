# quotebook/services/pricing.py
"""
Line-item pricing strategies.

Every document kind owns one pricer. A pricer turns the raw items of a
request into rows ready for the item table (derived ``area`` and
``total_price`` included) and sums a document total from those rows.
Totals are plain float sums; formatting to 2 decimals is left to display.
"""
from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from quotebook.core.errors import ValidationError

ROOM_TYPES: Dict[str, str] = {
    "kitchen": "Kitchen",
    "wardrobe": "Wardrobe",
    "loft": "Loft",
    "tv_unit": "TV Unit",
    "bed": "Bed",
    "pooja_room": "Pooja Room",
    "crockery_unit": "Crockery Unit",
    "pantry": "Pantry",
    "magic_corner": "Magic Corner",
    "custom": "Custom",
}
CUSTOM_ROOM_TYPE = "custom"

PRICE_SOURCE_PREDEFINED = "PREDEFINED"
PRICE_SOURCE_CUSTOM = "CUSTOM"
PRICE_SOURCES = (PRICE_SOURCE_PREDEFINED, PRICE_SOURCE_CUSTOM)

MODE_AREA = "area"
MODE_QUANTITY = "quantity"

Row = Dict[str, Any]


def _text(raw: Mapping[str, Any], field: str) -> Optional[str]:
    value = raw.get(field)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _positive(raw: Mapping[str, Any], field: str, line: int) -> float:
    value = raw.get(field)
    if value is None or value == "":
        raise ValidationError(f"Item {line}: {field} is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Item {line}: {field} must be a number")
    if not math.isfinite(number) or number <= 0:
        raise ValidationError(f"Item {line}: {field} must be greater than 0")
    return number


def _present(raw: Mapping[str, Any], field: str) -> bool:
    # 0 and "" count as "not sent", like an untouched form input
    return raw.get(field) not in (None, "", 0)


class LinePricer:
    """Base strategy. Subclasses implement ``price_item``."""

    name: str = "base"

    def price_item(self, raw: Mapping[str, Any], line: int) -> Row:
        raise NotImplementedError

    def item_title(self, item: Any) -> str:
        raise NotImplementedError

    def item_description(self, item: Any) -> Optional[str]:
        """Secondary line printed under the title; None when the title says it all."""
        return None

    def price_items(self, raw_items: Optional[Sequence[Mapping[str, Any]]]) -> List[Row]:
        if not raw_items:
            raise ValidationError("At least one item is required")

        rows = []
        for position, raw in enumerate(raw_items):
            row = self.price_item(raw, position + 1)
            row["position"] = position
            rows.append(row)
        return rows

    @staticmethod
    def total(rows: Iterable[Mapping[str, Any]]) -> float:
        return sum((float(r["total_price"]) for r in rows), 0.0)


class AreaPricer(LinePricer):
    """Interior items: area = length x width, total = area x price per sqft."""

    name = "area"

    def price_item(self, raw: Mapping[str, Any], line: int) -> Row:
        room_type = _text(raw, "room_type")
        if not room_type:
            raise ValidationError(f"Item {line}: room_type is required")
        room_type = room_type.lower()
        if room_type not in ROOM_TYPES:
            raise ValidationError(
                f"Item {line}: unknown room_type {room_type!r}. "
                f"Expected one of: {', '.join(ROOM_TYPES)}"
            )

        custom_room_type = _text(raw, "custom_room_type")
        if room_type == CUSTOM_ROOM_TYPE and not custom_room_type:
            raise ValidationError(f"Item {line}: custom_room_type is required for custom rooms")
        if room_type != CUSTOM_ROOM_TYPE:
            custom_room_type = None

        length = _positive(raw, "length", line)
        width = _positive(raw, "width", line)
        price_per_sqft = _positive(raw, "price_per_sqft", line)

        price_source = (_text(raw, "price_source") or PRICE_SOURCE_CUSTOM).upper()
        if price_source not in PRICE_SOURCES:
            raise ValidationError(f"Item {line}: price_source must be PREDEFINED or CUSTOM")

        area = length * width
        return {
            "room_type": room_type,
            "custom_room_type": custom_room_type,
            "length": length,
            "width": width,
            "area": area,
            "price_per_sqft": price_per_sqft,
            "total_price": area * price_per_sqft,
            "price_source": price_source,
            "description": _text(raw, "description"),
        }

    def item_title(self, item: Any) -> str:
        if item.room_type == CUSTOM_ROOM_TYPE and item.custom_room_type:
            return item.custom_room_type
        return ROOM_TYPES.get(item.room_type, item.room_type)

    def item_description(self, item: Any) -> Optional[str]:
        return item.description


class AreaOrQuantityPricer(LinePricer):
    """
    POP items: exactly one pricing mode per item.

    area mode:     area = length x width, total = area x price_per_sqft
    quantity mode: total = quantity x unit_price

    A caller-supplied ``total_price`` is never trusted.
    """

    name = "area_or_quantity"

    AREA_FIELDS = ("length", "width", "price_per_sqft")
    QUANTITY_FIELDS = ("quantity", "unit_price")

    def _mode(self, raw: Mapping[str, Any], line: int) -> str:
        explicit = _text(raw, "pricing_mode")
        if explicit:
            explicit = explicit.lower()
            if explicit not in (MODE_AREA, MODE_QUANTITY):
                raise ValidationError(f"Item {line}: pricing_mode must be 'area' or 'quantity'")
            return explicit

        has_area = any(_present(raw, f) for f in self.AREA_FIELDS)
        has_quantity = any(_present(raw, f) for f in self.QUANTITY_FIELDS)
        if has_area and has_quantity:
            raise ValidationError(
                f"Item {line}: use either area pricing (length, width, price_per_sqft) "
                "or quantity pricing (quantity, unit_price), not both"
            )
        if has_quantity:
            return MODE_QUANTITY
        if has_area:
            return MODE_AREA
        raise ValidationError(
            f"Item {line}: pricing is required, either length, width and price_per_sqft "
            "or quantity and unit_price"
        )

    def price_item(self, raw: Mapping[str, Any], line: int) -> Row:
        description = _text(raw, "description")
        if not description:
            raise ValidationError(f"Item {line}: description is required")

        row: Row = {
            "description": description,
            "length": None,
            "width": None,
            "area": None,
            "price_per_sqft": None,
            "quantity": None,
            "unit_price": None,
        }

        if self._mode(raw, line) == MODE_AREA:
            length = _positive(raw, "length", line)
            width = _positive(raw, "width", line)
            price_per_sqft = _positive(raw, "price_per_sqft", line)
            area = length * width
            row.update(
                length=length,
                width=width,
                area=area,
                price_per_sqft=price_per_sqft,
                total_price=area * price_per_sqft,
            )
        else:
            quantity = _positive(raw, "quantity", line)
            unit_price = _positive(raw, "unit_price", line)
            row.update(quantity=quantity, unit_price=unit_price, total_price=quantity * unit_price)

        return row

    def item_title(self, item: Any) -> str:
        return item.description
