# quotebook/services/catalog.py
"""Per-owner price list (predefined price per sqft) and material list."""
from __future__ import annotations

import math
from typing import Any, List, Mapping, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from quotebook.core.errors import NotFoundError, StorageError, ValidationError
from quotebook.core.logging_config import logger
from quotebook.models.catalog import Material, PredefinedPricing


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _price(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Price must be a number")
    if not math.isfinite(price) or price <= 0:
        raise ValidationError("Price must be greater than 0")
    return price


PRICING_TYPE_TAKEN = "Pricing for this type already exists. Please update instead."


def _is_pricing_type_conflict(exc: IntegrityError) -> bool:
    msg = str(getattr(exc, "orig", exc)).lower()
    # postgres names the constraint, sqlite lists its columns
    return "uq_predefined_pricing_owner_type" in msg or "predefined_pricing.owner_id, predefined_pricing.type" in msg


def _save(db: Session, event: str, **context) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if _is_pricing_type_conflict(e):
            raise ValidationError(PRICING_TYPE_TAKEN) from e
        logger.exception(event + "_failed", **context)
        raise StorageError("Failed to save catalog entry") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(event + "_failed", **context)
        raise StorageError("Failed to save catalog entry") from e


# ----------------------------------------------------------------------
# Predefined pricing
# ----------------------------------------------------------------------
def list_pricing(db: Session, owner_id: str) -> List[PredefinedPricing]:
    return list(
        db.scalars(
            select(PredefinedPricing)
            .where(PredefinedPricing.owner_id == owner_id)
            .order_by(PredefinedPricing.type.asc())
        ).all()
    )


def get_pricing(db: Session, owner_id: str, pricing_id: str) -> PredefinedPricing:
    pricing = db.scalars(
        select(PredefinedPricing).where(
            PredefinedPricing.id == pricing_id, PredefinedPricing.owner_id == owner_id
        )
    ).first()
    if pricing is None:
        raise NotFoundError("Pricing not found")
    return pricing


def lookup_price(db: Session, owner_id: str, type_: str) -> Optional[float]:
    """Advisory price per sqft for a room type; None when the owner has none."""
    return db.scalar(
        select(PredefinedPricing.price_per_sqft).where(
            PredefinedPricing.owner_id == owner_id,
            PredefinedPricing.type == (type_ or "").strip(),
        )
    )


def _pricing_fields(data: Mapping[str, Any]) -> dict:
    type_ = _text(data.get("type"))
    price = _price(data.get("price_per_sqft"))
    if not type_ or price is None:
        raise ValidationError("Type and price per sqft are required")
    return {"type": type_, "price_per_sqft": price, "description": _text(data.get("description"))}


def _type_taken(db: Session, owner_id: str, type_: str, exclude_id: Optional[str] = None) -> bool:
    stmt = select(PredefinedPricing.id).where(
        PredefinedPricing.owner_id == owner_id, PredefinedPricing.type == type_
    )
    if exclude_id:
        stmt = stmt.where(PredefinedPricing.id != exclude_id)
    return db.scalar(stmt) is not None


def create_pricing(db: Session, owner_id: str, data: Mapping[str, Any]) -> PredefinedPricing:
    fields = _pricing_fields(data)
    if _type_taken(db, owner_id, fields["type"]):
        raise ValidationError(PRICING_TYPE_TAKEN)

    pricing = PredefinedPricing(owner_id=owner_id, **fields)
    db.add(pricing)
    _save(db, "pricing_create", owner_id=owner_id, type=fields["type"])
    logger.info("pricing_created", owner_id=owner_id, type=pricing.type, price_per_sqft=pricing.price_per_sqft)
    return pricing


def update_pricing(db: Session, owner_id: str, pricing_id: str, data: Mapping[str, Any]) -> PredefinedPricing:
    fields = _pricing_fields(data)
    pricing = get_pricing(db, owner_id, pricing_id)
    if _type_taken(db, owner_id, fields["type"], exclude_id=pricing.id):
        raise ValidationError(PRICING_TYPE_TAKEN)

    for key, value in fields.items():
        setattr(pricing, key, value)
    _save(db, "pricing_update", owner_id=owner_id, pricing_id=pricing_id)
    return pricing


def delete_pricing(db: Session, owner_id: str, pricing_id: str) -> None:
    pricing = get_pricing(db, owner_id, pricing_id)
    db.delete(pricing)
    _save(db, "pricing_delete", owner_id=owner_id, pricing_id=pricing_id)


# ----------------------------------------------------------------------
# Materials
# ----------------------------------------------------------------------
def list_materials(db: Session, owner_id: str) -> List[Material]:
    return list(
        db.scalars(
            select(Material).where(Material.owner_id == owner_id).order_by(Material.name.asc())
        ).all()
    )


def count_materials(db: Session, owner_id: str) -> int:
    return db.scalar(select(func.count(Material.id)).where(Material.owner_id == owner_id)) or 0


def get_material(db: Session, owner_id: str, material_id: str) -> Material:
    material = db.scalars(
        select(Material).where(Material.id == material_id, Material.owner_id == owner_id)
    ).first()
    if material is None:
        raise NotFoundError("Material not found")
    return material


def _material_fields(data: Mapping[str, Any]) -> dict:
    name = _text(data.get("name"))
    price = _price(data.get("price"))
    unit = _text(data.get("unit"))
    if not name or price is None or not unit:
        raise ValidationError("Name, price, and unit are required")
    return {"name": name, "price": price, "unit": unit, "description": _text(data.get("description"))}


def create_material(db: Session, owner_id: str, data: Mapping[str, Any]) -> Material:
    material = Material(owner_id=owner_id, **_material_fields(data))
    db.add(material)
    _save(db, "material_create", owner_id=owner_id)
    logger.info("material_created", owner_id=owner_id, material_id=material.id, name=material.name)
    return material


def update_material(db: Session, owner_id: str, material_id: str, data: Mapping[str, Any]) -> Material:
    fields = _material_fields(data)
    material = get_material(db, owner_id, material_id)
    for key, value in fields.items():
        setattr(material, key, value)
    _save(db, "material_update", owner_id=owner_id, material_id=material_id)
    return material


def delete_material(db: Session, owner_id: str, material_id: str) -> None:
    material = get_material(db, owner_id, material_id)
    db.delete(material)
    _save(db, "material_delete", owner_id=owner_id, material_id=material_id)
