# quotebook/schemas/catalog.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class PricingIn(BaseModel):
    type: Optional[str] = None
    price_per_sqft: Optional[float] = None
    description: Optional[str] = None


class PricingOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    type: str
    price_per_sqft: float
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class MaterialIn(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    unit: Optional[str] = None


class MaterialOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    price: float
    unit: str
    created_at: datetime
    updated_at: datetime


class PricingLookupOut(BaseModel):
    """Pre-fill value for an item form; ``price_per_sqft`` is None when no price is set."""

    type: str
    price_per_sqft: Optional[float] = None
