# quotebook/schemas/pop.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from quotebook.schemas.quotation import ClientFields, DocumentOut


class POPItemIn(BaseModel):
    """
    Either area pricing (length, width, price_per_sqft) or quantity pricing
    (quantity, unit_price). ``area`` and ``total_price`` may be sent by older
    clients but are always recomputed.
    """

    description: Optional[str] = None
    pricing_mode: Optional[str] = Field(None, description="area or quantity; inferred when omitted")
    length: Optional[float] = None
    width: Optional[float] = None
    area: Optional[float] = None
    price_per_sqft: Optional[float] = None
    quantity: Optional[float] = None
    unit_price: Optional[float] = None
    total_price: Optional[float] = None


class POPQuotationCreate(ClientFields):
    items: List[POPItemIn] = Field(default_factory=list)


class POPQuotationUpdate(ClientFields):
    items: Optional[List[POPItemIn]] = None


class POPItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    position: int
    description: str
    pricing_mode: str
    length: Optional[float] = None
    width: Optional[float] = None
    area: Optional[float] = None
    price_per_sqft: Optional[float] = None
    quantity: Optional[float] = None
    unit_price: Optional[float] = None
    total_price: float


class POPQuotationOut(DocumentOut):
    items: List[POPItemOut]
