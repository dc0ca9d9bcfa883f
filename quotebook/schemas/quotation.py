# quotebook/schemas/quotation.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ClientFields(BaseModel):
    client_name: Optional[str] = Field(None, description="Client name (required on create)")
    client_phone: Optional[str] = None
    client_email: Optional[str] = None
    client_address: Optional[str] = None
    notes: Optional[str] = None
    status: Optional[str] = Field(None, description="DRAFT or FINALIZED")


class QuotationItemIn(BaseModel):
    """Raw interior line item; area and total_price are derived server-side."""

    room_type: Optional[str] = Field(None, description="kitchen, wardrobe, ... or custom")
    custom_room_type: Optional[str] = None
    length: Optional[float] = Field(None, description="Length in feet")
    width: Optional[float] = Field(None, description="Width in feet")
    price_per_sqft: Optional[float] = None
    price_source: Optional[str] = Field(None, description="PREDEFINED or CUSTOM")
    description: Optional[str] = None


class QuotationCreate(ClientFields):
    items: List[QuotationItemIn] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "client_name": "Asha",
                "client_phone": "+91 98765 43210",
                "status": "DRAFT",
                "items": [
                    {"room_type": "kitchen", "length": 10, "width": 8, "price_per_sqft": 150}
                ],
            }
        }
    )


class QuotationUpdate(ClientFields):
    """Only the fields that are sent are changed; items are replaced wholesale."""

    items: Optional[List[QuotationItemIn]] = None


class QuotationItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    position: int
    room_type: str
    custom_room_type: Optional[str] = None
    length: float
    width: float
    area: float
    price_per_sqft: float
    total_price: float
    price_source: str
    description: Optional[str] = None


class ProgressIn(BaseModel):
    status: str = Field(..., description="NOT_STARTED, IN_PROGRESS or COMPLETED")
    percentage: int = Field(..., description="0..100")
    note: Optional[str] = None


class ProgressOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    status: str
    percentage: int
    updated_by: str
    note: Optional[str] = None
    created_at: datetime


class DocumentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    quotation_number: str
    client_name: str
    client_phone: Optional[str] = None
    client_email: Optional[str] = None
    client_address: Optional[str] = None
    notes: Optional[str] = None
    status: str
    total_amount: float
    finalized_at: Optional[datetime] = None
    owner_id: str
    created_at: datetime
    updated_at: datetime


class QuotationOut(DocumentOut):
    items: List[QuotationItemOut]
    progress: List[ProgressOut] = Field(default_factory=list)
    latest_progress: Optional[ProgressOut] = None
