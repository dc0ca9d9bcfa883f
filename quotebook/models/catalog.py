# quotebook/models/catalog.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import Float, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from quotebook.db import Base
from quotebook.models.mixins import TimestampMixin, new_id


class PredefinedPricing(TimestampMixin, Base):
    """Advisory price per sqft for a room type; pre-fills the item form."""

    __tablename__ = "predefined_pricing"
    __table_args__ = (
        UniqueConstraint("owner_id", "type", name="uq_predefined_pricing_owner_type"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    owner_id: Mapped[str] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)

    type: Mapped[str] = mapped_column(String(100), nullable=False)
    price_per_sqft: Mapped[float] = mapped_column(Float, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<PredefinedPricing owner={self.owner_id} type={self.type!r} price={self.price_per_sqft}>"


class Material(TimestampMixin, Base):
    __tablename__ = "materials"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    owner_id: Mapped[str] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    unit: Mapped[str] = mapped_column(String(50), nullable=False)

    def __repr__(self) -> str:
        return f"<Material owner={self.owner_id} name={self.name!r}>"
