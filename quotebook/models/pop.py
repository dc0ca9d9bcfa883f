# quotebook/models/pop.py
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import CheckConstraint, Float, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quotebook.db import Base
from quotebook.models.mixins import NumberedDocumentMixin


class POPQuotation(NumberedDocumentMixin, Base):
    """Plaster of Paris quotation (POP-<year>-<seq>). No progress tracking."""

    __tablename__ = "pop_quotations"
    __table_args__ = (
        CheckConstraint(
            "(status = 'FINALIZED') = (finalized_at IS NOT NULL)",
            name="ck_pop_quotations_finalized_at",
        ),
    )

    items: Mapped[List["POPItem"]] = relationship(
        "POPItem",
        back_populates="quotation",
        order_by="POPItem.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<POPQuotation id={self.id} number={self.quotation_number} status={self.status}>"


class POPItem(Base):
    """
    One POP row, priced either by area (length, width, area, price_per_sqft)
    or by quantity (quantity, unit_price). The other mode's columns are null.
    """

    __tablename__ = "pop_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pop_quotation_id: Mapped[str] = mapped_column(
        ForeignKey("pop_quotations.id", ondelete="CASCADE"), index=True, nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    description: Mapped[str] = mapped_column(Text, nullable=False)

    length: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    width: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    area: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    price_per_sqft: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    quantity: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    unit_price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    total_price: Mapped[float] = mapped_column(Float, nullable=False)

    quotation: Mapped["POPQuotation"] = relationship("POPQuotation", back_populates="items")

    @property
    def pricing_mode(self) -> str:
        return "quantity" if self.quantity is not None else "area"
