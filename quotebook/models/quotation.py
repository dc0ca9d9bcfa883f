# quotebook/models/quotation.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quotebook.db import Base
from quotebook.models.mixins import NumberedDocumentMixin, utcnow


class Quotation(NumberedDocumentMixin, Base):
    """Interior quotation (QT-<year>-<seq>)."""

    __tablename__ = "quotations"
    __table_args__ = (
        CheckConstraint(
            "(status = 'FINALIZED') = (finalized_at IS NOT NULL)",
            name="ck_quotations_finalized_at",
        ),
    )

    items: Mapped[List["QuotationItem"]] = relationship(
        "QuotationItem",
        back_populates="quotation",
        order_by="QuotationItem.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    progress: Mapped[List["QuotationProgress"]] = relationship(
        "QuotationProgress",
        back_populates="quotation",
        order_by=lambda: [QuotationProgress.created_at.desc(), QuotationProgress.id.desc()],
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def latest_progress(self) -> Optional["QuotationProgress"]:
        return self.progress[0] if self.progress else None

    def __repr__(self) -> str:
        return f"<Quotation id={self.id} number={self.quotation_number} status={self.status}>"


class QuotationItem(Base):
    __tablename__ = "quotation_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    quotation_id: Mapped[str] = mapped_column(
        ForeignKey("quotations.id", ondelete="CASCADE"), index=True, nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    room_type: Mapped[str] = mapped_column(String(50), nullable=False)
    custom_room_type: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    # feet
    length: Mapped[float] = mapped_column(Float, nullable=False)
    width: Mapped[float] = mapped_column(Float, nullable=False)
    area: Mapped[float] = mapped_column(Float, nullable=False)
    price_per_sqft: Mapped[float] = mapped_column(Float, nullable=False)
    total_price: Mapped[float] = mapped_column(Float, nullable=False)

    price_source: Mapped[str] = mapped_column(String(20), nullable=False, default="CUSTOM")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    quotation: Mapped["Quotation"] = relationship("Quotation", back_populates="items")


class QuotationProgress(Base):
    """Append-only progress history of a finalized interior quotation."""

    __tablename__ = "quotation_progress"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    quotation_id: Mapped[str] = mapped_column(
        ForeignKey("quotations.id", ondelete="CASCADE"), index=True, nullable=False
    )

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="NOT_STARTED")
    percentage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    updated_by: Mapped[str] = mapped_column(String(200), nullable=False)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False
    )

    quotation: Mapped["Quotation"] = relationship("Quotation", back_populates="progress")

    def __repr__(self) -> str:
        return (
            f"<QuotationProgress quotation_id={self.quotation_id} "
            f"status={self.status} percentage={self.percentage}>"
        )
