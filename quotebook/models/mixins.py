# quotebook/models/mixins.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class TimestampMixin:
    # python-side defaults keep microseconds, which the listings order by
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )


class NumberedDocumentMixin(TimestampMixin):
    """Columns shared by every numbered document kind (QT, POP)."""

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    quotation_number: Mapped[str] = mapped_column(
        String(32), unique=True, index=True, nullable=False
    )
    owner_id: Mapped[str] = mapped_column(
        ForeignKey("users.id"), index=True, nullable=False
    )

    client_name: Mapped[str] = mapped_column(String(200), nullable=False)
    client_phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    client_email: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    client_address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="DRAFT", index=True
    )
    total_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    finalized_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
