# quotebook/services/documents.py
"""
Numbered documents (interior quotations and POP quotations).

Both kinds share one service; a ``DocumentKind`` supplies the number
prefix, the ORM models, the line pricer and the finalize hook. Each write
runs as a single transaction: number, items, total, status and progress
are committed together or not at all.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional
from zoneinfo import ZoneInfo

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from quotebook.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from quotebook.core.logging_config import logger
from quotebook.core.settings import settings
from quotebook.infra.retry import retry_on
from quotebook.models.pop import POPItem, POPQuotation
from quotebook.models.quotation import Quotation, QuotationItem, QuotationProgress
from quotebook.models.user import User
from quotebook.services.numbering import allocate, current_year
from quotebook.services.pricing import (
    AreaOrQuantityPricer,
    AreaPricer,
    LinePricer,
    MODE_QUANTITY,
)
from quotebook.workflow.status import (
    DocumentStatus,
    FinalizeHook,
    apply_transition,
    ensure_mutable,
    parse_status,
    record_progress,
    seed_progress,
)

CLIENT_FIELDS = ("client_phone", "client_email", "client_address", "notes")


@dataclass(frozen=True)
class DocumentKind:
    name: str
    prefix: str
    label: str
    model: Any
    item_model: Any
    pricer: LinePricer
    on_finalize: Optional[FinalizeHook] = None
    tracks_progress: bool = False


QUOTATION_KIND = DocumentKind(
    name="quotation",
    prefix="QT",
    label="quotation",
    model=Quotation,
    item_model=QuotationItem,
    pricer=AreaPricer(),
    on_finalize=seed_progress,
    tracks_progress=True,
)

POP_KIND = DocumentKind(
    name="pop",
    prefix="POP",
    label="POP quotation",
    model=POPQuotation,
    item_model=POPItem,
    pricer=AreaOrQuantityPricer(),
)


@dataclass
class SnapshotLine:
    title: str
    description: Optional[str]
    mode: str
    length: Optional[float]
    width: Optional[float]
    area: Optional[float]
    rate: float
    quantity: Optional[float]
    total_price: float


@dataclass
class DocumentSnapshot:
    """Read-only projection handed to the document renderer."""

    kind: str
    quotation_number: str
    status: str
    client_name: str
    client_phone: Optional[str]
    client_email: Optional[str]
    client_address: Optional[str]
    notes: Optional[str]
    total_amount: float
    issued_on: date
    valid_until: date
    lines: List[SnapshotLine] = field(default_factory=list)


def _is_number_conflict(exc: IntegrityError) -> bool:
    msg = str(getattr(exc, "orig", exc)).lower()
    return "quotation_number" in msg or "document_counters" in msg


def _local_date(value: datetime) -> date:
    if value.tzinfo is None:
        # SQLite hands back naive UTC
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(ZoneInfo(settings.TIMEZONE)).date()


class DocumentService:
    def __init__(self, kind: DocumentKind, max_attempts: Optional[int] = None):
        self.kind = kind
        self.max_attempts = max_attempts or settings.NUMBERING_MAX_ATTEMPTS

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    def _query(self):
        model = self.kind.model
        options = [selectinload(model.items)]
        if self.kind.tracks_progress:
            options.append(selectinload(model.progress))
        return select(model).options(*options)

    def list(self, db: Session, owner_id: str, status: Optional[str] = None) -> list:
        model = self.kind.model
        stmt = self._query().where(model.owner_id == owner_id)

        wanted = parse_status(status)
        if wanted is not None:
            stmt = stmt.where(model.status == wanted.value)

        stmt = stmt.order_by(model.created_at.desc(), model.quotation_number.desc())
        return list(db.scalars(stmt).all())

    def counts(self, db: Session, owner_id: str) -> Dict[str, int]:
        """Number of the owner's documents per status, plus ``total``."""
        model = self.kind.model
        rows = db.execute(
            select(model.status, func.count(model.id))
            .where(model.owner_id == owner_id)
            .group_by(model.status)
        ).all()

        counts = {s.value: 0 for s in DocumentStatus}
        counts.update({status: n for status, n in rows})
        counts["total"] = sum(n for _, n in rows)
        return counts

    def get(self, db: Session, owner_id: str, doc_id: str):
        model = self.kind.model
        doc = db.scalars(
            self._query().where(model.id == doc_id, model.owner_id == owner_id)
        ).first()
        if doc is None:
            raise NotFoundError(f"{self.kind.label.capitalize()} not found")
        return doc

    def _write_query(self, doc_id: str):
        # row stays locked until commit, so concurrent writes to one document queue up
        return self._query().where(self.kind.model.id == doc_id).with_for_update()

    def _get_for_write(self, db: Session, owner_id: str, doc_id: str, action: str):
        doc = db.scalars(self._write_query(doc_id)).first()
        if doc is None:
            raise NotFoundError(f"{self.kind.label.capitalize()} not found")
        if doc.owner_id != owner_id:
            raise ForbiddenError(f"Unauthorized to {action} this {self.kind.label}")
        return doc

    # ------------------------------------------------------------------
    # writes
    # ------------------------------------------------------------------
    def _client_name(self, value: Any) -> str:
        name = str(value).strip() if value is not None else ""
        if not name:
            raise ValidationError("Client name is required")
        return name

    def _build_items(self, rows: List[dict]) -> list:
        return [self.kind.item_model(**row) for row in rows]

    def _commit(self, db: Session, event: str, **context) -> None:
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if _is_number_conflict(e):
                raise ConflictError("Quotation number already issued") from e
            logger.exception(event + "_failed", kind=self.kind.name, **context)
            raise StorageError(f"Failed to save {self.kind.label}") from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception(event + "_failed", kind=self.kind.name, **context)
            raise StorageError(f"Failed to save {self.kind.label}") from e

    def create(self, db: Session, owner: User, data: Mapping[str, Any]):
        """Validate, number, price and persist a new document."""
        client_name = self._client_name(data.get("client_name"))
        requested = parse_status(data.get("status"))
        rows = self.kind.pricer.price_items(data.get("items"))
        total = self.kind.pricer.total(rows)

        def attempt():
            try:
                number = allocate(db, self.kind.model, self.kind.prefix, current_year())
                doc = self.kind.model(
                    quotation_number=number,
                    owner_id=owner.id,
                    client_name=client_name,
                    status=DocumentStatus.DRAFT.value,
                    total_amount=total,
                    **{f: data.get(f) for f in CLIENT_FIELDS},
                )
                doc.items = self._build_items(rows)
                db.add(doc)
                apply_transition(db, doc, requested, owner, self.kind.on_finalize)
            except SQLAlchemyError as e:
                db.rollback()
                logger.exception("document_create_failed", kind=self.kind.name, owner_id=owner.id)
                raise StorageError(f"Failed to create {self.kind.label}") from e
            except Exception:
                db.rollback()
                raise
            self._commit(db, "document_create", owner_id=owner.id, quotation_number=number)
            return doc

        doc = retry_on(
            attempt,
            attempts=self.max_attempts,
            is_retryable=lambda e: isinstance(e, ConflictError),
        )

        logger.info(
            "document_created",
            kind=self.kind.name,
            owner_id=owner.id,
            quotation_id=doc.id,
            quotation_number=doc.quotation_number,
            status=doc.status,
            total_amount=doc.total_amount,
        )
        return doc

    def update(self, db: Session, owner: User, doc_id: str, data: Mapping[str, Any]):
        """
        Apply the fields present in ``data``. ``items``, when present,
        replace the existing items and the total is recomputed.
        """
        doc = self._get_for_write(db, owner.id, doc_id, "update")
        ensure_mutable(doc, "edit")

        requested = parse_status(data.get("status"))
        client_name = self._client_name(data["client_name"]) if "client_name" in data else None
        rows = self.kind.pricer.price_items(data["items"]) if "items" in data else None

        try:
            if client_name is not None:
                doc.client_name = client_name
            for f in CLIENT_FIELDS:
                if f in data:
                    setattr(doc, f, data[f])
            if rows is not None:
                doc.items = self._build_items(rows)
                doc.total_amount = self.kind.pricer.total(rows)
            result = apply_transition(db, doc, requested, owner, self.kind.on_finalize)
        except Exception:
            db.rollback()
            raise

        self._commit(db, "document_update", owner_id=owner.id, quotation_id=doc.id)
        logger.info(
            "document_updated",
            kind=self.kind.name,
            owner_id=owner.id,
            quotation_id=doc.id,
            items_replaced=rows is not None,
            finalized=result.finalized,
        )
        return doc

    def delete(self, db: Session, owner: User, doc_id: str) -> None:
        doc = self._get_for_write(db, owner.id, doc_id, "delete")
        ensure_mutable(doc, "delete")

        number = doc.quotation_number
        db.delete(doc)
        self._commit(db, "document_delete", owner_id=owner.id, quotation_id=doc_id)
        logger.info("document_deleted", kind=self.kind.name, owner_id=owner.id, quotation_number=number)

    # ------------------------------------------------------------------
    # progress (interior only)
    # ------------------------------------------------------------------
    def _require_progress(self) -> None:
        if not self.kind.tracks_progress:
            raise ValidationError(f"Progress is not tracked for {self.kind.label}s")

    def list_progress(self, db: Session, owner_id: str, doc_id: str) -> List[QuotationProgress]:
        self._require_progress()
        return list(self.get(db, owner_id, doc_id).progress)

    def add_progress(
        self,
        db: Session,
        owner: User,
        doc_id: str,
        status: str,
        percentage: Any,
        note: Optional[str] = None,
    ) -> QuotationProgress:
        self._require_progress()
        doc = self.get(db, owner.id, doc_id)
        try:
            entry = record_progress(db, doc, owner, status, percentage, note)
        except Exception:
            db.rollback()
            raise
        self._commit(db, "progress_record", owner_id=owner.id, quotation_id=doc.id)
        logger.info(
            "progress_recorded",
            quotation_id=doc.id,
            status=entry.status,
            percentage=entry.percentage,
        )
        return entry

    # ------------------------------------------------------------------
    # rendering projection
    # ------------------------------------------------------------------
    def snapshot(self, db: Session, owner_id: str, doc_id: str) -> DocumentSnapshot:
        doc = self.get(db, owner_id, doc_id)
        issued_on = _local_date(doc.created_at)

        lines = []
        for item in doc.items:
            mode = getattr(item, "pricing_mode", "area")
            lines.append(
                SnapshotLine(
                    title=self.kind.pricer.item_title(item),
                    description=self.kind.pricer.item_description(item),
                    mode=mode,
                    length=item.length,
                    width=item.width,
                    area=item.area,
                    rate=item.unit_price if mode == MODE_QUANTITY else item.price_per_sqft,
                    quantity=getattr(item, "quantity", None),
                    total_price=item.total_price,
                )
            )

        return DocumentSnapshot(
            kind=self.kind.name,
            quotation_number=doc.quotation_number,
            status=doc.status,
            client_name=doc.client_name,
            client_phone=doc.client_phone,
            client_email=doc.client_email,
            client_address=doc.client_address,
            notes=doc.notes,
            total_amount=doc.total_amount,
            issued_on=issued_on,
            valid_until=issued_on + timedelta(days=settings.QUOTATION_VALIDITY_DAYS),
            lines=lines,
        )


quotation_service = DocumentService(QUOTATION_KIND)
pop_service = DocumentService(POP_KIND)
