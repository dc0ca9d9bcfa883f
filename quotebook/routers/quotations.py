# quotebook/routers/quotations.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from quotebook.auth.deps import get_current_user
from quotebook.core.rate_limit import limiter
from quotebook.core.settings import settings
from quotebook.db import get_db
from quotebook.models.user import User
from quotebook.routers._document import DOCUMENT_FORMAT_PATTERN, document_response
from quotebook.schemas.quotation import (
    ProgressIn,
    ProgressOut,
    QuotationCreate,
    QuotationOut,
    QuotationUpdate,
)
from quotebook.services.documents import quotation_service

router = APIRouter(prefix="/quotations", tags=["quotations"])


@router.post("", response_model=QuotationOut, status_code=201)
@limiter.limit(settings.RATE_LIMIT_QUOTE_CREATE)
def create_quotation(
    request: Request,
    payload: QuotationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    doc = quotation_service.create(db, user, payload.model_dump())
    return QuotationOut.model_validate(doc)


@router.get("", response_model=List[QuotationOut])
def list_quotations(
    status: Optional[str] = Query(None, description="DRAFT or FINALIZED"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    docs = quotation_service.list(db, user.id, status)
    return [QuotationOut.model_validate(d) for d in docs]


@router.get("/{quotation_id}", response_model=QuotationOut)
def get_quotation(
    quotation_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return QuotationOut.model_validate(quotation_service.get(db, user.id, quotation_id))


@router.put("/{quotation_id}", response_model=QuotationOut)
def update_quotation(
    quotation_id: str,
    payload: QuotationUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    doc = quotation_service.update(db, user, quotation_id, payload.model_dump(exclude_unset=True))
    return QuotationOut.model_validate(doc)


@router.delete("/{quotation_id}")
def delete_quotation(
    quotation_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    quotation_service.delete(db, user, quotation_id)
    return {"success": True}


@router.get("/{quotation_id}/progress", response_model=List[ProgressOut])
def list_progress(
    quotation_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    entries = quotation_service.list_progress(db, user.id, quotation_id)
    return [ProgressOut.model_validate(p) for p in entries]


@router.post("/{quotation_id}/progress", response_model=ProgressOut, status_code=201)
def add_progress(
    quotation_id: str,
    payload: ProgressIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    entry = quotation_service.add_progress(
        db, user, quotation_id, payload.status, payload.percentage, payload.note
    )
    return ProgressOut.model_validate(entry)


@router.get("/{quotation_id}/document")
def quotation_document(
    quotation_id: str,
    format: str = Query("html", pattern=DOCUMENT_FORMAT_PATTERN),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    snapshot = quotation_service.snapshot(db, user.id, quotation_id)
    return document_response(snapshot, format)
