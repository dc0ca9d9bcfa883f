# quotebook/routers/pop.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from quotebook.auth.deps import get_current_user
from quotebook.core.rate_limit import limiter
from quotebook.core.settings import settings
from quotebook.db import get_db
from quotebook.models.user import User
from quotebook.routers._document import DOCUMENT_FORMAT_PATTERN, document_response
from quotebook.schemas.pop import POPQuotationCreate, POPQuotationOut, POPQuotationUpdate
from quotebook.services.documents import pop_service

router = APIRouter(prefix="/pop", tags=["pop"])


@router.post("", response_model=POPQuotationOut, status_code=201)
@limiter.limit(settings.RATE_LIMIT_QUOTE_CREATE)
def create_pop_quotation(
    request: Request,
    payload: POPQuotationCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    doc = pop_service.create(db, user, payload.model_dump())
    return POPQuotationOut.model_validate(doc)


@router.get("", response_model=List[POPQuotationOut])
def list_pop_quotations(
    status: Optional[str] = Query(None, description="DRAFT or FINALIZED"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return [POPQuotationOut.model_validate(d) for d in pop_service.list(db, user.id, status)]


@router.get("/{quotation_id}", response_model=POPQuotationOut)
def get_pop_quotation(
    quotation_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return POPQuotationOut.model_validate(pop_service.get(db, user.id, quotation_id))


@router.put("/{quotation_id}", response_model=POPQuotationOut)
def update_pop_quotation(
    quotation_id: str,
    payload: POPQuotationUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    doc = pop_service.update(db, user, quotation_id, payload.model_dump(exclude_unset=True))
    return POPQuotationOut.model_validate(doc)


@router.delete("/{quotation_id}")
def delete_pop_quotation(
    quotation_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    pop_service.delete(db, user, quotation_id)
    return {"success": True}


@router.get("/{quotation_id}/document")
def pop_document(
    quotation_id: str,
    format: str = Query("html", pattern=DOCUMENT_FORMAT_PATTERN),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return document_response(pop_service.snapshot(db, user.id, quotation_id), format)
