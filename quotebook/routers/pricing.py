# quotebook/routers/pricing.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from quotebook.auth.deps import get_current_user
from quotebook.db import get_db
from quotebook.models.user import User
from quotebook.schemas.catalog import PricingIn, PricingLookupOut, PricingOut
from quotebook.services import catalog

router = APIRouter(prefix="/pricing", tags=["pricing"])


@router.get("", response_model=List[PricingOut])
def list_pricing(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return [PricingOut.model_validate(p) for p in catalog.list_pricing(db, user.id)]


@router.post("", response_model=PricingOut, status_code=201)
def create_pricing(
    payload: PricingIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return PricingOut.model_validate(catalog.create_pricing(db, user.id, payload.model_dump()))


@router.get("/lookup", response_model=PricingLookupOut)
def lookup_pricing(
    type: str = Query(..., min_length=1, description="Room type, e.g. kitchen"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return PricingLookupOut(type=type, price_per_sqft=catalog.lookup_price(db, user.id, type))


@router.get("/{pricing_id}", response_model=PricingOut)
def get_pricing(
    pricing_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return PricingOut.model_validate(catalog.get_pricing(db, user.id, pricing_id))


@router.put("/{pricing_id}", response_model=PricingOut)
def update_pricing(
    pricing_id: str,
    payload: PricingIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    pricing = catalog.update_pricing(db, user.id, pricing_id, payload.model_dump())
    return PricingOut.model_validate(pricing)


@router.delete("/{pricing_id}")
def delete_pricing(
    pricing_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    catalog.delete_pricing(db, user.id, pricing_id)
    return {"success": True}
