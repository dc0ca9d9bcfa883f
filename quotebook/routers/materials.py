# quotebook/routers/materials.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quotebook.auth.deps import get_current_user
from quotebook.db import get_db
from quotebook.models.user import User
from quotebook.schemas.catalog import MaterialIn, MaterialOut
from quotebook.services import catalog

router = APIRouter(prefix="/materials", tags=["materials"])


@router.get("", response_model=List[MaterialOut])
def list_materials(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return [MaterialOut.model_validate(m) for m in catalog.list_materials(db, user.id)]


@router.post("", response_model=MaterialOut, status_code=201)
def create_material(
    payload: MaterialIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return MaterialOut.model_validate(catalog.create_material(db, user.id, payload.model_dump()))


@router.get("/{material_id}", response_model=MaterialOut)
def get_material(
    material_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return MaterialOut.model_validate(catalog.get_material(db, user.id, material_id))


@router.put("/{material_id}", response_model=MaterialOut)
def update_material(
    material_id: str,
    payload: MaterialIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    material = catalog.update_material(db, user.id, material_id, payload.model_dump())
    return MaterialOut.model_validate(material)


@router.delete("/{material_id}")
def delete_material(
    material_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    catalog.delete_material(db, user.id, material_id)
    return {"success": True}
