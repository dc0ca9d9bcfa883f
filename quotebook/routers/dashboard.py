# quotebook/routers/dashboard.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quotebook.auth.deps import get_current_user
from quotebook.db import get_db
from quotebook.models.user import User
from quotebook.schemas.dashboard import DashboardStats
from quotebook.services import catalog
from quotebook.services.documents import pop_service, quotation_service
from quotebook.workflow.status import DocumentStatus

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    quotations = quotation_service.counts(db, user.id)
    return DashboardStats(
        total_quotations=quotations["total"],
        draft_quotations=quotations[DocumentStatus.DRAFT.value],
        finalized_quotations=quotations[DocumentStatus.FINALIZED.value],
        total_pop_quotations=pop_service.counts(db, user.id)["total"],
        total_materials=catalog.count_materials(db, user.id),
    )
