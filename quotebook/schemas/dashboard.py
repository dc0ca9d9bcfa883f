from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_quotations: int = 0
    draft_quotations: int = 0
    finalized_quotations: int = 0
    total_pop_quotations: int = 0
    total_materials: int = 0
