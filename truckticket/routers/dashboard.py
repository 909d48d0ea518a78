from fastapi import APIRouter, Depends

from truckticket.api import deps
from truckticket.schemas.dashboard import AdminDashboardStats
from truckticket.services.dashboard import DashboardService

router = APIRouter()


@router.get("/stats", response_model=AdminDashboardStats)
async def get_dashboard_stats(
    service: DashboardService = Depends(deps.get_dashboard_service),
) -> AdminDashboardStats:
    """Pending ticket count and this month's approved revenue, pay and profit."""
    return await service.admin_stats()
