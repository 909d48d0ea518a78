from fastapi import APIRouter

from truckticket.routers import (
    billing,
    customers,
    dashboard,
    driver_portal,
    drivers,
    health,
    tickets,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(drivers.router, prefix="/admin/drivers", tags=["Admin"])
api_router.include_router(customers.router, prefix="/admin/customers", tags=["Admin"])
api_router.include_router(customers.settings_router, prefix="/admin/settings", tags=["Admin"])
api_router.include_router(tickets.router, prefix="/admin/tickets", tags=["Admin"])
api_router.include_router(dashboard.router, prefix="/admin/dashboard", tags=["Admin"])
api_router.include_router(billing.invoices_router, prefix="/admin/invoices", tags=["Billing"])
api_router.include_router(billing.settlements_router, prefix="/admin/settlements", tags=["Billing"])
api_router.include_router(driver_portal.router, prefix="/drivers", tags=["Driver"])
