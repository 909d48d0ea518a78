from fastapi import APIRouter

from truckticket.core.db import test_database_connection

router = APIRouter()


@router.get("/healthz", summary="Health check")
async def health_check() -> dict[str, str]:
    database = "ok" if await test_database_connection() else "unavailable"
    return {"status": "ok", "database": database}
