"""Admin management of drivers."""

from typing import List

from fastapi import APIRouter, Depends, status

from truckticket.api import deps
from truckticket.schemas.driver import DriverCreate, DriverResponse, DriverUpdate
from truckticket.services.drivers import DriverService

router = APIRouter()


@router.get("", response_model=List[DriverResponse])
async def list_drivers(service: DriverService = Depends(deps.get_driver_service)) -> List[DriverResponse]:
    return await service.list_drivers()


@router.post("", response_model=DriverResponse, status_code=status.HTTP_201_CREATED)
async def create_driver(
    payload: DriverCreate,
    service: DriverService = Depends(deps.get_driver_service),
) -> DriverResponse:
    """Create a driver and the login account used by the driver app."""
    return await service.create_driver(payload)


@router.put("/{driver_id}", response_model=DriverResponse)
async def update_driver(
    driver_id: str,
    payload: DriverUpdate,
    service: DriverService = Depends(deps.get_driver_service),
) -> DriverResponse:
    return await service.update_driver(driver_id, payload)


@router.delete("/{driver_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_driver(
    driver_id: str,
    service: DriverService = Depends(deps.get_driver_service),
) -> None:
    """Delete a driver along with their tickets and login account."""
    await service.delete_driver(driver_id)
