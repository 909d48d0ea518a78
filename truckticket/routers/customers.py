"""Admin management of customers and their default bill rates."""

from typing import List

from fastapi import APIRouter, Depends, status

from truckticket.api import deps
from truckticket.schemas.customer import (
    BillRate,
    BillRatesUpdateRequest,
    CustomerCreate,
    CustomerResponse,
    CustomerUpdate,
)
from truckticket.services.customers import CustomerService

router = APIRouter()
settings_router = APIRouter()


@router.get("", response_model=List[CustomerResponse])
async def list_customers(service: CustomerService = Depends(deps.get_customer_service)) -> List[CustomerResponse]:
    customers = await service.list_customers()
    return [CustomerResponse.model_validate(customer) for customer in customers]


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    payload: CustomerCreate,
    service: CustomerService = Depends(deps.get_customer_service),
) -> CustomerResponse:
    customer = await service.create_customer(payload)
    return CustomerResponse.model_validate(customer)


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: str,
    payload: CustomerUpdate,
    service: CustomerService = Depends(deps.get_customer_service),
) -> CustomerResponse:
    """Rename a customer or change its default bill rate. Existing tickets are not repriced."""
    customer = await service.update_customer(customer_id, payload)
    return CustomerResponse.model_validate(customer)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: str,
    service: CustomerService = Depends(deps.get_customer_service),
) -> None:
    await service.delete_customer(customer_id)


@settings_router.get("/bill-rates", response_model=List[BillRate])
async def list_bill_rates(service: CustomerService = Depends(deps.get_customer_service)) -> List[BillRate]:
    customers = await service.list_bill_rates()
    return [BillRate.model_validate(customer) for customer in customers]


@settings_router.put("/bill-rates", response_model=List[BillRate])
async def update_bill_rates(
    payload: BillRatesUpdateRequest,
    service: CustomerService = Depends(deps.get_customer_service),
) -> List[BillRate]:
    """Apply every rate in the batch, or none of them."""
    await service.update_bill_rates(payload.rates)
    customers = await service.list_bill_rates()
    return [BillRate.model_validate(customer) for customer in customers]
