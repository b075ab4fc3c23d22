from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_editor, allow_manager, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import Lookup
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.sales import customers_crud as crud
from ...schemas.sales.customers_schemas import (
    CustomerCreate, CustomerListResponse, CustomerOut, CustomerRequest, CustomerUpdate)

router = APIRouter(
    prefix="/api/customers",
    tags=["customers"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/all", response_model=CustomerListResponse)
def get_customers(
        params: CustomerRequest = Depends(),
        db: Session = Depends(get_db)):
    return crud.get_customers(db, params)


@router.get("/lookup", response_model=List[Lookup])
def customer_lookup(db: Session = Depends(get_db)):
    return crud.get_customer_lookup(db)


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: UUID, db: Session = Depends(get_db)):
    return CustomerOut.model_validate(crud.get_customer_by_id(db, customer_id))


@router.post("/", dependencies=[Depends(allow_editor)])
def create_customer(customer: CustomerCreate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.create_customer(db, customer),
        message="Customer created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/", dependencies=[Depends(allow_editor)])
def update_customer(customer: CustomerUpdate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.update_customer(db, customer),
        message="Customer updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{customer_id}", dependencies=[Depends(allow_manager)])
def delete_customer(customer_id: UUID, db: Session = Depends(get_db)):
    return crud.delete_customer(db, customer_id)
