from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_manager, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import Lookup
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.warehouse import warehouses_crud as crud
from ...schemas.warehouse.warehouses_schemas import (
    WarehouseCreate, WarehouseListResponse, WarehouseOut, WarehouseRequest, WarehouseStats, WarehouseUpdate)

router = APIRouter(
    prefix="/api/warehouses",
    tags=["warehouses"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/all", response_model=WarehouseListResponse)
def get_warehouses(
        params: WarehouseRequest = Depends(),
        db: Session = Depends(get_db)):
    return crud.get_warehouses(db, params)


@router.get("/lookup", response_model=List[Lookup])
def warehouse_lookup(db: Session = Depends(get_db)):
    return crud.get_warehouse_lookup(db)


@router.get("/{warehouse_id}", response_model=WarehouseOut)
def get_warehouse(warehouse_id: UUID, db: Session = Depends(get_db)):
    return WarehouseOut.model_validate(crud.get_warehouse_by_id(db, warehouse_id))


@router.get("/{warehouse_id}/stats", response_model=WarehouseStats)
def get_warehouse_stats(warehouse_id: UUID, db: Session = Depends(get_db)):
    return crud.get_warehouse_stats(db, warehouse_id)


@router.post("/", dependencies=[Depends(allow_manager)])
def create_warehouse(warehouse: WarehouseCreate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.create_warehouse(db, warehouse),
        message="Warehouse created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.put("/", dependencies=[Depends(allow_manager)])
def update_warehouse(warehouse: WarehouseUpdate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.update_warehouse(db, warehouse),
        message="Warehouse updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{warehouse_id}", dependencies=[Depends(allow_manager)])
def delete_warehouse(warehouse_id: UUID, db: Session = Depends(get_db)):
    return crud.delete_warehouse(db, warehouse_id)
