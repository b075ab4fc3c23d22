from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_editor, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.inventory import inventory_crud as crud
from ...schemas.inventory.inventory_schemas import (
    AdjustRequest, InventoryListResponse, InventoryRequest, MovementListResponse, MovementRequest,
    PickRequest, ReceiveRequest)

router = APIRouter(
    prefix="/api/inventory",
    tags=["inventory"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/", response_model=InventoryListResponse)
def get_inventory(
        params: InventoryRequest = Depends(),
        db: Session = Depends(get_db)):
    return crud.get_inventory(db, params)


@router.get("/movements", response_model=MovementListResponse)
def get_movements(
        params: MovementRequest = Depends(),
        db: Session = Depends(get_db)):
    return crud.get_movements(db, params)


@router.get("/overview")
def inventory_overview(db: Session = Depends(get_db)):
    return crud.get_inventory_overview(db)


@router.post("/receive")
def receive_inventory(
        req: ReceiveRequest,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.receive_inventory(db, req, current_user),
        message="Inventory received successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.post("/pick")
def pick_inventory(
        req: PickRequest,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.pick_inventory(db, req, current_user),
        message="Inventory picked successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.post("/{inventory_id}/adjust")
def adjust_inventory(
        inventory_id: UUID,
        req: AdjustRequest,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.adjust_inventory(db, inventory_id, req, current_user),
        message="Inventory adjusted successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )
