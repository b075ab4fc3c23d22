from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_editor, allow_manager, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.quickbooks import quickbooks_crud
from ...crud.sales import customer_pos_crud as crud
from ...schemas.quickbooks.quickbooks_schemas import EstimateSyncResult
from ...schemas.sales.customer_pos_schemas import (
    CustomerPOCreate, CustomerPOOut, CustomerPORequest, CustomerPOUpdate, POStatusUpdate)

router = APIRouter(
    prefix="/api/customer-pos",
    tags=["customer purchase orders"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/", response_model=List[CustomerPOOut])
def get_customer_pos(
        params: CustomerPORequest = Depends(),
        db: Session = Depends(get_db)):
    return crud.get_customer_pos(db, params)


@router.get("/{po_id}", response_model=CustomerPOOut)
def get_customer_po(po_id: UUID, db: Session = Depends(get_db)):
    return crud.get_customer_po(db, po_id)


@router.post("/")
def create_customer_po(
        po: CustomerPOCreate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.create_customer_po(db, po, current_user),
        message="Purchase order created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.patch("/{po_id}")
def update_customer_po(
        po_id: UUID,
        po: CustomerPOUpdate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.update_customer_po(db, po_id, po, current_user),
        message="Purchase order updated successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.delete("/{po_id}", dependencies=[Depends(allow_manager)])
def delete_customer_po(po_id: UUID, db: Session = Depends(get_db)):
    return crud.delete_customer_po(db, po_id)


@router.patch("/{po_id}/status")
def update_po_status(
        po_id: UUID,
        update: POStatusUpdate,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.update_po_status(db, po_id, update, current_user),
        message=f"PO status updated to {update.status}",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.post("/{po_id}/sync-estimate", response_model=EstimateSyncResult)
def sync_estimate(
        po_id: UUID,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return quickbooks_crud.sync_estimate(db, po_id, current_user)
