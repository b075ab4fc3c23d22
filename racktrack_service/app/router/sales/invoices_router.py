from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_editor, allow_manager, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.quickbooks import quickbooks_crud
from ...crud.sales import invoices_crud as crud
from ...schemas.quickbooks.quickbooks_schemas import InvoiceSyncResult
from ...schemas.sales.invoices_schemas import (
    InvoiceFromPORequest, InvoiceListResponse, InvoiceOut, InvoiceRequest, InvoiceStatusUpdate,
    PaymentRequest)

router = APIRouter(
    prefix="/api/invoices",
    tags=["invoices"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/all", response_model=InvoiceListResponse)
def get_invoices(
        params: InvoiceRequest = Depends(),
        db: Session = Depends(get_db)):
    return crud.get_invoices(db, params)


@router.get("/{invoice_id}", response_model=InvoiceOut)
def get_invoice(invoice_id: UUID, db: Session = Depends(get_db)):
    return crud.get_invoice(db, invoice_id)


@router.post("/from-po/{po_id}")
def create_invoice_from_po(
        po_id: UUID,
        req: InvoiceFromPORequest,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.create_invoice_from_po(db, po_id, req, current_user),
        message="Invoice created successfully",
        status_code=AppStatusCode.CREATED_SUCCESSFULLY
    )


@router.patch("/{invoice_id}/status", dependencies=[Depends(allow_manager)])
def update_invoice_status(invoice_id: UUID, update: InvoiceStatusUpdate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.update_invoice_status(db, invoice_id, update),
        message=f"Invoice status updated to {update.status}",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.post("/{invoice_id}/payments", dependencies=[Depends(allow_editor)])
def record_payment(invoice_id: UUID, payment: PaymentRequest, db: Session = Depends(get_db)):
    return success_response(
        data=crud.record_payment(db, invoice_id, payment),
        message="Payment recorded successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.post("/{invoice_id}/sync", response_model=InvoiceSyncResult, dependencies=[Depends(allow_editor)])
def sync_invoice(invoice_id: UUID, db: Session = Depends(get_db)):
    return quickbooks_crud.sync_invoice(db, invoice_id)
