from uuid import UUID
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response
from shared.helpers.sequence_helper import next_number
from shared.utils.app_status_code import AppStatusCode
from shared.utils.logger import get_logger

from ...enum.sales_enum import InvoiceStatus, POStatus
from ...models.sales.invoices import Invoice, InvoiceLineItem
from ...schemas.sales.invoices_schemas import (
    InvoiceFromPORequest, InvoiceOut, InvoiceRequest, InvoiceStatusUpdate, PaymentRequest)
from ..inventory.pallets_crud import user_uuid
from .customer_pos_crud import apply_status_change, get_po_by_id

logger = get_logger(__name__)


def generate_invoice_number(db: Session) -> str:
    return next_number(db, Invoice.invoice_number, "INV-", 6)


def get_invoices(db: Session, params: InvoiceRequest):
    query = db.query(Invoice)

    if params.status:
        query = query.filter(Invoice.status == params.status)

    if params.customer_id:
        query = query.filter(Invoice.customer_id == params.customer_id)

    if params.search:
        query = query.filter(Invoice.invoice_number.ilike(f"%{params.search}%"))

    total = query.count()
    invoices = (
        query.order_by(Invoice.invoice_number.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {"invoices": [InvoiceOut.model_validate(i) for i in invoices], "total": total}


def get_invoice_by_id(db: Session, invoice_id: UUID) -> Invoice:
    invoice = db.query(Invoice).filter(Invoice.id == invoice_id).first()
    if not invoice:
        return error_response(
            message="Invoice not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )
    return invoice


def get_invoice(db: Session, invoice_id: UUID):
    return InvoiceOut.model_validate(get_invoice_by_id(db, invoice_id))


def create_invoice_from_po(db: Session, po_id: UUID, req: InvoiceFromPORequest, current_user: UserToken):
    po = get_po_by_id(db, po_id)

    if po.production_status != POStatus.READY_FOR_INVOICE.value:
        return error_response(
            message="Only purchase orders ready for invoice can be invoiced",
            status_code=str(AppStatusCode.INVALID_STATUS_TRANSITION),
            http_status=400
        )

    try:
        lines = [
            InvoiceLineItem(
                product_id=item.product_id,
                description=item.description or (item.product.name if item.product else None),
                quantity=item.quantity,
                unit_price=item.unit_price,
                amount=item.total_amount,
            )
            for item in po.items
        ]
        subtotal = round(sum(line.amount for line in lines), 2)
        total = round(subtotal + req.tax_amount, 2)

        invoice = Invoice(
            invoice_number=generate_invoice_number(db),
            po_id=po.id,
            customer_id=po.customer_id,
            due_date=req.due_date or po.due_date,
            subtotal=subtotal,
            tax_amount=req.tax_amount,
            total_amount=total,
            status=InvoiceStatus.DRAFT.value,
            amount_paid=0,
            balance_due=total,
            notes=req.notes,
            created_by=user_uuid(current_user),
            lines=lines,
        )
        db.add(invoice)
        apply_status_change(db, po, POStatus.INVOICED.value, current_user,
                            notes=f"Invoice {invoice.invoice_number} created")
        db.commit()
        db.refresh(invoice)

    except Exception:
        db.rollback()
        raise

    logger.info(f"Invoice {invoice.invoice_number} created from PO {po.po_number}")
    return InvoiceOut.model_validate(invoice)


def update_invoice_status(db: Session, invoice_id: UUID, update: InvoiceStatusUpdate):
    invoice = get_invoice_by_id(db, invoice_id)

    if invoice.status == InvoiceStatus.VOID.value:
        return error_response(
            message="Void invoices cannot change status",
            status_code=str(AppStatusCode.INVALID_STATUS_TRANSITION),
            http_status=400
        )

    invoice.status = update.status
    db.commit()
    db.refresh(invoice)
    return InvoiceOut.model_validate(invoice)


def record_payment(db: Session, invoice_id: UUID, payment: PaymentRequest):
    invoice = get_invoice_by_id(db, invoice_id)

    if invoice.status == InvoiceStatus.VOID.value:
        return error_response(
            message="Cannot record a payment on a void invoice",
            status_code=str(AppStatusCode.INVALID_STATUS_TRANSITION),
            http_status=400
        )

    balance = round((invoice.total_amount or 0) - (invoice.amount_paid or 0), 2)
    if payment.amount > balance:
        return error_response(
            message=f"Payment exceeds the balance due of {balance:.2f}",
            status_code=str(AppStatusCode.INVALID_INPUT),
            http_status=400
        )

    invoice.amount_paid = round((invoice.amount_paid or 0) + payment.amount, 2)
    invoice.balance_due = round(invoice.total_amount - invoice.amount_paid, 2)
    if invoice.balance_due <= 0:
        invoice.balance_due = 0
        invoice.status = InvoiceStatus.PAID.value

    db.commit()
    db.refresh(invoice)
    logger.info(f"Payment of {payment.amount} recorded on invoice {invoice.invoice_number}")
    return InvoiceOut.model_validate(invoice)
