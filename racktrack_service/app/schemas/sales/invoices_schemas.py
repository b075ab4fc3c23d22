from pydantic import BaseModel, Field
from uuid import UUID
from typing import List, Literal, Optional
from datetime import date, datetime

from shared.core.schemas import CommonQueryParams

InvoiceStatusName = Literal["draft", "sent",
                            "viewed", "paid", "overdue", "void"]


class InvoiceLineOut(BaseModel):
    id: UUID
    product_id: Optional[UUID] = None
    description: Optional[str] = None
    quantity: float
    unit_price: float
    amount: float

    class Config:
        from_attributes = True


class InvoiceOut(BaseModel):
    id: UUID
    invoice_number: str
    qb_invoice_id: Optional[str] = None
    job_id: Optional[UUID] = None
    po_id: Optional[UUID] = None
    customer_id: Optional[UUID] = None
    customer_name: Optional[str] = None
    invoice_date: Optional[date] = None
    due_date: Optional[date] = None
    subtotal: float
    tax_amount: float
    total_amount: float
    status: str
    amount_paid: float
    balance_due: float
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    lines: List[InvoiceLineOut] = []

    class Config:
        from_attributes = True


class InvoiceFromPORequest(BaseModel):
    due_date: Optional[date] = None
    tax_amount: float = Field(default=0, ge=0)
    notes: Optional[str] = None


class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatusName


class PaymentRequest(BaseModel):
    amount: float = Field(gt=0)


class InvoiceRequest(CommonQueryParams):
    status: Optional[str] = None
    customer_id: Optional[UUID] = None


class InvoiceListResponse(BaseModel):
    invoices: List[InvoiceOut]
    total: int
