from pydantic import BaseModel, Field
from uuid import UUID
from typing import List, Literal, Optional
from datetime import date, datetime

POStatusName = Literal["draft", "pending_approval", "approved", "sent_to_production",
                       "in_production", "on_hold", "quality_check",
                       "ready_for_invoice", "invoiced", "cancelled"]


class POItemCreate(BaseModel):
    product_id: Optional[UUID] = None
    description: Optional[str] = None
    quantity: float = Field(gt=0)
    unit_price: float = Field(default=0, ge=0)


class POItemOut(POItemCreate):
    id: UUID
    line_number: int
    total_amount: float
    product_name: Optional[str] = None
    product_sku: Optional[str] = None

    class Config:
        from_attributes = True


class CustomerPOCreate(BaseModel):
    po_number: Optional[str] = None
    customer_id: Optional[UUID] = None
    description: Optional[str] = None
    po_date: Optional[date] = None
    due_date: Optional[date] = None
    production_notes: Optional[str] = None
    items: List[POItemCreate] = []


class CustomerPOUpdate(BaseModel):
    customer_id: Optional[UUID] = None
    description: Optional[str] = None
    po_date: Optional[date] = None
    due_date: Optional[date] = None
    production_notes: Optional[str] = None
    items: Optional[List[POItemCreate]] = None


class POStatusUpdate(BaseModel):
    status: Optional[str] = None
    reason: Optional[str] = None
    notes: Optional[str] = None


class POStatusHistoryOut(BaseModel):
    id: UUID
    from_status: Optional[str] = None
    to_status: str
    reason: Optional[str] = None
    notes: Optional[str] = None
    changed_by: Optional[UUID] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CustomerPOOut(BaseModel):
    id: UUID
    po_number: str
    customer_id: Optional[UUID] = None
    customer_name: Optional[str] = None
    customer_company: Optional[str] = None
    description: Optional[str] = None
    po_date: Optional[date] = None
    due_date: Optional[date] = None
    production_status: str
    hold_reason: Optional[str] = None
    production_notes: Optional[str] = None
    total_amount: float
    qb_estimate_id: Optional[str] = None
    qb_estimate_number: Optional[str] = None
    created_by: Optional[UUID] = None
    updated_by: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[POItemOut] = []
    status_history: List[POStatusHistoryOut] = []

    class Config:
        from_attributes = True


class CustomerPORequest(BaseModel):
    status: Optional[str] = None
    customer_id: Optional[UUID] = None
    search: Optional[str] = None
