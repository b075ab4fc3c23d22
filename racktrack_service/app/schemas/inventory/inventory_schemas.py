from pydantic import BaseModel, Field
from uuid import UUID
from typing import List, Literal, Optional
from datetime import date, datetime

from shared.core.schemas import CommonQueryParams

QualityStatusName = Literal["pending", "approved", "rejected", "quarantine"]


class ReceiveRequest(BaseModel):
    product_id: UUID
    quantity: float = Field(gt=0)
    pallet_id: Optional[UUID] = None
    location_id: Optional[UUID] = None
    lot_number: Optional[str] = None
    batch_number: Optional[str] = None
    serial_numbers: Optional[List[str]] = None
    unit_cost: Optional[float] = None
    manufacture_date: Optional[date] = None
    expiration_date: Optional[date] = None
    quality_status: QualityStatusName = "pending"
    notes: Optional[str] = None


class AdjustRequest(BaseModel):
    quantity_change: float
    reason: str = Field(min_length=1)
    notes: Optional[str] = None


class PickRequest(BaseModel):
    inventory_id: UUID
    quantity: float = Field(gt=0)
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    notes: Optional[str] = None


class InventoryOut(BaseModel):
    id: UUID
    product_id: UUID
    pallet_id: Optional[UUID] = None
    quantity: float
    reserved_quantity: float
    available_quantity: float
    lot_number: Optional[str] = None
    batch_number: Optional[str] = None
    serial_numbers: Optional[List[str]] = None
    manufacture_date: Optional[date] = None
    expiration_date: Optional[date] = None
    received_date: Optional[datetime] = None
    unit_cost: Optional[float] = None
    total_cost: Optional[float] = None
    quality_status: str
    sku: Optional[str] = None
    product_name: Optional[str] = None
    pallet_number: Optional[str] = None

    class Config:
        from_attributes = True


class InventoryRequest(CommonQueryParams):
    product_id: Optional[UUID] = None
    quality_status: Optional[str] = None


class InventoryListResponse(BaseModel):
    inventory: List[InventoryOut]
    total: int


class MovementOut(BaseModel):
    id: UUID
    movement_type: str
    product_id: Optional[UUID] = None
    pallet_id: Optional[UUID] = None
    inventory_id: Optional[UUID] = None
    quantity_before: Optional[float] = None
    quantity_change: Optional[float] = None
    quantity_after: Optional[float] = None
    from_location_id: Optional[UUID] = None
    to_location_id: Optional[UUID] = None
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    performed_by: Optional[UUID] = None
    reason: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MovementRequest(CommonQueryParams):
    product_id: Optional[UUID] = None
    pallet_id: Optional[UUID] = None
    movement_type: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


class MovementListResponse(BaseModel):
    movements: List[MovementOut]
    total: int

