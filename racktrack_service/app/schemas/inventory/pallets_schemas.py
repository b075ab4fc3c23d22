from pydantic import BaseModel
from uuid import UUID
from typing import List, Literal, Optional
from datetime import datetime

from shared.core.schemas import CommonQueryParams

PalletStatusName = Literal["receiving", "in_transit",
                           "stored", "picking", "staged", "shipped"]


class PalletBase(BaseModel):
    pallet_number: Optional[str] = None
    pallet_type: Optional[str] = "standard"
    max_weight_kg: Optional[float] = None
    current_weight_kg: Optional[float] = None
    max_height_cm: Optional[float] = None
    qr_code: Optional[str] = None
    notes: Optional[str] = None
    special_handling: Optional[str] = None


class PalletCreate(PalletBase):
    location_id: Optional[UUID] = None


class PalletUpdate(BaseModel):
    id: UUID
    status: Optional[PalletStatusName] = None
    pallet_type: Optional[str] = None
    max_weight_kg: Optional[float] = None
    current_weight_kg: Optional[float] = None
    max_height_cm: Optional[float] = None
    notes: Optional[str] = None
    special_handling: Optional[str] = None


class PalletContent(BaseModel):
    inventory_id: UUID
    product_id: UUID
    sku: str
    product_name: str
    quantity: float
    available_quantity: float
    lot_number: Optional[str] = None
    quality_status: str


class PalletOut(PalletBase):
    id: UUID
    pallet_number: str
    status: str
    current_location_id: Optional[UUID] = None
    previous_location_id: Optional[UUID] = None
    location_code: Optional[str] = None
    received_date: Optional[datetime] = None
    last_moved: Optional[datetime] = None
    created_at: Optional[datetime] = None
    contents: List[PalletContent] = []

    class Config:
        from_attributes = True


class PalletRequest(CommonQueryParams):
    status: Optional[str] = None
    warehouse_id: Optional[UUID] = None


class PalletListResponse(BaseModel):
    pallets: List[PalletOut]
    total: int


class PalletMoveRequest(BaseModel):
    to_location_id: UUID
    notes: Optional[str] = None
