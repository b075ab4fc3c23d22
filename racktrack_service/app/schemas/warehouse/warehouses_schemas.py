from pydantic import BaseModel, Field
from uuid import UUID
from typing import List, Optional
from datetime import datetime

from shared.core.schemas import CommonQueryParams


class WarehouseBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    code: str = Field(min_length=1, max_length=32)
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    is_active: bool = True


class WarehouseCreate(WarehouseBase):
    pass


class WarehouseUpdate(BaseModel):
    id: UUID
    name: Optional[str] = None
    code: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    is_active: Optional[bool] = None


class WarehouseOut(WarehouseBase):
    id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WarehouseRequest(CommonQueryParams):
    is_active: Optional[bool] = None


class WarehouseListResponse(BaseModel):
    warehouses: List[WarehouseOut]
    total: int


class AisleStats(BaseModel):
    aisle_id: UUID
    code: str
    name: Optional[str] = None
    total_slots: int
    occupied_slots: int
    available_slots: int
    occupancy_rate: int


class ZoneStats(BaseModel):
    zone: str
    total: int
    occupied: int


class WarehouseStats(BaseModel):
    warehouse_id: UUID
    total_aisles: int
    total_shelves: int
    total_slots: int
    occupied_slots: int
    available_slots: int
    occupancy_rate: int
    temperature_controlled: int
    hazmat_approved: int
    aisles: List[AisleStats]
    zones: List[ZoneStats]
