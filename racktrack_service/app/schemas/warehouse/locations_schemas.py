from pydantic import BaseModel, Field
from uuid import UUID
from typing import List, Optional
from datetime import datetime


# ---------------- Aisles ----------------

class AisleBase(BaseModel):
    warehouse_id: UUID
    code: str = Field(min_length=1, max_length=32)
    name: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True


class AisleCreate(AisleBase):
    pass


class AisleUpdate(BaseModel):
    id: UUID
    code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class AisleOut(AisleBase):
    id: UUID
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---------------- Shelves ----------------

class ShelfBase(BaseModel):
    aisle_id: UUID
    code: str = Field(min_length=1, max_length=32)
    level_number: int = Field(default=1, ge=1)
    height_cm: Optional[float] = None
    weight_capacity_kg: Optional[float] = None
    is_active: bool = True


class ShelfCreate(ShelfBase):
    pass


class ShelfUpdate(BaseModel):
    id: UUID
    code: Optional[str] = None
    level_number: Optional[int] = None
    height_cm: Optional[float] = None
    weight_capacity_kg: Optional[float] = None
    is_active: Optional[bool] = None


class ShelfOut(ShelfBase):
    id: UUID
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---------------- Slots ----------------

class SlotBase(BaseModel):
    shelf_id: UUID
    code: str = Field(min_length=1, max_length=64)
    position_number: int = Field(default=1, ge=1)
    width_cm: Optional[float] = None
    depth_cm: Optional[float] = None
    height_cm: Optional[float] = None
    weight_capacity_kg: Optional[float] = None
    zone: Optional[str] = "storage"
    temperature_controlled: bool = False
    hazmat_approved: bool = False
    is_active: bool = True


class SlotCreate(SlotBase):
    pass


class SlotUpdate(BaseModel):
    id: UUID
    code: Optional[str] = None
    position_number: Optional[int] = None
    width_cm: Optional[float] = None
    depth_cm: Optional[float] = None
    height_cm: Optional[float] = None
    weight_capacity_kg: Optional[float] = None
    zone: Optional[str] = None
    temperature_controlled: Optional[bool] = None
    hazmat_approved: Optional[bool] = None
    is_active: Optional[bool] = None


class SlotOut(SlotBase):
    id: UUID
    is_occupied: bool
    current_pallet_id: Optional[UUID] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SlotSearchResult(BaseModel):
    id: UUID
    code: str
    label: str
    warehouse_id: UUID
    warehouse_code: str
    aisle_code: str
    shelf_code: str
    zone: Optional[str] = None
    is_occupied: bool
    pallet_number: Optional[str] = None


# ---------------- Bulk create ----------------

MAX_BULK_SLOTS = 10000


class BulkLocationRequest(BaseModel):
    warehouse_id: UUID
    aisle_prefix: str = Field(default="A", max_length=8)
    aisle_start: int = Field(default=1, ge=1)
    aisle_end: int = Field(ge=1)
    shelves_per_aisle: int = Field(default=3, ge=1, le=50)
    shelf_prefix: str = Field(default="S", max_length=8)
    slots_per_shelf: int = Field(default=4, ge=1, le=100)
    shelf_height_cm: float = 200
    shelf_weight_capacity_kg: float = 1000
    zone: str = "storage"
    temperature_controlled: bool = False
    hazmat_approved: bool = False
    preview_only: bool = False


class BulkLocationPreview(BaseModel):
    aisle_code: str
    shelf_code: str
    slot_code: str
    label: str


class BulkLocationResult(BaseModel):
    aisles: int
    shelves: int
    slots: int
    skipped: List[str]
    preview: List[BulkLocationPreview]
    created: bool


class LocationOverview(BaseModel):
    warehouses: int
    aisles: int
    shelves: int
    slots: int
    occupied_slots: int
    available_slots: int
    occupancy_rate: int
