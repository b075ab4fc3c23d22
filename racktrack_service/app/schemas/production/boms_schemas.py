from pydantic import BaseModel, Field
from uuid import UUID
from typing import List, Optional
from datetime import date, datetime


class BOMMaterialCreate(BaseModel):
    material_product_id: UUID
    quantity_required: float = Field(gt=0)
    unit_of_measure: str = "Each"
    waste_percentage: float = Field(default=0, ge=0, le=100)
    notes: Optional[str] = None


class BOMActivityCreate(BaseModel):
    activity_id: UUID
    work_center_id: UUID
    sequence_number: int = Field(ge=1)
    setup_time_minutes: int = Field(default=0, ge=0)
    run_time_per_unit: Optional[float] = Field(default=None, ge=0)
    instructions: Optional[str] = None
    quality_check_required: bool = False
    quality_instructions: Optional[str] = None


class BOMCreate(BaseModel):
    product_id: UUID
    notes: Optional[str] = None
    materials: List[BOMMaterialCreate] = []
    activities: List[BOMActivityCreate] = []


class BOMDecision(BaseModel):
    comments: Optional[str] = None


class BOMMaterialOut(BOMMaterialCreate):
    id: UUID
    material_name: Optional[str] = None
    material_sku: Optional[str] = None
    line_cost: Optional[float] = None

    class Config:
        from_attributes = True


class BOMActivityOut(BOMActivityCreate):
    id: UUID
    activity_name: Optional[str] = None
    work_center_name: Optional[str] = None

    class Config:
        from_attributes = True


class BOMHistoryOut(BaseModel):
    id: UUID
    action: str
    performed_by: Optional[UUID] = None
    comments: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BOMOut(BaseModel):
    id: UUID
    product_id: UUID
    version_number: int
    status: str
    effective_date: Optional[date] = None
    obsolete_date: Optional[date] = None
    notes: Optional[str] = None
    created_by: Optional[UUID] = None
    approved_by: Optional[UUID] = None
    approved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    materials: List[BOMMaterialOut] = []
    activities: List[BOMActivityOut] = []
    history: List[BOMHistoryOut] = []
    material_cost: float = 0

    class Config:
        from_attributes = True
