from pydantic import BaseModel, Field
from uuid import UUID
from typing import List, Literal, Optional
from datetime import date, datetime

from shared.core.schemas import CommonQueryParams

JobStatusName = Literal["created", "planned", "in_progress",
                        "review", "completed", "shipped", "cancelled"]
RouteStatusName = Literal["pending", "ready", "setup",
                          "in_progress", "paused", "completed", "skipped"]


class JobBase(BaseModel):
    job_name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    po_id: Optional[UUID] = None
    customer_id: Optional[UUID] = None
    product_id: Optional[UUID] = None
    quantity: float = Field(default=1, gt=0)
    priority: int = Field(default=3, ge=1, le=5)
    estimated_start_date: Optional[datetime] = None
    estimated_completion_date: Optional[datetime] = None
    due_date: Optional[date] = None
    work_center: Optional[str] = None
    estimated_hours: Optional[float] = None
    estimated_cost: Optional[float] = None
    notes: Optional[str] = None
    proof_required: bool = False


class JobCreate(JobBase):
    job_number: Optional[str] = None


class JobUpdate(BaseModel):
    id: UUID
    job_name: Optional[str] = None
    description: Optional[str] = None
    customer_id: Optional[UUID] = None
    product_id: Optional[UUID] = None
    quantity: Optional[float] = Field(default=None, gt=0)
    status: Optional[JobStatusName] = None
    priority: Optional[int] = Field(default=None, ge=1, le=5)
    estimated_start_date: Optional[datetime] = None
    estimated_completion_date: Optional[datetime] = None
    due_date: Optional[date] = None
    work_center: Optional[str] = None
    estimated_hours: Optional[float] = None
    actual_hours: Optional[float] = None
    estimated_cost: Optional[float] = None
    actual_cost: Optional[float] = None
    notes: Optional[str] = None
    proof_required: Optional[bool] = None
    proof_approved: Optional[bool] = None


class JobRouteOut(BaseModel):
    id: UUID
    job_id: UUID
    activity_id: UUID
    work_center_id: UUID
    activity_name: Optional[str] = None
    work_center_name: Optional[str] = None
    sequence_number: int
    status: str
    estimated_start: Optional[datetime] = None
    actual_start: Optional[datetime] = None
    estimated_complete: Optional[datetime] = None
    actual_complete: Optional[datetime] = None
    quantity_target: float
    quantity_completed: float
    quantity_scrapped: float
    operator_id: Optional[UUID] = None
    setup_notes: Optional[str] = None
    production_notes: Optional[str] = None
    quality_notes: Optional[str] = None

    class Config:
        from_attributes = True


class JobOut(JobBase):
    id: UUID
    job_number: str
    status: str
    actual_start_date: Optional[datetime] = None
    actual_completion_date: Optional[datetime] = None
    actual_hours: Optional[float] = None
    actual_cost: Optional[float] = None
    progress_percentage: int
    proof_approved: Optional[bool] = None
    customer_name: Optional[str] = None
    routes: List[JobRouteOut] = []
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class JobRequest(CommonQueryParams):
    status: Optional[str] = None
    customer_id: Optional[UUID] = None
    priority: Optional[int] = None


class JobListResponse(BaseModel):
    jobs: List[JobOut]
    total: int


class JobRouteCreate(BaseModel):
    activity_id: UUID
    work_center_id: UUID
    sequence_number: Optional[int] = None
    estimated_start: Optional[datetime] = None
    estimated_complete: Optional[datetime] = None
    quantity_target: Optional[float] = None
    setup_notes: Optional[str] = None


class RouteStatusUpdate(BaseModel):
    status: RouteStatusName


class MaterialConsumptionInput(BaseModel):
    material_product_id: UUID
    quantity_consumed: float = Field(gt=0)
    inventory_id: Optional[UUID] = None
    lot_number: Optional[str] = None


class RouteCompleteRequest(BaseModel):
    quantity_completed: float = Field(ge=0)
    quantity_scrapped: float = Field(default=0, ge=0)
    production_notes: Optional[str] = None
    quality_notes: Optional[str] = None
    material_consumption: List[MaterialConsumptionInput] = []


class RouteRescheduleRequest(BaseModel):
    estimated_start: datetime
    work_center_id: Optional[UUID] = None

