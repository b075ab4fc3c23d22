from pydantic import BaseModel, Field
from uuid import UUID
from typing import List, Literal, Optional
from datetime import datetime

from shared.core.schemas import CommonQueryParams

WorkCenterTypeName = Literal["printing", "embroidery", "heat_press", "cutting",
                             "sewing", "packaging", "quality_control", "shipping", "other"]
ActivityTypeName = Literal["setup", "production", "quality_check",
                           "packaging", "cleanup", "maintenance"]


class WorkCenterBase(BaseModel):
    code: str = Field(min_length=1, max_length=32)
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    type: WorkCenterTypeName
    capacity_per_hour: Optional[float] = Field(default=None, ge=0)
    cost_per_hour: Optional[float] = Field(default=None, ge=0)
    is_active: bool = True


class WorkCenterCreate(WorkCenterBase):
    pass


class WorkCenterUpdate(BaseModel):
    id: UUID
    code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    type: Optional[WorkCenterTypeName] = None
    capacity_per_hour: Optional[float] = Field(default=None, ge=0)
    cost_per_hour: Optional[float] = Field(default=None, ge=0)
    is_active: Optional[bool] = None


class WorkCenterOut(WorkCenterBase):
    id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WorkCenterRequest(CommonQueryParams):
    type: Optional[str] = None
    is_active: Optional[bool] = None


class WorkCenterListResponse(BaseModel):
    work_centers: List[WorkCenterOut]
    total: int


class ActivityBase(BaseModel):
    code: str = Field(min_length=1, max_length=32)
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    activity_type: ActivityTypeName
    requires_skill_level: int = Field(default=1, ge=1, le=5)
    is_active: bool = True


class ActivityCreate(ActivityBase):
    pass


class ActivityUpdate(BaseModel):
    id: UUID
    code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    activity_type: Optional[ActivityTypeName] = None
    requires_skill_level: Optional[int] = Field(default=None, ge=1, le=5)
    is_active: Optional[bool] = None


class ActivityOut(ActivityBase):
    id: UUID
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ActivityRequest(CommonQueryParams):
    activity_type: Optional[str] = None
    is_active: Optional[bool] = None


class ActivityListResponse(BaseModel):
    activities: List[ActivityOut]
    total: int


class WorkCenterActivityCreate(BaseModel):
    activity_id: UUID
    setup_time_minutes: int = Field(default=0, ge=0)
    run_time_per_unit: Optional[float] = Field(default=None, ge=0)
    min_batch_size: int = Field(default=1, ge=1)
    max_batch_size: Optional[int] = Field(default=None, ge=1)
    efficiency_factor: float = Field(default=1.0, gt=0)


class WorkCenterActivityUpdate(BaseModel):
    setup_time_minutes: Optional[int] = Field(default=None, ge=0)
    run_time_per_unit: Optional[float] = Field(default=None, ge=0)
    min_batch_size: Optional[int] = Field(default=None, ge=1)
    max_batch_size: Optional[int] = Field(default=None, ge=1)
    efficiency_factor: Optional[float] = Field(default=None, gt=0)


class WorkCenterActivityOut(BaseModel):
    id: UUID
    work_center_id: UUID
    activity_id: UUID
    activity_code: Optional[str] = None
    activity_name: Optional[str] = None
    setup_time_minutes: int
    run_time_per_unit: Optional[float] = None
    min_batch_size: int
    max_batch_size: Optional[int] = None
    efficiency_factor: float

    class Config:
        from_attributes = True
