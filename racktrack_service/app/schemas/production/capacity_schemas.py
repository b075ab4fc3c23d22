from pydantic import BaseModel
from uuid import UUID
from typing import List, Optional
from datetime import date, datetime


class WorkCenterCapacity(BaseModel):
    work_center_id: UUID
    code: str
    name: str
    total_capacity: float
    available_hours: float
    current_load: float
    planned_load: float
    remaining_hours: float
    utilization: int


class DailyWorkCenterLoad(BaseModel):
    work_center_id: UUID
    name: str
    capacity: float
    load: float
    utilization: int


class DailyCapacity(BaseModel):
    date: date
    work_centers: List[DailyWorkCenterLoad]


class Bottleneck(BaseModel):
    work_center_id: UUID
    name: str
    utilization: int
    recommendation: str


class CapacityReport(BaseModel):
    timeframe: str
    period_start: datetime
    period_end: datetime
    days_in_period: int
    average_utilization: float
    work_centers: List[WorkCenterCapacity]
    daily: List[DailyCapacity]
    bottlenecks: List[Bottleneck]
    suggestions: List[str]


class WorkCenterEfficiency(BaseModel):
    work_center_id: UUID
    name: str
    target: float
    completed: float
    scrapped: float
    efficiency: float
    scrap_rate: float


class ProductionAnalytics(BaseModel):
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    work_centers: List[WorkCenterEfficiency]
    jobs_completed: int
    issues_by_severity: dict
    average_route_hours: float


class ProductionOverview(BaseModel):
    jobs_by_status: dict
    active_routes: int
    open_issues: int
    pending_bom_approvals: int
