from pydantic import BaseModel, Field
from uuid import UUID
from typing import List, Literal, Optional
from datetime import datetime

from shared.core.schemas import CommonQueryParams

IssueTypeName = Literal["material_shortage", "material_defect", "equipment_failure",
                        "quality_issue", "process_issue", "safety", "other"]
SeverityName = Literal["low", "medium", "high", "critical"]
IssueStatusName = Literal["open", "investigating", "resolved", "closed"]


class IssueBase(BaseModel):
    issue_type: IssueTypeName
    severity: SeverityName = "medium"
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    job_id: Optional[UUID] = None
    job_route_id: Optional[UUID] = None
    work_center_id: Optional[UUID] = None
    activity_id: Optional[UUID] = None
    material_product_id: Optional[UUID] = None
    quantity_affected: Optional[float] = None
    downtime_minutes: Optional[int] = Field(default=None, ge=0)
    cost_impact: Optional[float] = None
    assigned_to: Optional[UUID] = None


class IssueCreate(IssueBase):
    pass


class IssueUpdate(BaseModel):
    id: UUID
    severity: Optional[SeverityName] = None
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[IssueStatusName] = None
    assigned_to: Optional[UUID] = None
    resolution: Optional[str] = None
    quantity_affected: Optional[float] = None
    downtime_minutes: Optional[int] = Field(default=None, ge=0)
    cost_impact: Optional[float] = None


class IssueCommentCreate(BaseModel):
    comment: str = Field(min_length=1)


class IssueCommentOut(BaseModel):
    id: UUID
    comment: str
    created_by: Optional[UUID] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class IssueOut(IssueBase):
    id: UUID
    issue_number: str
    status: str
    reported_by: Optional[UUID] = None
    resolution: Optional[str] = None
    resolved_by: Optional[UUID] = None
    resolved_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    comments: List[IssueCommentOut] = []

    class Config:
        from_attributes = True


class IssueRequest(CommonQueryParams):
    status: Optional[str] = None
    severity: Optional[str] = None
    issue_type: Optional[str] = None
    work_center_id: Optional[UUID] = None


class IssueListResponse(BaseModel):
    issues: List[IssueOut]
    total: int


class IssueOverview(BaseModel):
    total: int
    open: int
    investigating: int
    resolved: int
    closed: int
    critical_open: int
