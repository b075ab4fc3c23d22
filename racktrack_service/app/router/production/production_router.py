from datetime import datetime
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.auth import validate_current_token
from shared.core.database import get_db
from ...crud.production import capacity_crud, jobs_crud
from ...enum.production_enum import CapacityTimeframe
from ...schemas.production.capacity_schemas import (
    CapacityReport, ProductionAnalytics, ProductionOverview)

router = APIRouter(
    prefix="/api/production",
    tags=["production"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/schedule")
def get_schedule(
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        work_center_id: Optional[UUID] = None,
        db: Session = Depends(get_db)):
    return jobs_crud.get_schedule(db, start, end, work_center_id)


@router.get("/scan/{code}")
def scan_code(code: str, db: Session = Depends(get_db)):
    return jobs_crud.scan_code(db, code)


@router.get("/capacity", response_model=CapacityReport)
def capacity_report(
        timeframe: CapacityTimeframe = Query(CapacityTimeframe.WEEK),
        db: Session = Depends(get_db)):
    return capacity_crud.get_capacity_report(db, timeframe.value)


@router.get("/analytics", response_model=ProductionAnalytics)
def production_analytics(
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        db: Session = Depends(get_db)):
    return capacity_crud.get_production_analytics(db, start, end)


@router.get("/overview", response_model=ProductionOverview)
def production_overview(db: Session = Depends(get_db)):
    return capacity_crud.get_production_overview(db)
