"""
Capacity planning and production analytics.

`compute_capacity` works on plain work center / route rows so the report can be
built (and tested) without a database; `get_capacity_report` feeds it from the DB.
"""
import math
from datetime import datetime, time, timedelta, timezone
from typing import Iterable, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from shared.helpers.datetime_helper import as_utc, utc_now

from ...enum.production_enum import (
    DEFAULT_ROUTE_HOURS, HOURS_PER_DAY, CapacityTimeframe, IssueStatus, JobRouteStatus, JobStatus)
from ...models.production.job_routes import JobRoute
from ...models.production.jobs import Job
from ...models.production.production_issues import ProductionIssue
from ...models.production.work_centers import WorkCenter
from .boms_crud import count_pending_approvals
from .work_centers_crud import WORKING_ROUTE_STATUSES

LOADED_STATUSES = [JobRouteStatus.IN_PROGRESS.value, JobRouteStatus.SETUP.value]


def period_end(timeframe: str, start: datetime) -> datetime:
    if timeframe == CapacityTimeframe.WEEK.value:
        sunday = start.date() + timedelta(days=6 - start.weekday())
        return datetime.combine(sunday, time(23, 59, 59), tzinfo=start.tzinfo or timezone.utc)
    if timeframe == CapacityTimeframe.TWO_WEEKS.value:
        return start + timedelta(days=14)
    if timeframe == CapacityTimeframe.MONTH.value:
        return start + timedelta(days=30)
    return start + timedelta(days=7)


def duration_hours(route) -> float:
    start = as_utc(route.estimated_start)
    end = as_utc(route.estimated_complete)
    if start and end:
        return (end - start).total_seconds() / 3600
    return float(DEFAULT_ROUTE_HOURS)


def _percent(value: float, total: float) -> int:
    return round(value / total * 100) if total else 0


def build_suggestions(utilizations: list, bottlenecks: list) -> list:
    suggestions = []
    if not utilizations:
        return suggestions

    average = sum(utilizations) / len(utilizations)
    if average < 50:
        suggestions.append(
            "Overall capacity utilization is low. Consider consolidating work centers or accepting more orders.")
    if average > 85:
        suggestions.append(
            "Capacity is nearly full. Consider adding shifts or expanding work center capacity.")
    if max(utilizations) - min(utilizations) > 50:
        suggestions.append(
            "Work center loads are unbalanced. Consider redistributing jobs to underutilized centers.")
    if bottlenecks:
        names = ", ".join(b["name"] for b in bottlenecks)
        suggestions.append(
            f"{len(bottlenecks)} work center(s) are experiencing bottlenecks. Review scheduling for {names}.")
    return suggestions


def compute_capacity(work_centers: Iterable, routes: Iterable, timeframe: str = "week",
                     now: Optional[datetime] = None) -> dict:
    start = as_utc(now) or utc_now()
    end = period_end(timeframe, start)
    days = math.ceil((end - start).total_seconds() / 86400)
    available_hours = days * HOURS_PER_DAY

    work_centers = [wc for wc in work_centers if getattr(wc, "is_active", True)]
    in_period = [
        r for r in routes
        if r.status != JobRouteStatus.COMPLETED.value
        and r.estimated_start is not None
        and start <= as_utc(r.estimated_start) <= end
    ]

    capacity_rows = []
    bottlenecks = []
    for wc in work_centers:
        current_load = planned_load = 0.0
        for route in in_period:
            if route.work_center_id != wc.id:
                continue
            if route.status in LOADED_STATUSES:
                current_load += duration_hours(route)
            else:
                planned_load += duration_hours(route)

        utilization = _percent(current_load + planned_load, available_hours)
        capacity_rows.append({
            "work_center_id": wc.id,
            "code": wc.code,
            "name": wc.name,
            "total_capacity": (wc.capacity_per_hour or 0) * HOURS_PER_DAY * days,
            "available_hours": available_hours,
            "current_load": round(current_load, 2),
            "planned_load": round(planned_load, 2),
            "remaining_hours": round(max(0, available_hours - current_load - planned_load), 2),
            "utilization": utilization,
        })
        if utilization > 90:
            bottlenecks.append({
                "work_center_id": wc.id,
                "name": wc.name,
                "utilization": utilization,
                "recommendation": ("Over capacity - consider rescheduling" if utilization > 100
                                   else "Near capacity - monitor closely"),
            })

    daily = []
    day = start.date()
    while day <= end.date():
        loads = []
        for wc in work_centers:
            load = sum(
                min(duration_hours(r), HOURS_PER_DAY)
                for r in in_period
                if r.work_center_id == wc.id and as_utc(r.estimated_start).date() == day
            )
            loads.append({
                "work_center_id": wc.id,
                "name": wc.name,
                "capacity": (wc.capacity_per_hour or 0) * HOURS_PER_DAY,
                "load": round(load, 2),
                "utilization": _percent(load, HOURS_PER_DAY),
            })
        daily.append({"date": day, "work_centers": loads})
        day += timedelta(days=1)

    utilizations = [row["utilization"] for row in capacity_rows]
    return {
        "timeframe": timeframe,
        "period_start": start,
        "period_end": end,
        "days_in_period": days,
        "average_utilization": round(sum(utilizations) / len(utilizations), 2) if utilizations else 0,
        "work_centers": capacity_rows,
        "daily": daily,
        "bottlenecks": bottlenecks,
        "suggestions": build_suggestions(utilizations, bottlenecks),
    }


def get_capacity_report(db: Session, timeframe: str = "week"):
    now = utc_now()
    end = period_end(timeframe, now)

    work_centers = db.query(WorkCenter).filter(WorkCenter.is_active == True).all()
    routes = (
        db.query(JobRoute)
        .filter(JobRoute.status != JobRouteStatus.COMPLETED.value,
                JobRoute.estimated_start >= now,
                JobRoute.estimated_start <= end)
        .all()
    )
    return compute_capacity(work_centers, routes, timeframe, now)


def get_production_analytics(db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None):
    start = as_utc(start)
    end = as_utc(end)

    def in_range(column):
        filters = []
        if start:
            filters.append(column >= start)
        if end:
            filters.append(column <= end)
        return filters

    route_rows = (
        db.query(
            WorkCenter.id,
            WorkCenter.name,
            func.coalesce(func.sum(JobRoute.quantity_target), 0),
            func.coalesce(func.sum(JobRoute.quantity_completed), 0),
            func.coalesce(func.sum(JobRoute.quantity_scrapped), 0),
        )
        .join(JobRoute, JobRoute.work_center_id == WorkCenter.id)
        .filter(JobRoute.status == JobRouteStatus.COMPLETED.value,
                *in_range(JobRoute.actual_complete))
        .group_by(WorkCenter.id, WorkCenter.name)
        .order_by(WorkCenter.name.asc())
        .all()
    )
    efficiency = []
    for wc_id, name, target, completed, scrapped in route_rows:
        produced = (completed or 0) + (scrapped or 0)
        efficiency.append({
            "work_center_id": wc_id,
            "name": name,
            "target": float(target or 0),
            "completed": float(completed or 0),
            "scrapped": float(scrapped or 0),
            "efficiency": round(completed / target * 100, 2) if target else 0,
            "scrap_rate": round(scrapped / produced * 100, 2) if produced else 0,
        })

    jobs_completed = (
        db.query(func.count(Job.id))
        .filter(Job.status == JobStatus.COMPLETED.value,
                *in_range(Job.actual_completion_date))
        .scalar()
    )

    issue_rows = (
        db.query(ProductionIssue.severity, func.count(ProductionIssue.id))
        .filter(*in_range(ProductionIssue.created_at))
        .group_by(ProductionIssue.severity)
        .all()
    )

    finished_routes = (
        db.query(JobRoute.actual_start, JobRoute.actual_complete)
        .filter(JobRoute.status == JobRouteStatus.COMPLETED.value,
                JobRoute.actual_start.isnot(None),
                JobRoute.actual_complete.isnot(None),
                *in_range(JobRoute.actual_complete))
        .all()
    )
    hours = [
        (as_utc(done) - as_utc(started)).total_seconds() / 3600
        for started, done in finished_routes
    ]

    return {
        "period_start": start,
        "period_end": end,
        "work_centers": efficiency,
        "jobs_completed": jobs_completed,
        "issues_by_severity": {severity: count for severity, count in issue_rows},
        "average_route_hours": round(sum(hours) / len(hours), 2) if hours else 0,
    }


def get_production_overview(db: Session):
    job_rows = db.query(Job.status, func.count(Job.id)).group_by(Job.status).all()
    active_routes = (
        db.query(func.count(JobRoute.id))
        .filter(JobRoute.status.in_(WORKING_ROUTE_STATUSES))
        .scalar()
    )
    open_issues = (
        db.query(func.count(ProductionIssue.id))
        .filter(ProductionIssue.status.in_([IssueStatus.OPEN.value, IssueStatus.INVESTIGATING.value]))
        .scalar()
    )
    return {
        "jobs_by_status": {status: count for status, count in job_rows},
        "active_routes": active_routes,
        "open_issues": open_issues,
        "pending_bom_approvals": count_pending_approvals(db),
    }
