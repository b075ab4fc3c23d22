from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from shared.helpers.datetime_helper import as_utc, start_of_day, utc_now
from shared.helpers.json_response_helper import error_response
from shared.helpers.sequence_helper import next_number
from shared.utils.app_status_code import AppStatusCode
from shared.utils.logger import get_logger

from ...enum.production_enum import (
    DEFAULT_ROUTE_HOURS, FINISHED_ROUTE_STATUSES, BOMStatus, JobRouteStatus, JobStatus)
from ...models.production.boms import ProductBOM
from ...models.production.job_material_consumption import JobMaterialConsumption
from ...models.production.job_routes import JobRoute
from ...models.production.jobs import Job
from ...schemas.production.jobs_schemas import (
    JobCreate, JobOut, JobRequest, JobRouteCreate, JobRouteOut, JobUpdate,
    RouteCompleteRequest, RouteRescheduleRequest, RouteStatusUpdate)
from ..inventory.inventory_crud import consume_inventory, get_inventory_item
from ..inventory.pallets_crud import user_uuid
from .activities_crud import get_activity_by_id
from .work_centers_crud import get_work_center_by_id

logger = get_logger(__name__)

DELETABLE_JOB_STATUSES = [JobStatus.CREATED.value, JobStatus.CANCELLED.value]


def generate_job_number(db: Session) -> str:
    return next_number(db, Job.job_number, f"JOB-{utc_now():%Y}-", 5)


def route_duration(route) -> timedelta:
    """Planned duration of a route, falling back to the default when a bound is missing."""
    if route.estimated_start and route.estimated_complete:
        return as_utc(route.estimated_complete) - as_utc(route.estimated_start)
    return timedelta(hours=DEFAULT_ROUTE_HOURS)


def planned_minutes(setup_time_minutes, run_time_per_unit, quantity) -> float:
    minutes = (setup_time_minutes or 0) + (run_time_per_unit or 0) * (quantity or 0)
    return minutes if minutes > 0 else DEFAULT_ROUTE_HOURS * 60


# ----------------------------------------------------------------------
# JOBS
# ----------------------------------------------------------------------

def build_job_filters(params: JobRequest):
    filters = []

    if params.status:
        filters.append(Job.status == params.status)

    if params.customer_id:
        filters.append(Job.customer_id == params.customer_id)

    if params.priority:
        filters.append(Job.priority == params.priority)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(Job.job_number.ilike(search_term),
                           Job.job_name.ilike(search_term)))

    return filters


def get_jobs(db: Session, params: JobRequest):
    query = db.query(Job).filter(*build_job_filters(params))
    total = query.count()
    jobs = (
        query.order_by(Job.priority.asc(), Job.job_number.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {"jobs": [JobOut.model_validate(j) for j in jobs], "total": total}


def get_job_by_id(db: Session, job_id: UUID) -> Job:
    job = db.query(Job).filter(Job.id == job_id).first()
    if not job:
        return error_response(
            message="Job not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )
    return job


def get_job(db: Session, job_id: UUID):
    return JobOut.model_validate(get_job_by_id(db, job_id))


def create_job(db: Session, job: JobCreate, current_user: UserToken):
    data = job.model_dump()
    if not data.get("job_number"):
        data["job_number"] = generate_job_number(db)
    elif db.query(Job).filter(Job.job_number == data["job_number"]).first():
        return error_response(
            message=f"Job '{data['job_number']}' already exists",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR),
            http_status=400
        )

    db_job = Job(**data, created_by=user_uuid(current_user))
    db.add(db_job)
    db.commit()
    db.refresh(db_job)
    logger.info(f"Job {db_job.job_number} created")
    return JobOut.model_validate(db_job)


def update_job(db: Session, job: JobUpdate):
    db_job = get_job_by_id(db, job.id)
    update_data = job.model_dump(exclude_unset=True, exclude={"id"})

    for key, value in update_data.items():
        setattr(db_job, key, value)

    if update_data.get("status") == JobStatus.COMPLETED.value:
        db_job.progress_percentage = 100
        db_job.actual_completion_date = db_job.actual_completion_date or utc_now()

    db.commit()
    db.refresh(db_job)
    return JobOut.model_validate(db_job)


def delete_job(db: Session, job_id: UUID):
    db_job = get_job_by_id(db, job_id)

    if db_job.status not in DELETABLE_JOB_STATUSES:
        return error_response(
            message="Only created or cancelled jobs can be deleted",
            status_code=str(AppStatusCode.DELETE_RESTRICTED),
            http_status=400
        )

    db.query(JobMaterialConsumption).filter(
        JobMaterialConsumption.job_id == job_id).delete(synchronize_session=False)
    db.delete(db_job)
    db.commit()
    return {"message": "Job deleted successfully"}


def generate_routes(db: Session, job_id: UUID):
    job = get_job_by_id(db, job_id)

    if job.routes:
        return error_response(
            message="Job already has routes",
            status_code=str(AppStatusCode.OPERATION_ERROR),
            http_status=400
        )

    bom = None
    if job.product_id:
        bom = (
            db.query(ProductBOM)
            .filter(ProductBOM.product_id == job.product_id,
                    ProductBOM.status == BOMStatus.ACTIVE.value)
            .first()
        )
    if not bom:
        return error_response(
            message="No active BOM found for this job's product",
            status_code=str(AppStatusCode.OPERATION_ERROR),
            http_status=400
        )

    start = as_utc(job.estimated_start_date) or utc_now()
    for bom_activity in bom.activities:
        minutes = planned_minutes(bom_activity.setup_time_minutes,
                                  bom_activity.run_time_per_unit, job.quantity)
        complete = start + timedelta(minutes=minutes)
        db.add(JobRoute(
            job_id=job.id,
            activity_id=bom_activity.activity_id,
            work_center_id=bom_activity.work_center_id,
            sequence_number=bom_activity.sequence_number,
            status=JobRouteStatus.PENDING.value,
            estimated_start=start,
            estimated_complete=complete,
            quantity_target=job.quantity,
            setup_notes=bom_activity.instructions,
        ))
        start = complete

    for material in bom.materials:
        waste = (material.waste_percentage or 0) / 100
        db.add(JobMaterialConsumption(
            job_id=job.id,
            material_product_id=material.material_product_id,
            quantity_planned=round(material.quantity_required * job.quantity * (1 + waste), 3),
            quantity_consumed=0,
            unit_of_measure=material.unit_of_measure,
        ))

    if bom.activities and not job.estimated_completion_date:
        job.estimated_completion_date = start
    if job.status == JobStatus.CREATED.value:
        job.status = JobStatus.PLANNED.value

    db.commit()
    db.refresh(job)
    logger.info(f"Generated {len(bom.activities)} routes for job {job.job_number}")
    return JobOut.model_validate(job)


def add_route(db: Session, job_id: UUID, route: JobRouteCreate):
    job = get_job_by_id(db, job_id)
    get_activity_by_id(db, route.activity_id)
    get_work_center_by_id(db, route.work_center_id)

    data = route.model_dump()
    if data.get("sequence_number") is None:
        last = (
            db.query(func.max(JobRoute.sequence_number))
            .filter(JobRoute.job_id == job_id)
            .scalar()
        )
        data["sequence_number"] = (last or 0) + 1
    if data.get("quantity_target") is None:
        data["quantity_target"] = job.quantity

    db_route = JobRoute(job_id=job.id, status=JobRouteStatus.PENDING.value, **data)
    db.add(db_route)
    db.commit()
    db.refresh(db_route)
    return JobRouteOut.model_validate(db_route)


def get_material_consumption(db: Session, job_id: UUID):
    get_job_by_id(db, job_id)
    rows = (
        db.query(JobMaterialConsumption)
        .filter(JobMaterialConsumption.job_id == job_id)
        .all()
    )
    return [
        {
            "id": r.id,
            "job_route_id": r.job_route_id,
            "material_product_id": r.material_product_id,
            "material_name": r.material_product.name if r.material_product else None,
            "quantity_planned": r.quantity_planned,
            "quantity_consumed": r.quantity_consumed,
            "unit_of_measure": r.unit_of_measure,
            "lot_number": r.lot_number,
            "consumed_at": r.consumed_at,
            "inventory_id": r.inventory_id,
        }
        for r in rows
    ]


# ----------------------------------------------------------------------
# ROUTES
# ----------------------------------------------------------------------

def get_route_by_id(db: Session, route_id: UUID) -> JobRoute:
    route = db.query(JobRoute).filter(JobRoute.id == route_id).first()
    if not route:
        return error_response(
            message="Job route not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )
    return route


def _start_job(job: Job, now: datetime):
    if job.status in (JobStatus.CREATED.value, JobStatus.PLANNED.value):
        job.status = JobStatus.IN_PROGRESS.value
    if not job.actual_start_date:
        job.actual_start_date = now


def refresh_job_progress(job: Job, now: datetime):
    total = len(job.routes)
    if not total:
        return
    finished = sum(1 for r in job.routes if r.status in FINISHED_ROUTE_STATUSES)
    if finished == total:
        job.status = JobStatus.COMPLETED.value
        job.progress_percentage = 100
        job.actual_completion_date = now
    else:
        job.progress_percentage = round(finished / total * 100)


def update_route_status(db: Session, route_id: UUID, update: RouteStatusUpdate):
    route = get_route_by_id(db, route_id)
    now = utc_now()

    route.status = update.status
    if update.status in (JobRouteStatus.SETUP.value, JobRouteStatus.IN_PROGRESS.value):
        if not route.actual_start:
            route.actual_start = now
        _start_job(route.job, now)
    elif update.status == JobRouteStatus.COMPLETED.value:
        route.actual_complete = now

    if update.status in FINISHED_ROUTE_STATUSES:
        db.flush()
        refresh_job_progress(route.job, now)

    db.commit()
    db.refresh(route)
    return JobRouteOut.model_validate(route)


def _record_consumption(db: Session, route: JobRoute, usage, current_user: UserToken, now: datetime):
    job = route.job
    inventory_item = None
    if usage.inventory_id:
        inventory_item = get_inventory_item(db, usage.inventory_id)
        if inventory_item.product_id != usage.material_product_id:
            return error_response(
                message="Inventory line does not hold the consumed material",
                status_code=str(AppStatusCode.INVALID_INPUT),
                http_status=400
            )
        consume_inventory(db, inventory_item, usage.quantity_consumed, current_user,
                          reference_type="job", reference_id=job.job_number,
                          reason="Job material consumption")

    row = (
        db.query(JobMaterialConsumption)
        .filter(JobMaterialConsumption.job_id == job.id,
                JobMaterialConsumption.material_product_id == usage.material_product_id,
                JobMaterialConsumption.consumed_at.is_(None))
        .first()
    )
    if row is None:
        row = JobMaterialConsumption(
            job_id=job.id,
            material_product_id=usage.material_product_id,
            quantity_planned=0,
        )
        db.add(row)

    row.job_route_id = route.id
    row.quantity_consumed = (row.quantity_consumed or 0) + usage.quantity_consumed
    row.lot_number = usage.lot_number or (inventory_item.lot_number if inventory_item else None)
    row.inventory_id = usage.inventory_id
    row.consumed_at = now
    row.consumed_by = user_uuid(current_user)


def complete_route(db: Session, route_id: UUID, req: RouteCompleteRequest, current_user: UserToken):
    route = get_route_by_id(db, route_id)
    if route.status in FINISHED_ROUTE_STATUSES:
        return error_response(
            message="Route is already finished",
            status_code=str(AppStatusCode.INVALID_STATUS_TRANSITION),
            http_status=400
        )
    now = utc_now()

    route.quantity_completed = (route.quantity_completed or 0) + req.quantity_completed
    route.quantity_scrapped = (route.quantity_scrapped or 0) + req.quantity_scrapped
    if req.production_notes is not None:
        route.production_notes = req.production_notes
    if req.quality_notes is not None:
        route.quality_notes = req.quality_notes
    route.operator_id = user_uuid(current_user)
    route.status = JobRouteStatus.COMPLETED.value
    route.actual_start = route.actual_start or now
    route.actual_complete = now

    for usage in req.material_consumption:
        _record_consumption(db, route, usage, current_user, now)

    db.flush()
    _start_job(route.job, now)
    refresh_job_progress(route.job, now)

    db.commit()
    db.refresh(route)
    logger.info(f"Route {route.id} of job {route.job.job_number} completed")
    return JobRouteOut.model_validate(route)


def reschedule_route(db: Session, route_id: UUID, req: RouteRescheduleRequest):
    route = get_route_by_id(db, route_id)
    if route.status in FINISHED_ROUTE_STATUSES:
        return error_response(
            message="Finished routes cannot be rescheduled",
            status_code=str(AppStatusCode.INVALID_STATUS_TRANSITION),
            http_status=400
        )

    duration = route_duration(route)
    if req.work_center_id:
        get_work_center_by_id(db, req.work_center_id)
        route.work_center_id = req.work_center_id

    start = as_utc(req.estimated_start)
    route.estimated_start = start
    route.estimated_complete = start + duration

    db.commit()
    db.refresh(route)
    return JobRouteOut.model_validate(route)


def get_schedule(db: Session, start: Optional[datetime] = None, end: Optional[datetime] = None,
                 work_center_id: Optional[UUID] = None):
    start = as_utc(start) or start_of_day(utc_now().date())
    end = as_utc(end) or start + timedelta(days=7)

    query = (
        db.query(JobRoute)
        .filter(JobRoute.estimated_start >= start, JobRoute.estimated_start < end)
    )
    if work_center_id:
        query = query.filter(JobRoute.work_center_id == work_center_id)

    routes = query.order_by(JobRoute.estimated_start.asc()).all()
    return [
        {
            **JobRouteOut.model_validate(r).model_dump(),
            "job_number": r.job.job_number,
            "job_name": r.job.job_name,
            "priority": r.job.priority,
        }
        for r in routes
    ]


def _parse_uuid(value: str) -> Optional[UUID]:
    try:
        return UUID(value)
    except ValueError:
        return None


def scan_code(db: Session, code: str):
    """Resolve a scanned job number or route id to the route to work on next."""
    code = code.strip()
    route_id = _parse_uuid(code)
    if route_id:
        route = db.query(JobRoute).filter(JobRoute.id == route_id).first()
        if route:
            return {"job": JobOut.model_validate(route.job), "route": JobRouteOut.model_validate(route)}

    job = db.query(Job).filter(func.upper(Job.job_number) == code.upper()).first()
    if not job:
        return error_response(
            message=f"No job or route matches '{code}'",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )

    active = next((r for r in job.routes if r.status not in FINISHED_ROUTE_STATUSES), None)
    return {
        "job": JobOut.model_validate(job),
        "route": JobRouteOut.model_validate(active) if active else None,
    }
