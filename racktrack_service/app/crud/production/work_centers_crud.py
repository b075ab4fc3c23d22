from uuid import UUID
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shared.helpers.datetime_helper import start_of_day, utc_now
from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode

from ...enum.production_enum import ACTIVE_ROUTE_STATUSES, JobRouteStatus
from ...models.production.activities import Activity
from ...models.production.boms import BOMActivity
from ...models.production.job_routes import JobRoute
from ...models.production.work_center_activities import WorkCenterActivity
from ...models.production.work_centers import WorkCenter
from ...schemas.production.jobs_schemas import JobRouteOut
from ...schemas.production.work_centers_schemas import (
    WorkCenterActivityCreate, WorkCenterActivityOut, WorkCenterActivityUpdate,
    WorkCenterCreate, WorkCenterOut, WorkCenterRequest, WorkCenterUpdate)

# routes shown as "active" on the work center detail page
WORKING_ROUTE_STATUSES = [
    JobRouteStatus.SETUP.value,
    JobRouteStatus.IN_PROGRESS.value,
    JobRouteStatus.PAUSED.value,
    JobRouteStatus.READY.value,
]


def build_work_center_filters(params: WorkCenterRequest):
    filters = []

    if params.type:
        filters.append(WorkCenter.type == params.type)

    if params.is_active is not None:
        filters.append(WorkCenter.is_active == params.is_active)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(WorkCenter.name.ilike(search_term),
                           WorkCenter.code.ilike(search_term)))

    return filters


def get_work_centers(db: Session, params: WorkCenterRequest):
    query = db.query(WorkCenter).filter(*build_work_center_filters(params))
    total = query.count()
    work_centers = (
        query.order_by(WorkCenter.code.asc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {"work_centers": [WorkCenterOut.model_validate(w) for w in work_centers], "total": total}


def get_work_center_by_id(db: Session, work_center_id: UUID) -> WorkCenter:
    work_center = db.query(WorkCenter).filter(WorkCenter.id == work_center_id).first()
    if not work_center:
        return error_response(
            message="Work center not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )
    return work_center


def _check_duplicate_code(db: Session, code: str, exclude_id: UUID = None):
    query = db.query(WorkCenter).filter(WorkCenter.code == code.upper())
    if exclude_id:
        query = query.filter(WorkCenter.id != exclude_id)
    if query.first():
        return error_response(
            message="A work center with this code already exists",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR),
            http_status=400
        )


def create_work_center(db: Session, work_center: WorkCenterCreate):
    _check_duplicate_code(db, work_center.code)

    db_work_center = WorkCenter(**work_center.model_dump())
    db_work_center.code = work_center.code.upper()
    db.add(db_work_center)
    db.commit()
    db.refresh(db_work_center)
    return WorkCenterOut.model_validate(db_work_center)


def update_work_center(db: Session, work_center: WorkCenterUpdate):
    db_work_center = get_work_center_by_id(db, work_center.id)
    update_data = work_center.model_dump(exclude_unset=True, exclude={"id"})

    if update_data.get("code"):
        _check_duplicate_code(db, update_data["code"], exclude_id=db_work_center.id)
        update_data["code"] = update_data["code"].upper()

    for key, value in update_data.items():
        setattr(db_work_center, key, value)

    db.commit()
    db.refresh(db_work_center)
    return WorkCenterOut.model_validate(db_work_center)


def delete_work_center(db: Session, work_center_id: UUID):
    db_work_center = get_work_center_by_id(db, work_center_id)

    active_routes = (
        db.query(func.count(JobRoute.id))
        .filter(JobRoute.work_center_id == work_center_id,
                JobRoute.status.in_(ACTIVE_ROUTE_STATUSES))
        .scalar()
    )
    if active_routes:
        return error_response(
            message="Cannot delete work center with active jobs",
            status_code=str(AppStatusCode.DELETE_RESTRICTED),
            http_status=400
        )

    # finished routes and BOM steps keep pointing at the row, so it is only deactivated
    has_history = (
        db.query(JobRoute.id).filter(JobRoute.work_center_id == work_center_id).first()
        or db.query(BOMActivity.id).filter(BOMActivity.work_center_id == work_center_id).first()
    )
    if has_history:
        db_work_center.is_active = False
    else:
        db.delete(db_work_center)
    db.commit()
    return {"message": "Work center deleted successfully"}


def get_work_center_lookup(db: Session):
    return (
        db.query(WorkCenter.id, WorkCenter.name)
        .filter(WorkCenter.is_active == True)
        .order_by(WorkCenter.name.asc())
        .all()
    )


def utilization_today(completed_quantity: float, capacity_per_hour, now=None) -> int:
    if not capacity_per_hour:
        return 0
    now = now or utc_now()
    hours_elapsed = max(1.0, (now - start_of_day(now.date())).total_seconds() / 3600)
    return round(completed_quantity / (capacity_per_hour * hours_elapsed) * 100)


def get_work_center_detail(db: Session, work_center_id: UUID):
    work_center = get_work_center_by_id(db, work_center_id)
    now = utc_now()

    active_routes = (
        db.query(JobRoute)
        .filter(JobRoute.work_center_id == work_center_id,
                JobRoute.status.in_(WORKING_ROUTE_STATUSES))
        .order_by(JobRoute.estimated_start.asc())
        .all()
    )
    completed_today = (
        db.query(JobRoute)
        .filter(JobRoute.work_center_id == work_center_id,
                JobRoute.status == JobRouteStatus.COMPLETED.value,
                JobRoute.actual_complete >= start_of_day(now.date()))
        .all()
    )
    completed_quantity = sum(r.quantity_completed or 0 for r in completed_today)

    return {
        "work_center": WorkCenterOut.model_validate(work_center),
        "activities": [WorkCenterActivityOut.model_validate(link) for link in work_center.activity_links],
        "active_routes": [JobRouteOut.model_validate(r) for r in active_routes],
        "completed_today": [JobRouteOut.model_validate(r) for r in completed_today],
        "utilization": utilization_today(completed_quantity, work_center.capacity_per_hour, now),
    }


# ----------------------------------------------------------------------
# ACTIVITY ASSIGNMENTS
# ----------------------------------------------------------------------

def assign_activity(db: Session, work_center_id: UUID, assignment: WorkCenterActivityCreate):
    get_work_center_by_id(db, work_center_id)

    if not db.query(Activity).filter(Activity.id == assignment.activity_id).first():
        return error_response(
            message="Activity not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )

    existing = (
        db.query(WorkCenterActivity)
        .filter(WorkCenterActivity.work_center_id == work_center_id,
                WorkCenterActivity.activity_id == assignment.activity_id)
        .first()
    )
    if existing:
        return error_response(
            message="Activity is already assigned to this work center",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR),
            http_status=400
        )

    link = WorkCenterActivity(work_center_id=work_center_id, **assignment.model_dump())
    db.add(link)
    db.commit()
    db.refresh(link)
    return WorkCenterActivityOut.model_validate(link)


def update_assignment(db: Session, work_center_id: UUID, assignment_id: UUID,
                      assignment: WorkCenterActivityUpdate):
    link = (
        db.query(WorkCenterActivity)
        .filter(WorkCenterActivity.id == assignment_id,
                WorkCenterActivity.work_center_id == work_center_id)
        .first()
    )
    if not link:
        return error_response(
            message="Activity assignment not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )

    for key, value in assignment.model_dump(exclude_unset=True).items():
        setattr(link, key, value)

    db.commit()
    db.refresh(link)
    return WorkCenterActivityOut.model_validate(link)


def unassign_activity(db: Session, work_center_id: UUID, activity_id: UUID):
    link = (
        db.query(WorkCenterActivity)
        .filter(WorkCenterActivity.work_center_id == work_center_id,
                WorkCenterActivity.activity_id == activity_id)
        .first()
    )
    if not link:
        return error_response(
            message="Activity assignment not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )

    db.delete(link)
    db.commit()
    return {"message": "Activity removed from work center"}
