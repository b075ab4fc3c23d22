from uuid import UUID
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import error_response
from shared.utils.app_status_code import AppStatusCode

from ...enum.production_enum import ACTIVE_ROUTE_STATUSES
from ...models.production.activities import Activity
from ...models.production.boms import BOMActivity
from ...models.production.job_routes import JobRoute
from ...schemas.production.work_centers_schemas import (
    ActivityCreate, ActivityOut, ActivityRequest, ActivityUpdate)


def build_activity_filters(params: ActivityRequest):
    filters = []

    if params.activity_type:
        filters.append(Activity.activity_type == params.activity_type)

    if params.is_active is not None:
        filters.append(Activity.is_active == params.is_active)

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(Activity.name.ilike(search_term),
                           Activity.code.ilike(search_term)))

    return filters


def get_activities(db: Session, params: ActivityRequest):
    query = db.query(Activity).filter(*build_activity_filters(params))
    total = query.count()
    activities = (
        query.order_by(Activity.code.asc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return {"activities": [ActivityOut.model_validate(a) for a in activities], "total": total}


def get_activity_by_id(db: Session, activity_id: UUID) -> Activity:
    activity = db.query(Activity).filter(Activity.id == activity_id).first()
    if not activity:
        return error_response(
            message="Activity not found",
            status_code=str(AppStatusCode.NOT_FOUND_ERROR),
            http_status=404
        )
    return activity


def _check_duplicate_code(db: Session, code: str, exclude_id: UUID = None):
    query = db.query(Activity).filter(Activity.code == code.upper())
    if exclude_id:
        query = query.filter(Activity.id != exclude_id)
    if query.first():
        return error_response(
            message="An activity with this code already exists",
            status_code=str(AppStatusCode.DUPLICATE_ADD_ERROR),
            http_status=400
        )


def create_activity(db: Session, activity: ActivityCreate):
    _check_duplicate_code(db, activity.code)

    db_activity = Activity(**activity.model_dump())
    db_activity.code = activity.code.upper()
    db.add(db_activity)
    db.commit()
    db.refresh(db_activity)
    return ActivityOut.model_validate(db_activity)


def update_activity(db: Session, activity: ActivityUpdate):
    db_activity = get_activity_by_id(db, activity.id)
    update_data = activity.model_dump(exclude_unset=True, exclude={"id"})

    if update_data.get("code"):
        _check_duplicate_code(db, update_data["code"], exclude_id=db_activity.id)
        update_data["code"] = update_data["code"].upper()

    for key, value in update_data.items():
        setattr(db_activity, key, value)

    db.commit()
    db.refresh(db_activity)
    return ActivityOut.model_validate(db_activity)


def delete_activity(db: Session, activity_id: UUID):
    db_activity = get_activity_by_id(db, activity_id)

    active_routes = (
        db.query(func.count(JobRoute.id))
        .filter(JobRoute.activity_id == activity_id,
                JobRoute.status.in_(ACTIVE_ROUTE_STATUSES))
        .scalar()
    )
    if active_routes:
        return error_response(
            message="Cannot delete activity with active jobs",
            status_code=str(AppStatusCode.DELETE_RESTRICTED),
            http_status=400
        )

    has_history = (
        db.query(JobRoute.id).filter(JobRoute.activity_id == activity_id).first()
        or db.query(BOMActivity.id).filter(BOMActivity.activity_id == activity_id).first()
    )
    if has_history:
        db_activity.is_active = False
    else:
        db.delete(db_activity)
    db.commit()
    return {"message": "Activity deleted successfully"}


def get_activity_lookup(db: Session):
    return (
        db.query(Activity.id, Activity.name)
        .filter(Activity.is_active == True)
        .order_by(Activity.name.asc())
        .all()
    )
