from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.auth import allow_editor, validate_current_token
from shared.core.database import get_db
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ...crud.production import jobs_crud as crud
from ...schemas.production.jobs_schemas import (
    JobRouteOut, RouteCompleteRequest, RouteRescheduleRequest, RouteStatusUpdate)

router = APIRouter(
    prefix="/api/job-routes",
    tags=["job routes"],
    dependencies=[Depends(validate_current_token)]
)


@router.get("/{route_id}", response_model=JobRouteOut)
def get_route(route_id: UUID, db: Session = Depends(get_db)):
    return JobRouteOut.model_validate(crud.get_route_by_id(db, route_id))


@router.patch("/{route_id}/status", dependencies=[Depends(allow_editor)])
def update_route_status(route_id: UUID, update: RouteStatusUpdate, db: Session = Depends(get_db)):
    return success_response(
        data=crud.update_route_status(db, route_id, update),
        message=f"Route status updated to {update.status}",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.post("/{route_id}/complete")
def complete_route(
        route_id: UUID,
        req: RouteCompleteRequest,
        db: Session = Depends(get_db),
        current_user: UserToken = Depends(allow_editor)):
    return success_response(
        data=crud.complete_route(db, route_id, req, current_user),
        message="Route completed successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )


@router.post("/{route_id}/reschedule", dependencies=[Depends(allow_editor)])
def reschedule_route(route_id: UUID, req: RouteRescheduleRequest, db: Session = Depends(get_db)):
    return success_response(
        data=crud.reschedule_route(db, route_id, req),
        message="Route rescheduled successfully",
        status_code=AppStatusCode.UPDATED_SUCCESSFULLY
    )
